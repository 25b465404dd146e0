"""Error kinds raised while parsing, building or pivoting a tableau."""


class SimplexError(Exception):
    """Base class for every failure of a solve."""


class ParseError(SimplexError, ValueError):
    """A term inside a linear expression is malformed."""


class MalformedConstraintError(SimplexError, ValueError):
    """A constraint lacks a relational operator or a numeric right-hand side."""


class UnknownVariableError(MalformedConstraintError):
    """A constraint references a variable the objective does not define."""


class InfeasibleInitialBasisError(SimplexError):
    """The slack variables do not form a feasible starting basis."""


class UnboundedError(SimplexError):
    """The entering column has no positive entry, so the objective grows without limit."""


class IterationLimitError(SimplexError):
    """The pivot loop exceeded the caller's iteration cap."""
