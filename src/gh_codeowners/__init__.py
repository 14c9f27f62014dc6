from .errors import CodeownersError, InvalidPatternError, ParseError, PatternParseError
from .ownership import OwnerQuery, OwnershipIndex
from .patterns import compile_pattern
from .version import __version__

__all__ = [
    "CodeownersError",
    "InvalidPatternError",
    "OwnerQuery",
    "OwnershipIndex",
    "ParseError",
    "PatternParseError",
    "__version__",
    "compile_pattern",
]
