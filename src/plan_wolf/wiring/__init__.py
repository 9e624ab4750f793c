"""Handler wiring and dead code analysis."""

from .dead_code import DeadCodeResult, DeadSymbol, find_dead_code, is_whitelisted
from .handlers import HandlerDefect, HandlerReference, HandlerRegistry, build_registry

__all__ = [
    "DeadCodeResult",
    "DeadSymbol",
    "find_dead_code",
    "is_whitelisted",
    "HandlerDefect",
    "HandlerReference",
    "HandlerRegistry",
    "build_registry",
]
