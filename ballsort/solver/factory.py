"""
Strategy Factory Module - Name-based registry of search strategies.

Strategies register themselves with @register_strategy when the
strategies package is imported. Lookups ignore case and surrounding
whitespace, so names read from config files or the command line work
as typed.
"""

from typing import Any, Dict, List, Type

from .base import SolverStrategy


# Registered strategy classes keyed by lower-case name
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "bfs"


def _normalize(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Strategy name must be a non-empty string")
    return name.strip().lower()


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator adding a strategy to the registry.

    Usage:
        @register_strategy
        class DepthLimitedStrategy(SolverStrategy):
            name = "dls"
            ...

    Args:
        cls: SolverStrategy subclass with a unique `name`

    Returns:
        The class unchanged

    Raises:
        TypeError: If cls is not a SolverStrategy subclass
        ValueError: If another class already uses the name
    """
    if not (isinstance(cls, type) and issubclass(cls, SolverStrategy)):
        raise TypeError(f"Only SolverStrategy subclasses can be registered, got {cls!r}")
    key = _normalize(cls.name)
    existing = _STRATEGIES.get(key)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"Strategy name '{key}' already used by {existing.__name__}"
        )
    _STRATEGIES[key] = cls
    return cls


def get_strategy_class(name: str) -> Type[SolverStrategy]:
    """
    Look up a registered strategy class.

    Args:
        name: Strategy name, any case

    Returns:
        Strategy class

    Raises:
        ValueError: If no strategy has that name
    """
    key = _normalize(name)
    try:
        return _STRATEGIES[key]
    except KeyError:
        available = ", ".join(sorted(_STRATEGIES))
        raise ValueError(f"Unknown strategy: {name}. Available: {available}") from None


def create_strategy(name: str, **kwargs: Any) -> SolverStrategy:
    """
    Instantiate a strategy by name.

    Args:
        name: Strategy name (e.g., "bfs", "astar")
        **kwargs: Constructor options such as prune_relabels

    Returns:
        New strategy instance
    """
    return get_strategy_class(name)(**kwargs)


def get_strategy_names() -> List[str]:
    """Registered strategy names in registration order."""
    return list(_STRATEGIES)


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Describe every registered strategy for menus and --help output.

    Returns:
        List of {"name", "description"} dicts
    """
    return [
        {"name": key, "description": cls.description}
        for key, cls in _STRATEGIES.items()
    ]


def get_default_strategy_name() -> str:
    """
    Strategy used when the caller names none.

    Returns:
        DEFAULT_STRATEGY when registered, otherwise the first registered name

    Raises:
        RuntimeError: If no strategy is registered
    """
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    if not _STRATEGIES:
        raise RuntimeError("No solver strategies registered")
    return next(iter(_STRATEGIES))
