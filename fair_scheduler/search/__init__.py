"""Combo search strategies; importing this package registers them."""

from typing import Optional

from ..base_search import BaseSearch, Reporter
from ..config import Config
from ..exceptions import ConfigurationError
from ..models import OptionSet, SearchResult
from ..registry import registry
from .exhaustive import ExhaustiveSearch
from .parallel import ParallelSearch

__all__ = ["ExhaustiveSearch", "ParallelSearch", "build_search", "find_best_combo"]


def build_search(
    option_set: OptionSet,
    config: Config,
    strategy: Optional[str] = None,
    start: int = 0,
    seed: Optional[int] = None,
    reporter: Optional[Reporter] = None,
) -> BaseSearch:
    """Create a search; the strategy defaults to parallel when more than one worker is configured."""
    name = strategy or registry.default_strategy(config.workers)
    search_cls = registry.get_strategy(name) if name else None
    if search_cls is None:
        raise ConfigurationError(
            f"Unknown search strategy {name!r}; available: {', '.join(registry.list_strategies())}"
        )
    return search_cls(option_set, config, start=start, seed=seed, reporter=reporter)


def find_best_combo(
    option_set: OptionSet,
    config: Config,
    strategy: Optional[str] = None,
    start: int = 0,
    seed: Optional[int] = None,
    reporter: Optional[Reporter] = None,
) -> SearchResult:
    """Build and run a search in one step."""
    return build_search(option_set, config, strategy, start, seed, reporter).run()
