"""
Registry of combo search strategies.
"""

from typing import Dict, Type, List, Optional
from .base_search import BaseSearch, SearchMetadata


class SearchRegistry:
    def __init__(self):
        self._strategies: Dict[str, Type[BaseSearch]] = {}

    def register(self, name: str):
        def decorator(cls: Type[BaseSearch]):
            self._strategies[name] = cls
            return cls
        return decorator

    def get_strategy(self, name: str) -> Optional[Type[BaseSearch]]:
        return self._strategies.get(name)

    def list_strategies(self) -> List[str]:
        return sorted(self._strategies)

    def get_metadata(self, name: str) -> Optional[SearchMetadata]:
        cls = self.get_strategy(name)
        return cls.get_metadata() if cls else None

    def get_all_metadata(self) -> Dict[str, SearchMetadata]:
        return {name: cls.get_metadata() for name, cls in sorted(self._strategies.items())}

    def default_strategy(self, workers: int) -> Optional[str]:
        """First registered strategy matching whether more than one worker is available."""
        want_parallel = workers > 1
        for name, cls in sorted(self._strategies.items()):
            if cls.get_metadata().parallel == want_parallel:
                return name
        return None


# Global registry instance
registry = SearchRegistry()
