"""Search methods, selected by ``SearchMethod``."""
from typing import Dict, Type

from msrvscan.search.base import SearchStrategy
from msrvscan.search.bisect import Bisect
from msrvscan.search.linear import Linear
from msrvscan.versioning.models import SearchMethod

SEARCH_METHODS: Dict[SearchMethod, Type[SearchStrategy]] = {
    SearchMethod.LINEAR: Linear,
    SearchMethod.BISECT: Bisect,
}


def strategy_for(method: SearchMethod) -> Type[SearchStrategy]:
    """Return the strategy class implementing ``method``."""
    return SEARCH_METHODS[method]


__all__ = ["SearchStrategy", "Linear", "Bisect", "SEARCH_METHODS", "strategy_for"]
