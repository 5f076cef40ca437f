# entity_normalizer/normalizers/merge.py
import logging
from typing import Any, Dict, Union

from entity_normalizer.errors import ConflictingEntityError, UnknownMergeStrategyError
from entity_normalizer.settings import NORMALIZER_MERGE_STRATEGY
from .base import MergeStrategy
from .types import Record

log = logging.getLogger(__name__)


class LastWriteWins(MergeStrategy):
    """Fields from the occurrence seen later in traversal order win."""
    name = "last_write_wins"

    def merge(self, schema_name: str, entity_id: Any, existing: Record, incoming: Record) -> Record:
        return {**existing, **incoming}


class FirstWriteWins(MergeStrategy):
    """The first occurrence keeps its fields; later ones only fill gaps."""
    name = "first_write_wins"

    def merge(self, schema_name: str, entity_id: Any, existing: Record, incoming: Record) -> Record:
        return {**existing, **{k: v for k, v in incoming.items() if k not in existing}}


class StrictMerge(MergeStrategy):
    """
    Union of both records, but any field present in both with a different
    value is an error instead of a silent overwrite.
    """
    name = "strict"

    def merge(self, schema_name: str, entity_id: Any, existing: Record, incoming: Record) -> Record:
        for k, v in incoming.items():
            if k in existing and existing[k] != v:
                raise ConflictingEntityError(schema_name, entity_id, k, existing[k], v)
        return {**existing, **incoming}


MERGE_STRATEGIES: Dict[str, type] = {
    LastWriteWins.name: LastWriteWins,
    FirstWriteWins.name: FirstWriteWins,
    StrictMerge.name: StrictMerge,
}


def get_merge_strategy(strategy: Union[str, MergeStrategy, None] = None) -> MergeStrategy:
    """
    Factory for merge strategies.
    Accepts a registered name, an object with a `merge` method, or None
    for the configured default.
    """
    if strategy is None:
        strategy = NORMALIZER_MERGE_STRATEGY
    if not isinstance(strategy, str):
        if not callable(getattr(strategy, "merge", None)):
            raise UnknownMergeStrategyError(f"{strategy!r} is not a merge strategy")
        return strategy
    try:
        return MERGE_STRATEGIES[strategy.strip().lower()]()
    except KeyError:
        log.warning("unknown merge strategy requested: %s", strategy)
        raise UnknownMergeStrategyError(
            f"unknown merge strategy '{strategy}' (known: {', '.join(sorted(MERGE_STRATEGIES))})"
        ) from None
