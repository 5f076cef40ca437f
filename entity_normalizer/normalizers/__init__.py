from .normalize import normalize, Normalizer
from .denormalize import denormalize, Denormalizer
from .merge import get_merge_strategy, LastWriteWins, FirstWriteWins, StrictMerge, MERGE_STRATEGIES
from .schema import Schema, SchemaRegistry, SingleRelation, ListRelation, one, many
from .types import EntityTable, NormalizedOutput, Record
from .base import MergeStrategy

__all__ = [
    "normalize",
    "Normalizer",
    "denormalize",
    "Denormalizer",
    "get_merge_strategy",
    "LastWriteWins",
    "FirstWriteWins",
    "StrictMerge",
    "MERGE_STRATEGIES",
    "Schema",
    "SchemaRegistry",
    "SingleRelation",
    "ListRelation",
    "one",
    "many",
    "EntityTable",
    "NormalizedOutput",
    "Record",
    "MergeStrategy",
]
