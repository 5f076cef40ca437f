# entity_normalizer/normalizers/normalize.py
import logging
from copy import deepcopy
from typing import Any, Mapping, Optional, Union

from entity_normalizer.errors import (
    DepthExceededError,
    MissingIdError,
    SchemaDefinitionError,
    SchemaMismatchError,
)
from entity_normalizer.settings import NORMALIZER_MAX_DEPTH
from .base import MergeStrategy
from .merge import get_merge_strategy
from .schema import ListRelation, Relation, Schema, SchemaRegistry, resolve
from .types import EntityTable, NormalizedOutput, Record, ResultShape

log = logging.getLogger(__name__)

# What callers may pass as a schema:
#   Schema | "name"          -> one entity
#   [Schema] | ["name"]      -> list of entities
#   {"key": <any of these>}  -> object whose listed keys hold entities
SchemaLike = Union[Schema, str, list, tuple, Mapping]


# --- path helpers, only used for error messages ---

def path_key(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)

def path_index(path: str, i: int) -> str:
    return f"{path}[{i}]"

def is_sequence(v: Any) -> bool:
    return isinstance(v, (list, tuple))

def item_schema(schema: Union[list, tuple]) -> SchemaLike:
    """Unwrap a one-element list schema."""
    if len(schema) != 1:
        raise SchemaDefinitionError(f"a list schema takes exactly one schema, got {len(schema)}")
    return schema[0]

def describe(schema: SchemaLike) -> str:
    if isinstance(schema, Schema):
        return f"'{schema.name}'"
    if isinstance(schema, str):
        return f"'{schema}'"
    return "nested"

def depth_limit(max_depth: Optional[int]) -> int:
    """Resolve the configured default and reject negative limits."""
    limit = NORMALIZER_MAX_DEPTH if max_depth is None else max_depth
    if not isinstance(limit, int) or limit < 0:
        raise ValueError(f"max_depth must be a non-negative integer, got {limit!r}")
    return limit

def copy_value(value: Any, max_depth: int, path: str) -> Any:
    """deepcopy a plain field; values nested past the interpreter stack become DepthExceededError."""
    try:
        return deepcopy(value)
    except RecursionError:
        raise DepthExceededError(max_depth, path) from None


class Normalizer:
    """
    Walks nested input following the schema and collects every entity into
    flat per-type tables, replacing nested entities with their IDs.

    One instance can be reused for many calls; each call builds fresh tables.
    """
    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        merge_strategy: Union[str, MergeStrategy, None] = None,
        max_depth: Optional[int] = None,
    ):
        self.registry = registry
        self.merge_strategy = get_merge_strategy(merge_strategy)
        self.max_depth = depth_limit(max_depth)

    def normalize(self, data: Any, schema: SchemaLike) -> NormalizedOutput:
        entities: EntityTable = {}
        try:
            result = self._visit(data, schema, entities, "", 0)
        except RecursionError:
            # a limit above what the interpreter stack allows
            raise DepthExceededError(self.max_depth) from None
        log.debug(
            "normalized %s input into %s",
            describe(schema), {name: len(rows) for name, rows in entities.items()},
        )
        return NormalizedOutput(entities=entities, result=result)

    # -----------------------------
    # Traversal
    # -----------------------------
    def _visit(self, value: Any, schema: SchemaLike, entities: EntityTable, path: str, depth: int) -> ResultShape:
        if is_sequence(schema):
            inner = item_schema(schema)
            if not is_sequence(value):
                raise SchemaMismatchError(
                    f"expected a list of {describe(inner)} entities, got {type(value).__name__}", path
                )
            return [
                self._visit(item, inner, entities, path_index(path, i), depth)
                for i, item in enumerate(value)
            ]

        if isinstance(schema, Mapping):
            if not isinstance(value, Mapping):
                raise SchemaMismatchError(f"expected an object, got {type(value).__name__}", path)
            out = {}
            for k, v in value.items():
                if k in schema:
                    out[k] = self._visit(v, schema[k], entities, path_key(path, k), depth)
                else:
                    out[k] = copy_value(v, self.max_depth, path_key(path, k))
            return out

        return self._visit_entity(value, resolve(schema, self.registry), entities, path, depth)

    def _visit_entity(self, value: Any, schema: Schema, entities: EntityTable, path: str, depth: int) -> Any:
        if depth > self.max_depth:
            raise DepthExceededError(self.max_depth, path)
        if value is None:
            return None
        if is_sequence(value):
            raise SchemaMismatchError(f"expected a single '{schema.name}' entity, got a list", path)
        if not isinstance(value, Mapping):
            # already a reference (an ID); nothing to extract
            return value

        record: Record = {}
        for k, v in value.items():
            rel = schema.relations.get(k)
            if rel is None:
                record[k] = copy_value(v, self.max_depth, path_key(path, k))
            else:
                record[k] = self._visit_relation(v, rel, entities, path_key(path, k), depth + 1)

        entity_id = schema.get_id(value)
        if entity_id is None:
            raise MissingIdError(schema.name, path)
        self._store(entities, schema.name, entity_id, record)
        return entity_id

    def _visit_relation(self, value: Any, rel: Relation, entities: EntityTable, path: str, depth: int) -> Any:
        if value is None:
            return None
        target = resolve(rel.target, self.registry)
        if isinstance(rel, ListRelation):
            if not is_sequence(value):
                raise SchemaMismatchError(
                    f"expected a list of '{target.name}' entities, got {type(value).__name__}", path
                )
            return [
                self._visit_entity(item, target, entities, path_index(path, i), depth)
                for i, item in enumerate(value)
            ]
        return self._visit_entity(value, target, entities, path, depth)

    def _store(self, entities: EntityTable, name: str, entity_id: Any, record: Record) -> None:
        """Upsert one flat record; repeated IDs go through the merge strategy."""
        table = entities.setdefault(name, {})
        key = str(entity_id)
        existing = table.get(key)
        if existing is None:
            table[key] = record
            return
        log.debug("merging repeated %s entity %r", name, entity_id)
        table[key] = self.merge_strategy.merge(name, entity_id, existing, record)


def normalize(
    data: Any,
    schema: SchemaLike,
    *,
    registry: Optional[SchemaRegistry] = None,
    merge_strategy: Union[str, MergeStrategy, None] = None,
    max_depth: Optional[int] = None,
) -> NormalizedOutput:
    """
    Normalize `data` according to `schema`.

    Returns NormalizedOutput(entities, result) where `entities` maps schema
    name -> str(id) -> flat record and `result` mirrors the input's shape
    with every top-level entity replaced by its ID.
    """
    return Normalizer(registry, merge_strategy, max_depth).normalize(data, schema)
