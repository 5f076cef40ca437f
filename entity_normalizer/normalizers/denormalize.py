# entity_normalizer/normalizers/denormalize.py
import logging
from typing import Any, Mapping, Optional

from entity_normalizer.errors import DepthExceededError, MissingEntityError, SchemaMismatchError
from .normalize import SchemaLike, copy_value, depth_limit, describe, is_sequence, item_schema, path_index, path_key
from .schema import ListRelation, Relation, Schema, SchemaRegistry, resolve
from .types import EntityTable, Record, ResultShape

log = logging.getLogger(__name__)


class Denormalizer:
    """Rebuilds the nested object graph from a result shape and entity tables."""
    def __init__(self, registry: Optional[SchemaRegistry] = None, max_depth: Optional[int] = None):
        self.registry = registry
        self.max_depth = depth_limit(max_depth)

    def denormalize(self, result: ResultShape, schema: SchemaLike, entities: EntityTable) -> Any:
        try:
            out = self._visit(result, schema, entities, "", 0)
        except RecursionError:
            raise DepthExceededError(self.max_depth) from None
        log.debug("denormalized %s result", describe(schema))
        return out

    def _visit(self, value: Any, schema: SchemaLike, entities: EntityTable, path: str, depth: int) -> Any:
        if is_sequence(schema):
            inner = item_schema(schema)
            if not is_sequence(value):
                raise SchemaMismatchError(
                    f"expected a list of {describe(inner)} ids, got {type(value).__name__}", path
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

        return self._unvisit_entity(value, resolve(schema, self.registry), entities, path, depth)

    def _unvisit_entity(self, ref: Any, schema: Schema, entities: EntityTable, path: str, depth: int) -> Any:
        if depth > self.max_depth:
            raise DepthExceededError(self.max_depth, path)
        if ref is None:
            return None
        if is_sequence(ref):
            raise SchemaMismatchError(f"expected a single '{schema.name}' id, got a list", path)

        if isinstance(ref, Mapping):
            # object left inline instead of an ID; rebuild its relations in place
            record: Record = ref
        else:
            record = (entities.get(schema.name) or {}).get(str(ref))
            if record is None:
                raise MissingEntityError(schema.name, ref, path)

        out: Record = {}
        for k, v in record.items():
            rel = schema.relations.get(k)
            if rel is None:
                out[k] = copy_value(v, self.max_depth, path_key(path, k))
            else:
                out[k] = self._unvisit_relation(v, rel, entities, path_key(path, k), depth + 1)
        return out

    def _unvisit_relation(self, value: Any, rel: Relation, entities: EntityTable, path: str, depth: int) -> Any:
        if value is None:
            return None
        target = resolve(rel.target, self.registry)
        if isinstance(rel, ListRelation):
            if not is_sequence(value):
                raise SchemaMismatchError(
                    f"expected a list of '{target.name}' ids, got {type(value).__name__}", path
                )
            return [
                self._unvisit_entity(item, target, entities, path_index(path, i), depth)
                for i, item in enumerate(value)
            ]
        return self._unvisit_entity(value, target, entities, path, depth)


def denormalize(
    result: ResultShape,
    schema: SchemaLike,
    entities: EntityTable,
    *,
    registry: Optional[SchemaRegistry] = None,
    max_depth: Optional[int] = None,
) -> Any:
    """Inverse of `normalize`: look every ID up and rebuild nested objects."""
    return Denormalizer(registry, max_depth).denormalize(result, schema, entities)
