# entity_normalizer/normalizers/schema.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, Mapping, Optional, Union

from entity_normalizer.errors import SchemaDefinitionError, UnknownSchemaError
from .types import Record

IdAttribute = Union[str, Callable[[Record], Any]]


# -----------------------------
# Relation variants
# -----------------------------
@dataclass(frozen=True)
class SingleRelation:
    """Field holds one nested entity (or its ID)."""
    target: Union["Schema", str]
    many: ClassVar[bool] = False


@dataclass(frozen=True)
class ListRelation:
    """Field holds an ordered list of nested entities (or their IDs)."""
    target: Union["Schema", str]
    many: ClassVar[bool] = True


Relation = Union[SingleRelation, ListRelation]


def one(target: Union["Schema", str]) -> SingleRelation:
    return SingleRelation(target)


def many(target: Union["Schema", str]) -> ListRelation:
    return ListRelation(target)


def as_relation(value: Any) -> Relation:
    """
    Accept the shorthand forms used when declaring relations:
      Schema / "name"      -> SingleRelation
      [Schema] / ["name"]  -> ListRelation
    """
    if isinstance(value, (SingleRelation, ListRelation)):
        return value
    if isinstance(value, (Schema, str)):
        return SingleRelation(value)
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            raise SchemaDefinitionError(
                f"a list relation takes exactly one schema, got {len(value)}"
            )
        if isinstance(value[0], (Schema, str)):
            return ListRelation(value[0])
    raise SchemaDefinitionError(f"cannot use {value!r} as a relation")


def target_name(target: Union["Schema", str]) -> str:
    return target.name if isinstance(target, Schema) else target


# -----------------------------
# Entity schema
# -----------------------------
@dataclass(frozen=True, eq=False)
class Schema:
    """
    One entity type.

    `name` is the entity table key, `id_attribute` is a field name or a
    callable taking the raw object, `relations` maps field names to the
    nested entity type living in that field.
    """
    name: str
    id_attribute: IdAttribute = "id"
    relations: Mapping[str, Relation] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaDefinitionError("schema name must be a non-empty string")
        if not callable(self.id_attribute) and not (
            isinstance(self.id_attribute, str) and self.id_attribute
        ):
            raise SchemaDefinitionError(
                f"schema '{self.name}': id_attribute must be a field name or a callable"
            )
        rels = {str(k): as_relation(v) for k, v in dict(self.relations).items()}
        object.__setattr__(self, "relations", MappingProxyType(rels))

    def get_id(self, obj: Mapping[str, Any]) -> Any:
        if callable(self.id_attribute):
            return self.id_attribute(obj)
        return obj.get(self.id_attribute)

    def __repr__(self):
        return f"Schema({self.name!r}, relations={sorted(self.relations)})"


# -----------------------------
# Registry: name -> Schema, resolved lazily at traversal time
# -----------------------------
class SchemaRegistry:
    """
    Holds schemas by name so relations can point at each other by name.
    Cyclic graphs (post -> comment -> post) need no special construction:
    a name is only looked up when input data actually nests that deep.
    """
    def __init__(self, schemas: Iterable[Schema] = ()):
        self._schemas: Dict[str, Schema] = {}
        for s in schemas:
            self.register(s)

    def register(self, schema: Schema) -> Schema:
        current = self._schemas.get(schema.name)
        if current is not None and current is not schema:
            raise SchemaDefinitionError(f"schema '{schema.name}' is already registered")
        self._schemas[schema.name] = schema
        return schema

    def define(
        self,
        name: str,
        id_attribute: IdAttribute = "id",
        relations: Optional[Mapping[str, Any]] = None,
    ) -> Schema:
        """Build a Schema and register it in one go."""
        return self.register(Schema(name, id_attribute, relations or {}))

    def get(self, name: str) -> Schema:
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownSchemaError(name) from None

    def resolve(self, target: Union[Schema, str]) -> Schema:
        if isinstance(target, Schema):
            return target
        return self.get(target)

    def check(self) -> None:
        """Fail early if any relation names a schema that was never registered."""
        for schema in self._schemas.values():
            for rel in schema.relations.values():
                if isinstance(rel.target, str) and rel.target not in self._schemas:
                    raise UnknownSchemaError(rel.target)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[Schema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    @classmethod
    def from_definitions(cls, defs: Iterable[Mapping[str, Any]]) -> "SchemaRegistry":
        """
        Build a registry from plain (JSON-style) definitions:

            {"name": "posts", "id_attribute": "id",
             "relations": {"author": {"target": "authors"},
                           "comments": {"target": "comments", "many": true}}}

        A relation may also be given as a bare schema name (single relation).
        """
        registry = cls()
        for d in defs:
            if not isinstance(d, Mapping):
                raise SchemaDefinitionError(f"schema definition must be an object, got {d!r}")
            raw_relations = d.get("relations") or {}
            if not isinstance(raw_relations, Mapping):
                raise SchemaDefinitionError(
                    f"schema '{d.get('name')}': relations must be an object, got {raw_relations!r}"
                )
            relations: Dict[str, Relation] = {}
            for field_name, rel in raw_relations.items():
                if isinstance(rel, str):
                    relations[field_name] = one(rel)
                elif isinstance(rel, Mapping) and isinstance(rel.get("target"), str):
                    relations[field_name] = many(rel["target"]) if rel.get("many") else one(rel["target"])
                else:
                    raise SchemaDefinitionError(
                        f"schema '{d.get('name')}': bad relation '{field_name}': {rel!r}"
                    )
            registry.define(d.get("name"), d.get("id_attribute") or "id", relations)
        registry.check()
        return registry


def resolve(target: Union[Schema, str], registry: Optional[SchemaRegistry]) -> Schema:
    """Turn a relation target into a Schema, using the registry for names."""
    if isinstance(target, Schema):
        return target
    if registry is None:
        raise UnknownSchemaError(target)
    return registry.get(target)
