# entity_normalizer/errors.py
from typing import Any


class NormalizationError(Exception):
    """Base class for everything the normalizer/denormalizer raises."""
    path: str = ""

    def _where(self) -> str:
        return f" at '{self.path}'" if self.path else ""


class SchemaDefinitionError(NormalizationError, ValueError):
    """A schema (or schema definition dict) is malformed."""


class UnknownSchemaError(SchemaDefinitionError):
    """A relation or call refers to a schema name that is not registered."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"unknown schema '{self.name}'"


class SchemaMismatchError(NormalizationError):
    """Input shape does not match the arity implied by the schema."""
    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        super().__init__(message, path)

    def __str__(self):
        return f"{self.message}{self._where()}"


class MissingIdError(NormalizationError):
    """An object being normalized has no usable ID."""
    def __init__(self, schema_name: str, path: str = ""):
        self.schema_name = schema_name
        self.path = path
        super().__init__(schema_name, path)

    def __str__(self):
        return f"'{self.schema_name}' entity has no id{self._where()}"


class MissingEntityError(NormalizationError, LookupError):
    """Denormalization hit an ID that is not in the entity table."""
    def __init__(self, schema_name: str, entity_id: Any, path: str = ""):
        self.schema_name = schema_name
        self.entity_id = entity_id
        self.path = path
        super().__init__(schema_name, entity_id, path)

    def __str__(self):
        return f"no '{self.schema_name}' entity with id {self.entity_id!r}{self._where()}"


class DepthExceededError(NormalizationError):
    """Traversal went deeper than the configured maximum."""
    def __init__(self, max_depth: int, path: str = ""):
        self.max_depth = max_depth
        self.path = path
        super().__init__(max_depth, path)

    def __str__(self):
        return f"maximum nesting depth {self.max_depth} exceeded{self._where()}"


class ConflictingEntityError(NormalizationError):
    """Two occurrences of one entity disagree on a field (strict merging only)."""
    def __init__(self, schema_name: str, entity_id: Any, field: str, existing: Any, incoming: Any):
        self.schema_name = schema_name
        self.entity_id = entity_id
        self.field = field
        self.existing = existing
        self.incoming = incoming
        super().__init__(schema_name, entity_id, field)

    def __str__(self):
        return (
            f"conflicting values for '{self.schema_name}' {self.entity_id!r} field "
            f"'{self.field}': {self.existing!r} != {self.incoming!r}"
        )


class UnknownMergeStrategyError(NormalizationError, ValueError):
    """A merge strategy was requested by a name nobody registered."""
