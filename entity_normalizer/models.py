# entity_normalizer/models.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

# -----------------------------
# Request/response bodies for the HTTP API
# -----------------------------
class RelationDef(BaseModel):
    target: str                 # name of the related schema
    many: bool = False          # True -> list of entities


class SchemaDef(BaseModel):
    # One entity type, e.g. {"name": "posts", "relations": {"author": {"target": "authors"}}}
    name: str
    id_attribute: str = "id"
    relations: Dict[str, RelationDef] = Field(default_factory=dict)


class NormalizeRequest(BaseModel):
    schemas: List[SchemaDef]
    entity: str                 # schema name of the top-level input
    many: bool = False          # True -> `data` is a list of `entity`
    data: Any = None
    merge_strategy: Optional[str] = None


class NormalizeResponse(BaseModel):
    entities: Dict[str, Dict[str, Dict[str, Any]]]
    result: Any = None


class DenormalizeRequest(BaseModel):
    schemas: List[SchemaDef]
    entity: str
    many: bool = False
    result: Any = None
    entities: Dict[str, Dict[str, Dict[str, Any]]] = Field(default_factory=dict)


class DenormalizeResponse(BaseModel):
    data: Any = None


class HealthResponse(BaseModel):
    ok: bool = True
    service: str
    version: int
