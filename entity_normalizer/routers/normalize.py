import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from entity_normalizer.errors import (
    ConflictingEntityError,
    MissingEntityError,
    NormalizationError,
    SchemaDefinitionError,
    UnknownMergeStrategyError,
)
from entity_normalizer.models import (
    DenormalizeRequest,
    DenormalizeResponse,
    NormalizeRequest,
    NormalizeResponse,
    SchemaDef,
)
from entity_normalizer.normalizers import SchemaRegistry, denormalize, normalize

log = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Router setup
# --------------------------------------------------------------------
router = APIRouter(prefix="", tags=["normalize"])


def _registry_of(defs: List[SchemaDef]) -> SchemaRegistry:
    """Build a registry from request schema definitions (400 on bad ones)."""
    try:
        return SchemaRegistry.from_definitions(d.model_dump() for d in defs)
    except SchemaDefinitionError as e:
        log.warning("schema definitions rejected: %s", e)
        raise HTTPException(400, str(e))


def _status_of(e: NormalizationError) -> int:
    """
    Map library errors to HTTP status codes:
      bad schema / merge strategy -> 400
      missing entity              -> 404
      strict merge conflict       -> 409
      shape mismatch, no id, depth -> 422
    """
    if isinstance(e, (SchemaDefinitionError, UnknownMergeStrategyError)):
        return 400
    if isinstance(e, MissingEntityError):
        return 404
    if isinstance(e, ConflictingEntityError):
        return 409
    return 422


@router.post("/normalize", response_model=NormalizeResponse)
def normalize_endpoint(req: NormalizeRequest) -> Dict[str, Any]:
    """
    Flatten nested `data` into entity tables.

    Request body:
      {"schemas": [...], "entity": "posts", "many": true, "data": [...]}

    Response JSON:
      {"entities": {"posts": {"1": {...}}, ...}, "result": [1, ...]}
    """
    registry = _registry_of(req.schemas)
    schema = [req.entity] if req.many else req.entity
    try:
        out = normalize(req.data, schema, registry=registry, merge_strategy=req.merge_strategy)
    except NormalizationError as e:
        log.warning("normalize failed: %s", e)
        raise HTTPException(_status_of(e), str(e))
    return out.to_dict()


@router.post("/denormalize", response_model=DenormalizeResponse)
def denormalize_endpoint(req: DenormalizeRequest) -> Dict[str, Any]:
    """
    Rebuild nested objects from `result` + `entities`.

    Request body:
      {"schemas": [...], "entity": "posts", "many": true,
       "result": [1, 2], "entities": {...}}
    """
    registry = _registry_of(req.schemas)
    schema = [req.entity] if req.many else req.entity
    try:
        data = denormalize(req.result, schema, req.entities, registry=registry)
    except NormalizationError as e:
        log.warning("denormalize failed: %s", e)
        raise HTTPException(_status_of(e), str(e))
    return {"data": data}
