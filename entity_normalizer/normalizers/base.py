# entity_normalizer/normalizers/base.py
from typing import Any, Protocol
from .types import Record

class MergeStrategy(Protocol):
    def merge(self, schema_name: str, entity_id: Any, existing: Record, incoming: Record) -> Record:
        """
        Combine two flat records for the same entity into a NEW record.
        Do not mutate `existing` or `incoming`.
        """
        ...
