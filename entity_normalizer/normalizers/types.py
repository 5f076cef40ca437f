# entity_normalizer/normalizers/types.py
from dataclasses import dataclass, field
from typing import Any, Dict

Record = Dict[str, Any]                      # one flat entity row
EntityTable = Dict[str, Dict[str, Record]]   # schema name -> str(id) -> row
ResultShape = Any                            # id | [ids] | {key: ...}


@dataclass(frozen=True)
class NormalizedOutput:
    """What `normalize` hands back: the flat tables plus the ID skeleton."""
    entities: EntityTable = field(default_factory=dict)
    result: ResultShape = None

    def to_dict(self) -> Dict[str, Any]:
        return {"entities": self.entities, "result": self.result}
