# fooddelivery/normalizers/types.py
from typing import Any, Dict, Literal, Union
from pydantic import BaseModel, ConfigDict

RecordKind = Literal["combo"]
Record = Dict[str, Any]


# restaurant_id shapes found in stored combos
class ScalarReference(BaseModel):
    """Canonical form: the bare restaurant id."""
    model_config = ConfigDict(frozen=True)
    tag: Literal["scalar"] = "scalar"
    value: Union[str, int]


class EmbeddedSnapshot(BaseModel):
    """A whole restaurant document saved where its id belongs."""
    model_config = ConfigDict(frozen=True)
    tag: Literal["embedded"] = "embedded"
    id: Union[str, int]
    snapshot: Dict[str, Any]


class UnrecognizedReference(BaseModel):
    """Anything else. Never rewritten, always reported."""
    model_config = ConfigDict(frozen=True)
    tag: Literal["unrecognized"] = "unrecognized"
    raw: Any = None


RestaurantRef = Union[ScalarReference, EmbeddedSnapshot, UnrecognizedReference]
