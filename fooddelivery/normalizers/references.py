from typing import Any, Optional
from .types import EmbeddedSnapshot, RestaurantRef, ScalarReference, UnrecognizedReference


def _scalar_id(v: Any) -> Optional[str | int]:
    """Return `v` if it can serve as an id value, else None."""
    if isinstance(v, bool):  # bool is an int subclass; never an id
        return None
    if isinstance(v, str):
        return v
    if isinstance(v, int):
        return v
    return None


def decode_restaurant_ref(value: Any) -> RestaurantRef:
    """
    Classify a stored restaurant_id into one of three shapes:
      - ScalarReference:       "64f0c2..." or 42
      - EmbeddedSnapshot:      {"_id": "64f0c2...", "name": ..., ...}
                               (also {"_id": {"$oid": "64f0c2..."}} from extended-JSON exports)
      - UnrecognizedReference: everything else (dict without a usable _id, list, None, float...)
    """
    sid = _scalar_id(value)
    if sid is not None:
        return ScalarReference(value=sid)

    if isinstance(value, dict) and "_id" in value:
        inner = value["_id"]
        if isinstance(inner, dict) and set(inner) == {"$oid"}:
            inner = inner["$oid"]
        sid = _scalar_id(inner)
        if sid is not None and sid != "":
            return EmbeddedSnapshot(id=sid, snapshot=value)

    return UnrecognizedReference(raw=value)


def is_scalar_ref(value: Any) -> bool:
    return isinstance(decode_restaurant_ref(value), ScalarReference)


def ref_id(value: Any) -> Optional[str | int]:
    """The restaurant id a stored value points at, whatever its shape (None if unknowable)."""
    ref = decode_restaurant_ref(value)
    if isinstance(ref, ScalarReference):
        return ref.value
    if isinstance(ref, EmbeddedSnapshot):
        return ref.id
    return None
