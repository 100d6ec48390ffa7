from copy import deepcopy
from .base import Normalizer
from .references import decode_restaurant_ref
from .types import EmbeddedSnapshot, RecordKind, Record, UnrecognizedReference
from fooddelivery.exceptions import RecordShapeAnomaly

class RuleNormalizer(Normalizer):
    """
    Rule-based combo normalizer:
    rewrites an embedded restaurant snapshot in `restaurant_id`
    down to the snapshot's `_id`. Every other field is passed through.
    """
    def normalize_record(self, kind: RecordKind, rec: Record) -> Record:
        r = deepcopy(rec)  # work on a copy so we don’t mutate the input
        if kind == "combo":
            r["restaurant_id"] = norm_restaurant_ref(r)
        return r


def norm_restaurant_ref(rec: Record):
    """Return the scalar restaurant id for a combo record, or raise RecordShapeAnomaly."""
    ref = decode_restaurant_ref(rec.get("restaurant_id"))
    if isinstance(ref, UnrecognizedReference):
        raise RecordShapeAnomaly(
            rec.get("combo_id"), rec.get("name"),
            f"restaurant_id is neither an id nor a document with _id: {ref.raw!r}",
        )
    if isinstance(ref, EmbeddedSnapshot):
        return ref.id
    return ref.value


def get_default_normalizer() -> Normalizer:
    return RuleNormalizer()
