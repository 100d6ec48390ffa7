from .rules import RuleNormalizer, get_default_normalizer, norm_restaurant_ref
from .references import decode_restaurant_ref, is_scalar_ref, ref_id
from .types import (
    EmbeddedSnapshot,
    Record,
    RecordKind,
    RestaurantRef,
    ScalarReference,
    UnrecognizedReference,
)
from .base import Normalizer

__all__ = [
    "get_default_normalizer",
    "norm_restaurant_ref",
    "RuleNormalizer",
    "decode_restaurant_ref",
    "is_scalar_ref",
    "ref_id",
    "EmbeddedSnapshot",
    "Record",
    "RecordKind",
    "RestaurantRef",
    "ScalarReference",
    "UnrecognizedReference",
    "Normalizer",
]
