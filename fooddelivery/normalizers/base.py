from typing import Protocol, runtime_checkable

from .types import Record, RecordKind


@runtime_checkable
class Normalizer(Protocol):
    """
    Anything `maintenance.normalize` can drive.

    normalize_record gets a plain record dict and returns a new one with
    restaurant_id in canonical form. The input is left untouched. A record
    that can't be put in canonical form raises RecordShapeAnomaly.
    """

    def normalize_record(self, kind: RecordKind, rec: Record) -> Record: ...
