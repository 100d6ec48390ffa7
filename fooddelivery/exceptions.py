"""Errors raised while repairing combo records."""

from typing import Any


class ComboRepairError(Exception):
    """Base exception for the combo repair job."""


class ConnectivityError(ComboRepairError):
    """Raised when the data store cannot be reached. Fatal: nothing is touched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot reach data store at {url}: {reason}")


class RecordIssue(ComboRepairError):
    """A problem with a single combo; reported, never fatal to the batch."""

    kind = "issue"

    def __init__(self, combo_id: str, name: str | None, message: str):
        self.combo_id = combo_id
        self.name = name
        self.message = message
        super().__init__(f"{self.kind} on combo {combo_id} ({name}): {message}")

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "combo_id": self.combo_id,
            "name": self.name,
            "error": self.message,
        }


class RecordShapeAnomaly(RecordIssue):
    """restaurant_id is neither a scalar nor an embedded snapshot with an _id."""

    kind = "anomaly"


class WriteFailure(RecordIssue):
    """The corrective update for one combo failed."""

    kind = "write_failure"


class VerificationMismatch(RecordIssue):
    """A combo still holds a non-scalar restaurant_id after the pass."""

    kind = "mismatch"


class ReadFailure(RecordIssue):
    """The stored combo could not be decoded (e.g. a JSON column that doesn't parse)."""

    kind = "read_failure"
