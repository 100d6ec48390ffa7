"""
Combo data repair.

Some combos were saved with a whole restaurant document in `restaurant_id`
instead of the restaurant's id. Order placement and restaurant lookups join on
that field, so those rows silently fail to match. `normalize` rewrites them in
place and then audits the whole collection.

Safe to re-run: combos that already hold an id are never written.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fooddelivery.db import session_scope
from fooddelivery.exceptions import ReadFailure, RecordShapeAnomaly, VerificationMismatch, WriteFailure
from fooddelivery.normalizers import Normalizer, get_default_normalizer, is_scalar_ref
from fooddelivery.repositories import READ_ERROR, ComboCollection
from fooddelivery.settings import REPAIR_BATCH_SIZE

log = logging.getLogger(__name__)


class NormalizationReport(BaseModel):
    processed: int = 0
    corrected: int = 0
    already_correct: int = 0
    verified: bool = False
    anomalies: List[Dict[str, Any]] = Field(default_factory=list)
    write_failures: List[Dict[str, Any]] = Field(default_factory=list)
    read_failures: List[Dict[str, Any]] = Field(default_factory=list)
    mismatches: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.verified and not (self.anomalies or self.write_failures or self.read_failures)

    def summary(self) -> str:
        return (
            f"processed={self.processed} corrected={self.corrected} "
            f"already_correct={self.already_correct} anomalies={len(self.anomalies)} "
            f"write_failures={len(self.write_failures)} read_failures={len(self.read_failures)} "
            f"mismatches={len(self.mismatches)} "
            f"verified={self.verified}"
        )


def normalize(
    collection: ComboCollection,
    normalizer: Optional[Normalizer] = None,
    batch_size: int = REPAIR_BATCH_SIZE,
) -> NormalizationReport:
    """
    Repair pass over every combo, then a verification pass.

    Per combo:
      * restaurant_id already an id        -> counted as already correct, no write
      * embedded document with an _id      -> point update of restaurant_id only
      * anything else                      -> reported as an anomaly, no write
    Unreadable combos and write failures are reported and the batch continues.
    """
    normalizer = normalizer or get_default_normalizer()
    report = NormalizationReport()

    for batch in collection.iter_batches(batch_size):
        for rec in batch:
            report.processed += 1
            cid, name = rec.get("combo_id"), rec.get("name")
            log.debug("processing combo %s (%s): restaurant_id=%r", cid, name, rec.get("restaurant_id"))

            if READ_ERROR in rec:
                report.read_failures.append(ReadFailure(cid, name, rec[READ_ERROR]).as_dict())
                continue

            try:
                norm = normalizer.normalize_record("combo", rec)
            except RecordShapeAnomaly as e:
                log.warning("skipping combo %s (%s): %s", cid, name, e.message)
                report.anomalies.append(e.as_dict())
                continue

            new_ref = norm.get("restaurant_id")
            if new_ref == rec.get("restaurant_id"):
                report.already_correct += 1
                continue

            try:
                found = collection.update_by_id(cid, {"restaurant_id": new_ref})
            except WriteFailure as e:
                report.write_failures.append(WriteFailure(cid, name, e.message).as_dict())
                continue
            if not found:
                log.warning("combo %s (%s) disappeared before it could be updated", cid, name)
                report.write_failures.append(WriteFailure(cid, name, "combo not found").as_dict())
                continue

            report.corrected += 1
            log.info("combo %s (%s): restaurant_id -> %s", cid, name, new_ref)

    # Audit from the store, not from what we think we wrote
    collection.refresh()
    for batch in collection.iter_batches(batch_size):
        for rec in batch:
            if READ_ERROR in rec:
                # downstream readers choke on it just the same
                issue = VerificationMismatch(rec.get("combo_id"), rec.get("name"), f"unreadable: {rec[READ_ERROR]}")
            elif not is_scalar_ref(rec.get("restaurant_id")):
                issue = VerificationMismatch(
                    rec.get("combo_id"), rec.get("name"),
                    f"restaurant_id is still {type(rec.get('restaurant_id')).__name__}",
                )
            else:
                continue
            log.warning("%s", issue)
            report.mismatches.append(issue.as_dict())
    report.verified = not report.mismatches

    log.info("combo repair finished: %s", report.summary())
    return report


def repair_combos(database_url: Optional[str] = None, batch_size: int = REPAIR_BATCH_SIZE) -> NormalizationReport:
    """
    Run `normalize` against a data store.
    Raises ConnectivityError before touching anything if the store is unreachable;
    the connection is released however the run ends.
    """
    with session_scope(database_url) as db:
        return normalize(ComboCollection(db), batch_size=batch_size)
