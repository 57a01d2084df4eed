# spotcheck_core/spotcheck/models.py
"""
Spotcheck report records.

Design Decisions:
- Pydantic BaseModel for JSON serialization of reports
- Mismatch stores reference and observed values verbatim (never truncated or diffed)
- Observation is built fresh per comparison; mismatches are only ever appended
"""
from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class MismatchType(str, Enum):
    """Kinds of discrepancy a bill text spotcheck can report."""
    BILL_ACTIVE_AMENDMENT = "BILL_ACTIVE_AMENDMENT"
    BILL_FULL_TEXT = "BILL_FULL_TEXT"
    BILL_FULL_TEXT_NORMALIZED = "BILL_FULL_TEXT_NORMALIZED"
    BILL_FULL_TEXT_SUPER_NORMALIZED = "BILL_FULL_TEXT_SUPER_NORMALIZED"
    BILL_FULL_TEXT_ULTRA_NORMALIZED = "BILL_FULL_TEXT_ULTRA_NORMALIZED"
    BILL_MEMO = "BILL_MEMO"


class Mismatch(BaseModel):
    """One discrepancy between reference data and stored (observed) data."""
    mismatch_type: MismatchType
    reference_data: str = ""
    observed_data: str = ""


class Observation(BaseModel):
    """
    Result of spot-checking one bill against one reference.

    reference_type/reference_date_time identify the reference that was used,
    key is the base bill id ('S1234-2015') the observation is about.
    """
    reference_type: str
    reference_date_time: datetime
    key: str
    observed_date_time: datetime = Field(default_factory=datetime.now)
    mismatches: List[Mismatch] = Field(default_factory=list)

    def add_mismatch(self, mismatch: Mismatch) -> None:
        self.mismatches.append(mismatch)

    def has_mismatches(self) -> bool:
        return len(self.mismatches) > 0

    def mismatch_types(self) -> List[MismatchType]:
        return [m.mismatch_type for m in self.mismatches]
