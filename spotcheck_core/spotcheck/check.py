"""
Bill Text Spotcheck.

Compares a bill held in the primary data store against a scraped LBDC
reference and records every discrepancy as a Mismatch on an Observation.

Normalization tiers (weakest to strongest):
- raw:              text as stored / scraped
- normalized:       space runs collapsed, spaces around newlines dropped
- super-normalized: every non-word character dropped
- ultra-normalized: normalized, then line numbers and running page headers
                    ('S. 1234--A 2') dropped, then super-normalized

Only the super-normalized comparison decides whether the text differs.
When it does, all four tiers are reported so a reviewer can see how far
apart the two texts are.
"""
import logging
import re
from typing import Callable, Optional

from spotcheck_core.exceptions import ArgumentError
from spotcheck_core.models import Bill, BillAmendment, BaseBillId, BillId, BillTextReference, Chamber
from spotcheck_core.spotcheck.models import Mismatch, MismatchType, Observation

logger = logging.getLogger(__name__)

_SPACE_RUN = re.compile(r"[ ]+")
_SPACES_AT_LINE_EDGE = re.compile(r"(?<=\n)[ ]+|[ ]+(?=\n)")
_NON_WORD = re.compile(r"\W+", re.ASCII)
_LINE_NUMBER = re.compile(r"(?<=\n)\d{1,2} ")

MemoCheckPolicy = Callable[[BaseBillId], bool]


def normalize_text(text: str) -> str:
    text = _SPACE_RUN.sub(" ", text)
    return _SPACES_AT_LINE_EDGE.sub("", text)


def super_normalize_text(text: str) -> str:
    return _NON_WORD.sub("", text)


def page_marker_pattern(bill_id: BillId) -> re.Pattern:
    """Running page header such as 'S. 1234--A 2' alone on its own line."""
    version = "" if bill_id.is_base_version() else f"--{bill_id.version}"
    return re.compile(rf"(?<=\n){bill_id.bill_type.name}\. {bill_id.number}{re.escape(version)} \d(?=\n)")


def ultra_normalize_text(text: str, bill_id: BillId) -> str:
    text = _LINE_NUMBER.sub("", normalize_text(text))
    text = page_marker_pattern(bill_id).sub("", text)
    return super_normalize_text(text)


def senate_bills_only(base_bill_id: BaseBillId) -> bool:
    """Default memo policy: LBDC memos are only authoritative for Senate bills."""
    return base_bill_id.chamber == Chamber.SENATE and not base_bill_id.bill_type.is_resolution


class BillTextChecker:
    """
    Spot-checks stored bill text and memo against a BillTextReference.

    Stateless apart from the memo policy, so one instance can be shared
    across bills.
    """

    def __init__(self, memo_check_policy: Optional[MemoCheckPolicy] = None):
        """
        Args:
            memo_check_policy: Decides which bills get a memo comparison
                (default: Senate bills, no resolutions)
        """
        self.memo_check_policy = memo_check_policy or senate_bills_only

    def check(self, bill: Bill, reference: Optional[BillTextReference]) -> Observation:
        if reference is None:
            raise ArgumentError("BillTextReference cannot be None when performing spot check")

        reference_type, reference_date_time = reference.reference_id
        observation = Observation(
            reference_type=reference_type,
            reference_date_time=reference_date_time,
            key=str(bill.base_bill_id),
        )

        self._check_active_amendment(bill, reference, observation)
        if bill.has_amendment(reference.active_version):
            amendment = bill.get_amendment(reference.active_version)
            self._check_bill_text(amendment, reference, observation)
            if self.memo_check_policy(bill.base_bill_id):
                self._check_memo(amendment, reference, observation)
        else:
            logger.debug(f"{bill.base_bill_id} has no amendment {reference.active_version!r}; skipping text check")

        if observation.has_mismatches():
            logger.info(f"{bill.base_bill_id}: {len(observation.mismatches)} mismatch(es)")
        return observation

    def _check_active_amendment(self, bill: Bill, reference: BillTextReference, observation: Observation) -> None:
        if bill.active_version is None or bill.active_version != reference.active_version:
            observation.add_mismatch(Mismatch(
                mismatch_type=MismatchType.BILL_ACTIVE_AMENDMENT,
                reference_data=reference.active_version,
                observed_data=bill.active_version or "",
            ))

    def _check_bill_text(self, amendment: BillAmendment, reference: BillTextReference,
                         observation: Observation) -> None:
        data_text = amendment.full_text or ""
        ref_text = reference.text or ""
        super_normalized_data = super_normalize_text(data_text)
        super_normalized_ref = super_normalize_text(ref_text)
        if super_normalized_ref.lower() == super_normalized_data.lower():
            return

        tiers = (
            (MismatchType.BILL_FULL_TEXT, ref_text, data_text),
            (MismatchType.BILL_FULL_TEXT_NORMALIZED, normalize_text(ref_text), normalize_text(data_text)),
            (MismatchType.BILL_FULL_TEXT_SUPER_NORMALIZED, super_normalized_ref, super_normalized_data),
            (MismatchType.BILL_FULL_TEXT_ULTRA_NORMALIZED,
             ultra_normalize_text(ref_text, reference.bill_id),
             ultra_normalize_text(data_text, amendment.bill_id)),
        )
        for mismatch_type, reference_data, observed_data in tiers:
            observation.add_mismatch(Mismatch(
                mismatch_type=mismatch_type,
                reference_data=reference_data,
                observed_data=observed_data,
            ))

    def _check_memo(self, amendment: BillAmendment, reference: BillTextReference,
                    observation: Observation) -> None:
        data_memo = amendment.memo or ""
        ref_memo = reference.memo or ""
        if data_memo.lower() != ref_memo.lower():
            observation.add_mismatch(Mismatch(
                mismatch_type=MismatchType.BILL_MEMO,
                reference_data=ref_memo,
                observed_data=data_memo,
            ))
