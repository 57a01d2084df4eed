# Bill Text Spotcheck Core Library
# Main entry point: from spotcheck_core.orchestrator import run_spotcheck

from .config import load_config
from .exceptions import SpotcheckError, ParseError, ArgumentError
from .orchestrator import BillTextSpotcheckProcess, run_spotcheck

from .models import (
    Chamber,
    BillType,
    BaseBillId,
    BillId,
    BillTextReference,
    BillAmendment,
    Bill,
)

from .spotcheck import (
    Mismatch,
    MismatchType,
    Observation,
    BillTextChecker,
)

from .scraping import parse_reference

__all__ = [
    # Main entry point
    "run_spotcheck",
    "BillTextSpotcheckProcess",
    "load_config",
    # Errors
    "SpotcheckError",
    "ParseError",
    "ArgumentError",
    # Models
    "Chamber",
    "BillType",
    "BaseBillId",
    "BillId",
    "BillTextReference",
    "BillAmendment",
    "Bill",
    # Spotcheck
    "Mismatch",
    "MismatchType",
    "Observation",
    "BillTextChecker",
    "parse_reference",
]
