"""Bill text spotcheck - multi-tier comparison of stored bill text against scraped references"""

from spotcheck_core.spotcheck.models import (
    Mismatch,
    MismatchType,
    Observation,
)
from spotcheck_core.spotcheck.check import (
    BillTextChecker,
    normalize_text,
    super_normalize_text,
    ultra_normalize_text,
    senate_bills_only,
)

__all__ = [
    'Mismatch',
    'MismatchType',
    'Observation',
    'BillTextChecker',
    'normalize_text',
    'super_normalize_text',
    'ultra_normalize_text',
    'senate_bills_only',
]
