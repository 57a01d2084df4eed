import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


# =============================================================================
# CHAMBERS AND BILL TYPES
# =============================================================================
#
# NY print numbers start with a single letter that fixes both the chamber the
# bill was introduced in and whether it is a resolution:
#
#   Letter   Chamber     Kind
#   ------   --------    ----------------------------
#   S        SENATE      bill
#   J        SENATE      resolution
#   B        SENATE      concurrent resolution
#   R        SENATE      rules resolution
#   L        SENATE      joint resolution
#   A        ASSEMBLY    bill
#   E        ASSEMBLY    rules resolution
#   C        ASSEMBLY    concurrent resolution
#   K        ASSEMBLY    resolution
# =============================================================================

class Chamber(str, Enum):
    SENATE = "SENATE"
    ASSEMBLY = "ASSEMBLY"

    def __str__(self) -> str:
        return self.value


class BillType(Enum):
    """Bill type letter with its chamber and resolution flag."""
    # Letter is part of the value so members sharing chamber/kind stay distinct
    S = ("S", Chamber.SENATE, False)
    J = ("J", Chamber.SENATE, True)
    B = ("B", Chamber.SENATE, True)
    R = ("R", Chamber.SENATE, True)
    L = ("L", Chamber.SENATE, True)
    A = ("A", Chamber.ASSEMBLY, False)
    E = ("E", Chamber.ASSEMBLY, True)
    C = ("C", Chamber.ASSEMBLY, True)
    K = ("K", Chamber.ASSEMBLY, True)

    @property
    def chamber(self) -> Chamber:
        return self.value[1]

    @property
    def is_resolution(self) -> bool:
        return self.value[2]

    @classmethod
    def from_letter(cls, letter: str) -> "BillType":
        try:
            return cls[letter.upper()]
        except KeyError:
            raise ValueError(f"Unknown bill type letter: {letter!r}") from None

    def __str__(self) -> str:
        return self.name


# =============================================================================
# BILL IDENTIFIERS
# =============================================================================

BASE_VERSION: str = ""

_PRINT_NO_PATTERN = re.compile(r"^([A-Za-z])(\d+)([A-Za-z]?)$")


def _split_print_no(print_no: str) -> tuple[str, int, str]:
    match = _PRINT_NO_PATTERN.match(print_no.strip())
    if not match:
        raise ValueError(f"Invalid print number: {print_no!r}")
    letter = BillType.from_letter(match.group(1)).name
    return letter, int(match.group(2)), match.group(3).upper()


@dataclass(frozen=True)
class BaseBillId:
    """Bill type + number + session year, shared by every amendment of a bill."""
    print_no: str
    session: int

    def __post_init__(self):
        letter, number, version = _split_print_no(self.print_no)
        if version:
            raise ValueError(f"Base print number cannot carry a version: {self.print_no!r}")
        object.__setattr__(self, "print_no", f"{letter}{number}")

    @property
    def bill_type(self) -> BillType:
        return BillType.from_letter(self.print_no[0])

    @property
    def number(self) -> int:
        return int(self.print_no[1:])

    @property
    def chamber(self) -> Chamber:
        return self.bill_type.chamber

    def with_version(self, version: str = BASE_VERSION) -> "BillId":
        return BillId(self.print_no + (version or ""), self.session)

    @classmethod
    def parse(cls, value: str) -> "BaseBillId":
        """Parse the '<printNo>-<session>' form used on the command line."""
        print_no, _, session = value.partition("-")
        if not session.isdigit():
            raise ValueError(f"Expected <printNo>-<session>, got {value!r}")
        return cls(print_no, int(session))

    def __str__(self) -> str:
        return f"{self.print_no}-{self.session}"


@dataclass(frozen=True)
class BillId:
    """A single amendment of a bill. An empty version is the base (original) print."""
    print_no: str
    session: int

    def __post_init__(self):
        letter, number, version = _split_print_no(self.print_no)
        object.__setattr__(self, "print_no", f"{letter}{number}{version}")

    @property
    def version(self) -> str:
        last = self.print_no[-1]
        return last if last.isalpha() else BASE_VERSION

    @property
    def base_print_no(self) -> str:
        return self.print_no[:-1] if self.version else self.print_no

    @property
    def base_bill_id(self) -> BaseBillId:
        return BaseBillId(self.base_print_no, self.session)

    @property
    def bill_type(self) -> BillType:
        return BillType.from_letter(self.print_no[0])

    @property
    def number(self) -> int:
        return int(self.base_print_no[1:])

    @property
    def chamber(self) -> Chamber:
        return self.bill_type.chamber

    def is_base_version(self) -> bool:
        return self.version == BASE_VERSION

    def __str__(self) -> str:
        return f"{self.print_no}-{self.session}"


# =============================================================================
# REFERENCE AND STORED BILL DATA
# =============================================================================

REFERENCE_TYPE_SCRAPED_BILL: str = "LBDC_SCRAPED_BILL"


@dataclass(frozen=True)
class BillTextReference:
    """Bill text and memo scraped from LBDC at a point in time.

    The bill id carries the amendment that was active when the page was
    scraped. Memo is empty for resolutions."""
    bill_id: BillId
    reference_date_time: datetime
    text: str
    memo: str = ""

    @property
    def base_bill_id(self) -> BaseBillId:
        return self.bill_id.base_bill_id

    @property
    def active_version(self) -> str:
        return self.bill_id.version

    @property
    def reference_id(self) -> tuple[str, datetime]:
        return (REFERENCE_TYPE_SCRAPED_BILL, self.reference_date_time)


@dataclass
class BillAmendment:
    """Stored full text and sponsor memo for one amendment."""
    bill_id: BillId
    full_text: str = ""
    memo: str = ""


@dataclass
class Bill:
    """Bill as held in the primary data store. Read-only to the spotcheck."""
    base_bill_id: BaseBillId
    active_version: Optional[str] = BASE_VERSION
    amendments: dict[str, BillAmendment] = field(default_factory=dict)

    def has_amendment(self, version: str) -> bool:
        return version in self.amendments

    def get_amendment(self, version: str) -> BillAmendment:
        try:
            return self.amendments[version]
        except KeyError:
            raise KeyError(f"{self.base_bill_id} has no amendment {version!r}") from None

    def add_amendment(self, amendment: BillAmendment) -> None:
        self.amendments[amendment.bill_id.version] = amendment
