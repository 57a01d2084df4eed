"""
Pytest fixtures and configuration.

Following TDD principles:
- Fixtures provide real-world-like scraped pages and stored bills
- Mocks used only for collaborators (scraper, store, reporter)
- Each test should be independent and fast
"""
import pytest
from datetime import datetime
from unittest.mock import MagicMock

from spotcheck_core.models import BaseBillId, Bill, BillAmendment, BillId, BillTextReference


# =============================================================================
# SCRAPED PAGE FIXTURES
# =============================================================================

def build_bill_page(print_no_text: str, text_blocks: list[str], memo: str = "",
                    fiscal_note: str = "Fiscal note: none.") -> str:
    """Build an LBDC-style bill page: print number, text <pre>s, noprint rule, memo."""
    pres = "".join(f"<pre>{block}</pre>\n" for block in text_blocks)
    memo_html = f"<pre>{memo}</pre>\n" if memo else ""
    return (
        "<html><head><title>NYS Bill</title></head><body>\n"
        f'<span class="nv_bot_info"><strong>{print_no_text}</strong> 2015-2016 Regular Sessions</span>\n'
        '<div id="nv_bot_contents">\n'
        f"{pres}"
        '<hr class="noprint">\n'
        f"<pre>{fiscal_note}</pre>\n"
        f"{memo_html}"
        "</div>\n"
        "</body></html>"
    )


SENATE_BILL_TEXT = (
    "\n\n             STATE OF NEW YORK\n"
    " ________________________________________________________________________\n"
    "\n"
    "                                  1234--A\n"
    "\n"
    "                 IN SENATE\n"
    "\n"
    " January 7, 2015\n"
    "\n"
    " AN ACT to amend the tax law, in relation to the <u>sales tax exemption</u>\n"
    "\n"
    "   Section 1. § 1115 of the tax law is amended to read as follows:\n"
)

SENATE_BILL_MEMO = (
    "BILL NUMBER: S1234A\n"
    "\n"
    "TITLE OF BILL: An act to amend the tax law, in relation to the sales tax\n"
)


@pytest.fixture
def bill_page_builder():
    return build_bill_page


@pytest.fixture
def senate_bill_page() -> str:
    return build_bill_page("S1234-A", [SENATE_BILL_TEXT], memo=SENATE_BILL_MEMO)


@pytest.fixture
def senate_bill_memo() -> str:
    return SENATE_BILL_MEMO


@pytest.fixture
def senate_bill_filename() -> str:
    return "2015-S1234-20150310T143000.html"


@pytest.fixture
def resolution_page() -> str:
    text = (
        "\n\nSenate Resolution No. 100\n"
        "\n"
        "BY: Senator SMITH\n"
        "\n"
        "             MOURNING the death of a distinguished citizen\n"
    )
    return build_bill_page("J100", [text])


# =============================================================================
# STORED BILL / REFERENCE FIXTURES
# =============================================================================

@pytest.fixture
def reference_date_time() -> datetime:
    return datetime(2015, 3, 10, 14, 30, 0)


@pytest.fixture
def sample_text() -> str:
    return "\nAN ACT to amend the tax law, in relation to the sales tax exemption\n"


@pytest.fixture
def sample_reference(reference_date_time, sample_text) -> BillTextReference:
    return BillTextReference(
        bill_id=BillId("S1234A", 2015),
        reference_date_time=reference_date_time,
        text=sample_text,
        memo="Sponsor memo for S1234A",
    )


@pytest.fixture
def sample_bill(sample_text) -> Bill:
    base_bill_id = BaseBillId("S1234", 2015)
    bill = Bill(base_bill_id=base_bill_id, active_version="A")
    bill.add_amendment(BillAmendment(base_bill_id.with_version(""), "\nAN ACT original text\n", "Original memo"))
    bill.add_amendment(BillAmendment(base_bill_id.with_version("A"), sample_text, "Sponsor memo for S1234A"))
    return bill


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================

@pytest.fixture
def mock_document_store():
    store = MagicMock()
    store.get_pending_documents.return_value = []
    store.get_reference_bill_ids.return_value = []
    store.get_latest_reference.return_value = None
    return store


@pytest.fixture
def mock_scraper():
    scraper = MagicMock()
    scraper.scrape.return_value = 0
    return scraper


@pytest.fixture
def mock_bill_repository():
    repository = MagicMock()
    repository.get_bill.return_value = None
    return repository


@pytest.fixture
def mock_reporter():
    return MagicMock()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def temp_db(tmp_path):
    """Temporary SQLite database for integration tests."""
    from spotcheck_core.db.cache import init_database
    db_path = tmp_path / "test.db"
    conn = init_database(str(db_path))
    yield conn
    conn.close()
