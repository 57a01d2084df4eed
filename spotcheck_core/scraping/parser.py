"""
Scraped bill page -> BillTextReference.

Scraped pages are saved as '<session>-<printNo>-<yyyyMMddTHHmmss>.html'.
The page carries the active print number (e.g. 'S1234-A') in
'span.nv_bot_info > strong', the bill text in <pre> blocks under
'#nv_bot_contents' (up to an '<hr class="noprint">'), and the sponsor memo
in the last <pre> block of the page.
"""
import logging
import os
import re
from datetime import datetime
from typing import Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from spotcheck_core.exceptions import ParseError
from spotcheck_core.models import BaseBillId, BillId, BillTextReference
from spotcheck_core.scraping.text import format_bill_text, reconstruct_blocks, reconstruct_text

logger = logging.getLogger(__name__)

SCRAPED_FILENAME_PATTERN = re.compile(r"^(\d{4})-([A-Za-z]\d+)-(\d{8}T\d{6})\.html$", re.IGNORECASE)
PRINT_NO_PATTERN = re.compile(r"^([A-Za-z]\d+)(?:-([A-Za-z]))?$")
SCRAPED_DATE_TIME_FORMAT: str = "%Y%m%dT%H%M%S"

PRINT_NO_SELECTOR: str = "span.nv_bot_info > strong"
CONTENTS_ID: str = "nv_bot_contents"
NO_PRINT_CLASS: str = "noprint"


def parse_scraped_filename(filename: str) -> tuple[BaseBillId, datetime]:
    """
    Args:
        filename: Scraped file name (directory components are ignored)

    Returns:
        (base bill id, reference date time) encoded in the name

    Raises:
        ParseError: if the name does not match '<session>-<printNo>-<yyyyMMddTHHmmss>.html'
    """
    name = os.path.basename(filename)
    match = SCRAPED_FILENAME_PATTERN.match(name)
    if not match:
        raise ParseError(f"Could not parse scraped bill filename: {name}")
    try:
        base_bill_id = BaseBillId(match.group(2), int(match.group(1)))
        reference_date_time = datetime.strptime(match.group(3), SCRAPED_DATE_TIME_FORMAT)
    except ValueError as e:
        raise ParseError(f"Could not parse scraped bill filename: {name} ({e})") from e
    return base_bill_id, reference_date_time


def parse_print_no(print_no_text: str, session: int) -> BillId:
    """Parse the page's print number text ('S1234' or 'S1234-A') into a BillId."""
    match = PRINT_NO_PATTERN.match(print_no_text)
    if not match:
        raise ParseError(f"Could not parse scraped bill print no: {print_no_text}")
    base_print_no, version = match.group(1), match.group(2)
    try:
        bill_id = BillId(base_print_no + (version or ""), session)
    except ValueError as e:
        raise ParseError(f"Could not parse scraped bill print no: {print_no_text} ({e})") from e
    return bill_id


def _get_bill_id(document: BeautifulSoup, session: int) -> BillId:
    print_no_ele = document.select_one(PRINT_NO_SELECTOR)
    if print_no_ele is None:
        raise ParseError(f"Scraped bill page has no print number element ({PRINT_NO_SELECTOR})")
    return parse_print_no(print_no_ele.get_text(strip=True), session)


def _get_text_blocks(document: BeautifulSoup) -> list[Tag]:
    # Bill text ends at the noprint rule; fiscal notes etc. follow it
    contents = document.find(id=CONTENTS_ID)
    if contents is None:
        raise ParseError(f"Scraped bill page has no #{CONTENTS_ID} element")

    text_eles: list[Tag] = []
    for element in contents.find_all(recursive=False):
        if element.name == "pre":
            text_eles.append(element)
        elif element.name == "hr" and NO_PRINT_CLASS in (element.get("class") or []):
            break
    return text_eles


def _get_memo(document: BeautifulSoup, base_bill_id: BaseBillId) -> str:
    # Resolutions do not have sponsor memos
    if base_bill_id.bill_type.is_resolution:
        return ""
    pre_eles = document.find_all("pre")
    if not pre_eles:
        logger.warning(f"No memo block found for {base_bill_id}")
        return ""
    return reconstruct_text(pre_eles[-1])


def parse_reference(content: Union[str, bytes], filename: str) -> BillTextReference:
    """
    Parse one scraped bill page into a bill text reference.

    Args:
        content: Raw HTML of the scraped page
        filename: Name the page was saved under (carries session and scrape time)

    Returns:
        BillTextReference with active amendment, formatted full text and memo

    Raises:
        ParseError: if the filename or the page's print number is malformed
    """
    base_bill_id, reference_date_time = parse_scraped_filename(filename)

    document = BeautifulSoup(content, "html.parser")
    bill_id = _get_bill_id(document, base_bill_id.session)
    text = format_bill_text(reconstruct_blocks(_get_text_blocks(document)), bill_id.base_bill_id)
    memo = _get_memo(document, bill_id.base_bill_id)

    logger.debug(f"Parsed {filename} -> {bill_id} ({len(text)} chars text, {len(memo)} chars memo)")
    return BillTextReference(bill_id, reference_date_time, text, memo)
