from .text import (
    FormatRule,
    reconstruct_text,
    reconstruct_blocks,
    format_rules,
    format_bill_text,
)
from .parser import (
    parse_reference,
    parse_scraped_filename,
    parse_print_no,
)
from .scraper import HttpBillScraper, scraped_filename

__all__ = [
    "FormatRule",
    "reconstruct_text",
    "reconstruct_blocks",
    "format_rules",
    "format_bill_text",
    "parse_reference",
    "parse_scraped_filename",
    "parse_print_no",
    "HttpBillScraper",
    "scraped_filename",
]
