"""
Plain text reconstruction and formatting for scraped LBDC bill pages.

LBDC renders bill text inside <pre> blocks and marks newly added text with
<u> tags. The stored bill text marks the same additions in upper case, so
reconstruction uppercases underlined text. Formatting then repairs the
header lines that the scraped rendering compacts.
"""
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Union

from bs4.element import NavigableString, PreformattedString, Tag

from spotcheck_core.models import BaseBillId, Chamber

EMPHASIS_TAGS: frozenset[str] = frozenset({"u"})


# =============================================================================
# TEXT RECONSTRUCTION
# =============================================================================

def _append_text(node: Tag, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name in EMPHASIS_TAGS:
                # Underlined subtree is taken whole, with whitespace collapsed
                parts.append(" ".join(child.get_text().split()).upper())
            else:
                _append_text(child, parts)
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # Comments, doctypes and CDATA are not visible text
            parts.append(str(child))


def reconstruct_text(node: Tag) -> str:
    """
    Serialize a parsed element to plain text in document order.

    Text nodes are copied verbatim (including newlines and indentation).
    Underlined elements contribute their text in upper case and are not
    descended into. Every other element is recursed.
    """
    parts: list[str] = []
    _append_text(node, parts)
    return "".join(parts)


def reconstruct_blocks(nodes: Iterable[Tag]) -> str:
    return "".join(reconstruct_text(node) for node in nodes)


# =============================================================================
# FORMATTING RULES
# =============================================================================

Replacement = Union[str, Callable[[re.Match], str]]


@dataclass(frozen=True)
class FormatRule:
    """A single substitution applied to reconstructed bill text.

    scope "first" replaces at most one occurrence, "all" replaces every one.
    """
    name: str
    pattern: re.Pattern
    replacement: Replacement
    scope: Literal["first", "all"] = "all"

    def apply(self, text: str) -> str:
        count = 1 if self.scope == "first" else 0
        return self.pattern.sub(self.replacement, text, count=count)


CLEANUP_RULES: tuple[FormatRule, ...] = (
    FormatRule(
        "strip_control_chars",
        # Carriage returns, the BOM/specials block, private use area, and
        # the single space the scraped <pre> rendering adds after each newline
        re.compile(r"[\r\uE000-\uF8FF\uFEFF-\uFFFF]|(?<=\n) "),
        "",
    ),
    FormatRule("section_mark", re.compile("§"), "S"),
)


def _legislative_resolution_start(match: re.Match) -> str:
    return "\nLEGISLATIVE RESOLUTION " + match.group(1).lower()


def resolution_rules(chamber: Chamber) -> tuple[FormatRule, ...]:
    return (
        FormatRule(
            "resolution_boilerplate",
            re.compile(r"^\n\n[\w .-]+\n\n[\w .:/-]+\n"),
            "",
            "first",
        ),
        FormatRule(
            "legislative_resolution_start",
            # PROVIDING opens a chamber resolution, handled by the next rule
            re.compile(r"^\n[ ]+(?!PROVIDING\b)([A-Z]{2,})"),
            _legislative_resolution_start,
            "first",
        ),
        FormatRule(
            "chamber_resolution_start",
            re.compile(r"^\n[ ]+PROVIDING"),
            f"\n{chamber.value} RESOLUTION providing",
            "first",
        ),
    )


BILL_HEADER_RULES: tuple[FormatRule, ...] = (
    FormatRule(
        "state_of_new_york",
        re.compile(r"^\n\n[ ]{12}STATE OF NEW YORK(?=\n)"),
        "\n" + " " * 27 + "S T A T E   O F   N E W   Y O R K",
        "first",
    ),
    FormatRule(
        "in_senate",
        re.compile(r"(?<=\n)[ ]{16}IN SENATE(?=\n)"),
        " " * 35 + "I N  S E N A T E",
        "first",
    ),
    FormatRule(
        "in_assembly",
        re.compile(r"(?<=\n)[ ]{15}IN ASSEMBLY(?=\n)"),
        " " * 33 + "I N  A S S E M B L Y",
        "first",
    ),
    FormatRule(
        "senate_assembly",
        re.compile(r"(?<=\n)[ ]{12}SENATE - ASSEMBLY(?=\n)"),
        " " * 29 + "S E N A T E - A S S E M B L Y",
        "first",
    ),
)


def format_rules(base_bill_id: BaseBillId) -> tuple[FormatRule, ...]:
    """Ordered rules for a bill. Cleanup always runs before the indentation-sensitive rules."""
    if base_bill_id.bill_type.is_resolution:
        return CLEANUP_RULES + resolution_rules(base_bill_id.chamber)
    return CLEANUP_RULES + BILL_HEADER_RULES


def format_bill_text(text: str, base_bill_id: BaseBillId) -> str:
    for rule in format_rules(base_bill_id):
        text = rule.apply(text)
    return text
