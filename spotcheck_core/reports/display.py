from rich.console import Console
from rich.panel import Panel

from spotcheck_core.spotcheck.models import MismatchType, Observation

console = Console()

TEXT_MISMATCH_TYPES = frozenset({
    MismatchType.BILL_FULL_TEXT,
    MismatchType.BILL_FULL_TEXT_NORMALIZED,
    MismatchType.BILL_FULL_TEXT_SUPER_NORMALIZED,
    MismatchType.BILL_FULL_TEXT_ULTRA_NORMALIZED,
})


def display_observation(observation: Observation) -> None:
    """
    Display one spotcheck observation in the console.

    Color Coding:
        - Text mismatch: RED panel border
        - Active amendment / memo mismatch only: YELLOW panel border
        - No mismatches: GREEN panel border

    Values are summarized by length here; the report files carry them in full.
    """
    types = set(observation.mismatch_types())
    if types & TEXT_MISMATCH_TYPES:
        color, label = "red", "TEXT MISMATCH"
    elif types:
        color, label = "yellow", "MISMATCH"
    else:
        color, label = "green", "OK"

    lines = [
        f"[cyan]Reference:[/cyan] {observation.reference_type} @ {observation.reference_date_time:%Y-%m-%d %H:%M:%S}",
        f"[cyan]Mismatches:[/cyan] {len(observation.mismatches)}",
    ]
    for mismatch in observation.mismatches:
        if mismatch.mismatch_type == MismatchType.BILL_ACTIVE_AMENDMENT:
            lines.append(
                f"  • {mismatch.mismatch_type.value}: "
                f"reference={mismatch.reference_data!r} stored={mismatch.observed_data!r}"
            )
        else:
            lines.append(
                f"  • {mismatch.mismatch_type.value}: "
                f"reference {len(mismatch.reference_data)} chars, stored {len(mismatch.observed_data)} chars"
            )

    console.print(Panel("\n".join(lines), title=f"[{color}]{observation.key} - {label}[/{color}]", border_style=color))
