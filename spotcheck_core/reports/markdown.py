import os
from collections import Counter
from typing import Sequence, TextIO

from spotcheck_core.spotcheck.models import MismatchType, Observation


def _fence(value: str) -> str:
    # Values are written in full; widen the fence if the value itself contains one
    fence = "```"
    while fence in value:
        fence += "`"
    return f"{fence}\n{value}\n{fence}\n"


def write_observation_section(f: TextIO, observation: Observation) -> None:
    """
    Write a single observation section to markdown file.

    Args:
        f: File handle to write to
        observation: Spotcheck observation for one bill
    """
    f.write(f"### {observation.key}\n\n")
    f.write(f"- **Reference:** {observation.reference_type} @ {observation.reference_date_time.isoformat()}\n")
    f.write(f"- **Observed:** {observation.observed_date_time.isoformat()}\n")
    f.write(f"- **Mismatches:** {len(observation.mismatches)}\n\n")

    for mismatch in observation.mismatches:
        f.write(f"#### {mismatch.mismatch_type.value.replace('_', ' ').title()}\n\n")
        f.write("**Reference (LBDC):**\n\n")
        f.write(_fence(mismatch.reference_data))
        f.write("\n**Observed (stored):**\n\n")
        f.write(_fence(mismatch.observed_data))
        f.write("\n")


def generate_markdown_report(observations: Sequence[Observation], timestamp: str, output_dir: str) -> str:
    """
    Args:
        observations: Observations from one compare run
        timestamp: Run timestamp used in the file name
        output_dir: Directory to write into (must exist)

    Returns:
        Path of the written markdown file
    """
    md_file = os.path.join(output_dir, f"bill_text_spotcheck_{timestamp}.md")
    with_mismatches = [o for o in observations if o.has_mismatches()]
    type_counts = Counter(m.mismatch_type for o in observations for m in o.mismatches)

    with open(md_file, "w", encoding="utf-8") as f:
        f.write("# Bill Text Spotcheck Report\n\n")
        f.write(f"**Generated:** {timestamp}\n\n")

        f.write("## Summary\n\n")
        f.write(f"- **Bills checked:** {len(observations)}\n")
        f.write(f"- **Bills with mismatches:** {len(with_mismatches)}\n")
        f.write(f"- **Bills clean:** {len(observations) - len(with_mismatches)}\n\n")

        if type_counts:
            f.write("| Mismatch Type | Count |\n")
            f.write("|---|---|\n")
            for mismatch_type in MismatchType:
                if type_counts[mismatch_type]:
                    f.write(f"| {mismatch_type.value} | {type_counts[mismatch_type]} |\n")
            f.write("\n")

        if with_mismatches:
            f.write("## Mismatches\n\n")
            for observation in with_mismatches:
                write_observation_section(f, observation)
        else:
            f.write("No mismatches found.\n")

    return md_file
