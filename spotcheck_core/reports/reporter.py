import json
import os
from datetime import datetime
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from spotcheck_core.interfaces import Reporter
from spotcheck_core.reports.display import display_observation
from spotcheck_core.reports.markdown import generate_markdown_report
from spotcheck_core.spotcheck.models import Observation

console = Console()


class FileReporter(Reporter):
    """Writes each batch of observations to 'bill_text_spotcheck_<timestamp>/' as JSON and Markdown."""

    def __init__(self, reports_dir: str, formats: Sequence[str] = ("json", "markdown")):
        self.reports_dir = reports_dir
        self.formats = tuple(formats)
        self.last_output_dir: Optional[str] = None

    def report(self, observations: Sequence[Observation]) -> None:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        output_dir = os.path.join(self.reports_dir, f"bill_text_spotcheck_{timestamp}")
        os.makedirs(output_dir, exist_ok=True)
        self.last_output_dir = output_dir

        # JSON report - machine-readable for downstream processing
        if "json" in self.formats:
            json_file = os.path.join(output_dir, f"bill_text_spotcheck_{timestamp}.json")
            with open(json_file, "w", encoding="utf-8") as f:
                json.dump([o.model_dump(mode="json") for o in observations], f, indent=2)
            console.print(f"[green]✓ JSON results saved to {escape(json_file)}[/green]")

        if "markdown" in self.formats:
            md_file = generate_markdown_report(observations, timestamp, output_dir)
            console.print(f"[green]✓ Markdown report saved to {escape(md_file)}[/green]")


class ConsoleReporter(Reporter):
    """Prints a panel per observation; clean bills are skipped unless show_clean is set."""

    def __init__(self, show_clean: bool = False):
        self.show_clean = show_clean

    def report(self, observations: Sequence[Observation]) -> None:
        for observation in observations:
            if observation.has_mismatches() or self.show_clean:
                display_observation(observation)
