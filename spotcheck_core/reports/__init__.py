from .markdown import generate_markdown_report, write_observation_section
from .display import display_observation
from .reporter import FileReporter, ConsoleReporter

__all__ = [
    "generate_markdown_report",
    "write_observation_section",
    "display_observation",
    "FileReporter",
    "ConsoleReporter",
]
