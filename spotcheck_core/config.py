import os
from dataclasses import dataclass
from typing import Any

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

load_dotenv()
console = Console()

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "inbox": "data/scraped/incoming",
        "archive": "data/scraped/archive",
        "database": "data/spotcheck.db",
        "reports": "reports",
    },
    "scraper": {
        "base_url": "https://public.leginfo.state.ny.us/navigate.cgi",
        "bills": [],
        "timeout": 30.0,
        "max_retries": 3,
        "retry_delay": 2.0,
    },
    "reports": {"formats": ["json", "markdown", "console"]},
}

# Environment variable -> (section, key) it overrides
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SPOTCHECK_INBOX": ("paths", "inbox"),
    "SPOTCHECK_ARCHIVE": ("paths", "archive"),
    "SPOTCHECK_DATABASE": ("paths", "database"),
    "SPOTCHECK_REPORTS": ("paths", "reports"),
}


@dataclass(frozen=True)
class ScraperSettings:
    """Fetch settings for the LBDC scraper."""
    base_url: str = DEFAULT_CONFIG["scraper"]["base_url"]
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 2.0


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def load_config(config_path: str = "config.yaml") -> dict[str, Any]:
    """
    From config.yaml, layered over DEFAULT_CONFIG, with SPOTCHECK_* env vars on top.

    Args:
        config_path: Path to config file (default: config.yaml)

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "r") as f:
            file_config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        console.print(f"[red]Error: {escape(str(config_path))} not found. Using default config.[/red]")
        file_config = {}

    return _merge(_merge(DEFAULT_CONFIG, file_config), get_env_overrides())


def get_scraper_settings(config: dict[str, Any]) -> ScraperSettings:
    scraper_config = config.get("scraper", {})
    return ScraperSettings(
        base_url=scraper_config.get("base_url", ScraperSettings.base_url),
        timeout=float(scraper_config.get("timeout", ScraperSettings.timeout)),
        max_retries=int(scraper_config.get("max_retries", ScraperSettings.max_retries)),
        retry_delay=float(scraper_config.get("retry_delay", ScraperSettings.retry_delay)),
    )
