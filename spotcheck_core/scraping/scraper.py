import os
import time
from datetime import datetime
from typing import Iterable, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from spotcheck_core.config import ScraperSettings
from spotcheck_core.interfaces import Scraper
from spotcheck_core.models import BaseBillId
from spotcheck_core.scraping.parser import SCRAPED_DATE_TIME_FORMAT

console = Console()

USER_AGENT: str = "NYS-Bill-Text-Spotcheck/1.0"
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def scraped_filename(base_bill_id: BaseBillId, scraped_at: datetime) -> str:
    return f"{base_bill_id.session}-{base_bill_id.print_no}-{scraped_at.strftime(SCRAPED_DATE_TIME_FORMAT)}.html"


class HttpBillScraper(Scraper):
    """
    Downloads LBDC bill pages (text + sponsor memo) into the spotcheck inbox.

    Each page is written as '<session>-<printNo>-<yyyyMMddTHHmmss>.html'
    so the ingest step can recover the bill and scrape time from its name.
    """

    def __init__(
        self,
        inbox_dir: str,
        bills: Iterable[BaseBillId],
        settings: Optional[ScraperSettings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.inbox_dir = inbox_dir
        self.bills = list(bills)
        self.settings = settings or ScraperSettings()
        self.client = client

    def _request_params(self, base_bill_id: BaseBillId) -> dict[str, str]:
        return {
            "NVDTO:": "",
            "QUERYTYPE": "BILLNO",
            "SESSYR": str(base_bill_id.session),
            "QUERYDATA": base_bill_id.print_no,
            "CBTEXT": "Y",
            "CBSPONMEMO": "Y",
        }

    def fetch_bill_page(self, http: httpx.Client, base_bill_id: BaseBillId) -> Optional[str]:
        max_retries = self.settings.max_retries
        for attempt in range(max_retries):
            try:
                response = http.get(self.settings.base_url, params=self._request_params(base_bill_id))
                response.raise_for_status()
                return response.text
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status not in RETRYABLE_STATUS_CODES:
                    console.print(f"[red]    HTTP Error fetching {base_bill_id}: {status}[/red]")
                    return None
                console.print(f"[yellow]    HTTP {status} for {base_bill_id}, retrying (attempt {attempt + 1}/{max_retries})...[/yellow]")
            except httpx.TransportError as e:
                console.print(f"[yellow]    Connection error for {base_bill_id}: {escape(str(e))} (attempt {attempt + 1}/{max_retries})[/yellow]")

            if attempt < max_retries - 1:
                time.sleep(self.settings.retry_delay * (2 ** attempt))

        console.print(f"[red]    Failed to fetch {base_bill_id} after {max_retries} attempts[/red]")
        return None

    def _write_page(self, filename: str, page: str) -> None:
        path = os.path.join(self.inbox_dir, filename)
        # Hidden name: pending-document listing skips dotfiles until the rename
        tmp_path = os.path.join(self.inbox_dir, f".{filename}.part")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(page)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def scrape(self) -> int:
        os.makedirs(self.inbox_dir, exist_ok=True)
        if not self.bills:
            console.print("[dim]  No bills configured for scraping[/dim]")
            return 0

        headers = {"User-Agent": USER_AGENT}
        http = self.client or httpx.Client(timeout=self.settings.timeout, headers=headers, follow_redirects=True)
        scraped = 0
        try:
            for base_bill_id in self.bills:
                console.print(f"[cyan]  Scraping {base_bill_id}...[/cyan]")
                page = self.fetch_bill_page(http, base_bill_id)
                if page is None:
                    continue

                filename = scraped_filename(base_bill_id, datetime.now())
                self._write_page(filename, page)
                scraped += 1
                console.print(f"[green]  ✓ Saved {escape(filename)}[/green]")
        finally:
            if self.client is None:
                http.close()

        return scraped
