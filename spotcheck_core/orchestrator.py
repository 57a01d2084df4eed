import logging
import os
import sqlite3
from typing import Any, Iterable, Optional

from rich.console import Console

from spotcheck_core.config import get_scraper_settings, load_config
from spotcheck_core.db import SqliteBillRepository, SqliteDocumentStore, init_database
from spotcheck_core.interfaces import BillRepository, CompositeReporter, DocumentStore, Reporter, Scraper
from spotcheck_core.models import BaseBillId, BillTextReference
from spotcheck_core.reports import ConsoleReporter, FileReporter
from spotcheck_core.scraping import HttpBillScraper, parse_reference
from spotcheck_core.spotcheck import BillTextChecker, Observation

logger = logging.getLogger(__name__)
console = Console()

PHASES: tuple[str, ...] = ("collate", "ingest", "compare", "run")


class BillTextSpotcheckProcess:
    """
    Collate -> ingest -> compare for scraped LBDC bill text.

    Collaborators are passed in; the process keeps no other state, so each
    phase can be invoked on its own and re-run after a failure.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        scraper: Scraper,
        bill_repository: BillRepository,
        reporter: Reporter,
        checker: Optional[BillTextChecker] = None,
    ):
        self.document_store = document_store
        self.scraper = scraper
        self.bill_repository = bill_repository
        self.reporter = reporter
        self.checker = checker or BillTextChecker()

    def collate(self) -> int:
        """Fetch new scraped pages. Returns the number of pages fetched."""
        return self.scraper.scrape()

    def ingest(self) -> int:
        """
        Parse and store every pending page, then archive them.

        Nothing is archived unless every page parsed and was stored, so a
        failed batch is retried in full on the next run (storage is an upsert).

        Returns:
            Number of references ingested
        """
        documents = self.document_store.get_pending_documents()
        references: list[BillTextReference] = []
        for document in documents:
            references.append(parse_reference(document.content, document.filename))
            logger.debug(f"Parsed {document.filename}")

        for reference in references:
            self.document_store.upsert_reference(reference)

        # Archive only after the whole batch has been stored
        for document in documents:
            self.document_store.archive(document)

        return len(references)

    def compare(self, base_bill_ids: Optional[Iterable[BaseBillId]] = None) -> list[Observation]:
        """
        Spot-check stored bills against their latest reference and report the observations.

        Args:
            base_bill_ids: Bills to check (default: every bill with a stored reference)

        Returns:
            Observations, one per bill that had both a reference and stored data
        """
        if base_bill_ids is None:
            base_bill_ids = self.document_store.get_reference_bill_ids()

        observations: list[Observation] = []
        for base_bill_id in base_bill_ids:
            reference = self.document_store.get_latest_reference(base_bill_id)
            if reference is None:
                logger.warning(f"No reference found for {base_bill_id}; skipping")
                continue
            bill = self.bill_repository.get_bill(base_bill_id)
            if bill is None:
                logger.warning(f"{base_bill_id} not found in bill repository; skipping")
                continue
            observations.append(self.checker.check(bill, reference))

        self.reporter.report(observations)
        return observations

    def run(self, base_bill_ids: Optional[Iterable[BaseBillId]] = None) -> dict[str, Any]:
        collated = self.collate()
        ingested = self.ingest()
        observations = self.compare(base_bill_ids)
        return {"collated": collated, "ingested": ingested, "observations": observations}


def open_database(config: dict[str, Any]) -> sqlite3.Connection:
    db_path = config["paths"]["database"]
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    return init_database(db_path)


def build_process(config: dict[str, Any], conn: sqlite3.Connection) -> BillTextSpotcheckProcess:
    """Wire the default SQLite / filesystem / HTTP collaborators from config."""
    paths = config["paths"]

    bills = [BaseBillId(b["print_no"], int(b["session"])) for b in config.get("scraper", {}).get("bills", [])]
    formats = config.get("reports", {}).get("formats", [])

    reporters: list[Reporter] = []
    file_formats = [f for f in formats if f in ("json", "markdown")]
    if file_formats:
        reporters.append(FileReporter(paths["reports"], file_formats))
    if "console" in formats:
        reporters.append(ConsoleReporter())

    return BillTextSpotcheckProcess(
        document_store=SqliteDocumentStore(conn, paths["inbox"], paths["archive"]),
        scraper=HttpBillScraper(paths["inbox"], bills, get_scraper_settings(config)),
        bill_repository=SqliteBillRepository(conn),
        reporter=CompositeReporter(reporters),
    )


def _print_summary(observations: list[Observation]) -> None:
    with_mismatches = sum(1 for o in observations if o.has_mismatches())
    console.print("\n[bold]Summary Statistics:[/bold]")
    console.print(f"  Bills Checked:         {len(observations)}")
    console.print(f"  Bills With Mismatches: {with_mismatches}")
    console.print(f"  Bills Clean:           {len(observations) - with_mismatches}")


def run_spotcheck(
    phase: str = "run",
    config_path: str = "config.yaml",
    base_bill_ids: Optional[list[BaseBillId]] = None,
    process: Optional[BillTextSpotcheckProcess] = None,
) -> Any:
    """
    1. Configuration - Load config.yaml, wire collaborators
    2. Collate - Scrape configured bills into the inbox
    3. Ingest - Parse pending pages into references, archive them
    4. Compare - Spot-check stored bills and write reports
    """
    if phase not in PHASES:
        raise ValueError(f"Unknown phase {phase!r}; expected one of {', '.join(PHASES)}")

    console.print("\n[bold magenta]═══════════════════════════════════════════════[/bold magenta]")
    console.print("[bold magenta]  Bill Text Spotcheck  [/bold magenta]")
    console.print("[bold magenta]═══════════════════════════════════════════════[/bold magenta]\n")

    db_conn: Optional[sqlite3.Connection] = None
    if process is None:
        config = load_config(config_path)
        db_conn = open_database(config)
        process = build_process(config, db_conn)

    try:
        result = _run_phases(process, phase, base_bill_ids)
    finally:
        if db_conn is not None:
            db_conn.close()

    console.print()
    return result


def _run_phases(process: BillTextSpotcheckProcess, phase: str,
                base_bill_ids: Optional[list[BaseBillId]]) -> Any:
    result: Any = None
    if phase in ("collate", "run"):
        console.print("[bold cyan]📥 Collating scraped bills...[/bold cyan]")
        collated = process.collate()
        console.print(f"[green]✓ {collated} new document(s) scraped[/green]\n")
        result = collated

    if phase in ("ingest", "run"):
        console.print("[bold cyan]📚 Ingesting scraped bills...[/bold cyan]")
        ingested = process.ingest()
        console.print(f"[green]✓ {ingested} reference(s) ingested[/green]\n")
        result = ingested

    if phase in ("compare", "run"):
        console.print("[bold cyan]🔍 Comparing stored bill text...[/bold cyan]")
        observations = process.compare(base_bill_ids)
        _print_summary(observations)
        result = observations

    return result
