"""
Collaborators the spotcheck process talks to.

The process only depends on these base classes; default implementations live
in spotcheck_core.db, spotcheck_core.scraping.scraper and spotcheck_core.reports.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from spotcheck_core.models import BaseBillId, Bill, BillTextReference
from spotcheck_core.spotcheck.models import Observation


@dataclass(frozen=True)
class ScrapedDocument:
    """A pending scraped page: the name it was saved under and its raw HTML."""
    filename: str
    content: Union[str, bytes]
    path: Optional[str] = None


class DocumentStore(ABC):
    """Pending scraped pages plus the references parsed from them."""

    @abstractmethod
    def get_pending_documents(self) -> list[ScrapedDocument]:
        pass

    @abstractmethod
    def archive(self, document: ScrapedDocument) -> None:
        pass

    @abstractmethod
    def upsert_reference(self, reference: BillTextReference) -> None:
        """Store a reference keyed on (base bill, version, scrape time). Storing it again replaces it."""
        pass

    @abstractmethod
    def get_latest_reference(self, base_bill_id: BaseBillId) -> Optional[BillTextReference]:
        pass

    @abstractmethod
    def get_reference_bill_ids(self) -> list[BaseBillId]:
        pass


class Scraper(ABC):
    @abstractmethod
    def scrape(self) -> int:
        """Fetch new pages into the pending set. Returns the number fetched."""
        pass


class BillRepository(ABC):
    """Read access to bills in the primary data store."""

    @abstractmethod
    def get_bill(self, base_bill_id: BaseBillId) -> Optional[Bill]:
        pass


class Reporter(ABC):
    @abstractmethod
    def report(self, observations: Sequence[Observation]) -> None:
        pass


class CompositeReporter(Reporter):
    """Fan observations out to several reporters in order."""

    def __init__(self, reporters: Iterable[Reporter]):
        self.reporters = list(reporters)

    def report(self, observations: Sequence[Observation]) -> None:
        for reporter in self.reporters:
            reporter.report(observations)
