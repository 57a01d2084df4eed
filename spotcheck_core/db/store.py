import logging
import os
import shutil
import sqlite3
from typing import Optional

from spotcheck_core.db import cache
from spotcheck_core.interfaces import BillRepository, DocumentStore, ScrapedDocument
from spotcheck_core.models import BaseBillId, Bill, BillTextReference
from spotcheck_core.scraping.parser import parse_scraped_filename

logger = logging.getLogger(__name__)


class SqliteDocumentStore(DocumentStore):
    """
    Scraped pages on disk plus parsed references in SQLite.

    Pending pages sit in the inbox directory; archived pages are moved to
    '<archive>/<session>/'. References are upserted on
    (base bill, version, scrape time), so re-ingesting a page is harmless.
    """

    def __init__(self, conn: sqlite3.Connection, inbox_dir: str, archive_dir: str):
        self.conn = conn
        self.inbox_dir = inbox_dir
        self.archive_dir = archive_dir
        os.makedirs(self.inbox_dir, exist_ok=True)
        os.makedirs(self.archive_dir, exist_ok=True)

    def get_pending_documents(self) -> list[ScrapedDocument]:
        documents: list[ScrapedDocument] = []
        for name in sorted(os.listdir(self.inbox_dir)):
            path = os.path.join(self.inbox_dir, name)
            if name.startswith(".") or not os.path.isfile(path):
                continue
            with open(path, "rb") as f:
                documents.append(ScrapedDocument(filename=name, content=f.read(), path=path))
        return documents

    def archive(self, document: ScrapedDocument) -> None:
        base_bill_id, _ = parse_scraped_filename(document.filename)
        target_dir = os.path.join(self.archive_dir, str(base_bill_id.session))
        os.makedirs(target_dir, exist_ok=True)
        source = document.path or os.path.join(self.inbox_dir, document.filename)
        shutil.move(source, os.path.join(target_dir, document.filename))
        logger.debug(f"Archived {document.filename} -> {target_dir}")

    def upsert_reference(self, reference: BillTextReference) -> None:
        cache.save_reference(reference, self.conn)

    def get_latest_reference(self, base_bill_id: BaseBillId) -> Optional[BillTextReference]:
        return cache.get_latest_reference(base_bill_id, self.conn)

    def get_reference_bill_ids(self) -> list[BaseBillId]:
        return cache.get_reference_bill_ids(self.conn)


class SqliteBillRepository(BillRepository):
    """Bills and their amendments as held in the primary data store."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_bill(self, base_bill_id: BaseBillId) -> Optional[Bill]:
        return cache.get_bill(base_bill_id, self.conn)

    def save_bill(self, bill: Bill) -> None:
        cache.save_bill(bill, self.conn)
