import hashlib
import sqlite3
from datetime import datetime
from typing import Optional

from spotcheck_core.models import BaseBillId, Bill, BillAmendment, BillId, BillTextReference


def compute_text_hash(text: str) -> str:
    if not text:
        return ""
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


def init_database(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS bill_text_references (
            base_print_no TEXT NOT NULL,
            session INTEGER NOT NULL,
            version TEXT NOT NULL,
            reference_date_time TEXT NOT NULL,
            full_text TEXT,
            memo TEXT,
            text_hash TEXT,
            ingested_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (base_print_no, session, version, reference_date_time)
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS bills (
            bill_id TEXT PRIMARY KEY,
            print_no TEXT NOT NULL,
            session INTEGER NOT NULL,
            active_version TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS bill_amendments (
            amendment_id TEXT PRIMARY KEY,
            bill_id TEXT NOT NULL,
            version TEXT NOT NULL,
            full_text TEXT,
            memo TEXT,
            text_hash TEXT,
            FOREIGN KEY (bill_id) REFERENCES bills(bill_id)
        )
    ''')

    # Indexes
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_references_bill ON bill_text_references(base_print_no, session)')
    cursor.execute('CREATE INDEX IF NOT EXISTS idx_amendments_bill ON bill_amendments(bill_id)')

    conn.commit()
    return conn


# =============================================================================
# BILL TEXT REFERENCES
# =============================================================================

def save_reference(reference: BillTextReference, conn: sqlite3.Connection) -> None:
    # Keyed on (base bill, version, scrape time): re-ingesting the same file replaces the row
    base_bill_id = reference.base_bill_id
    cursor = conn.cursor()
    cursor.execute('''
        INSERT OR REPLACE INTO bill_text_references
        (base_print_no, session, version, reference_date_time, full_text, memo, text_hash, ingested_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    ''', (
        base_bill_id.print_no,
        base_bill_id.session,
        reference.active_version,
        reference.reference_date_time.isoformat(),
        reference.text,
        reference.memo,
        compute_text_hash(reference.text),
        datetime.now().isoformat()
    ))
    conn.commit()


def _row_to_reference(row: tuple) -> BillTextReference:
    base_print_no, session, version, reference_date_time, full_text, memo = row
    return BillTextReference(
        bill_id=BillId(base_print_no + version, session),
        reference_date_time=datetime.fromisoformat(reference_date_time),
        text=full_text or "",
        memo=memo or "",
    )


def get_latest_reference(base_bill_id: BaseBillId, conn: sqlite3.Connection) -> Optional[BillTextReference]:
    cursor = conn.cursor()
    cursor.execute('''
        SELECT base_print_no, session, version, reference_date_time, full_text, memo
        FROM bill_text_references
        WHERE base_print_no = ? AND session = ?
        ORDER BY reference_date_time DESC
        LIMIT 1
    ''', (base_bill_id.print_no, base_bill_id.session))

    row = cursor.fetchone()
    return _row_to_reference(row) if row else None


def get_references(base_bill_id: BaseBillId, conn: sqlite3.Connection) -> list[BillTextReference]:
    cursor = conn.cursor()
    cursor.execute('''
        SELECT base_print_no, session, version, reference_date_time, full_text, memo
        FROM bill_text_references
        WHERE base_print_no = ? AND session = ?
        ORDER BY reference_date_time
    ''', (base_bill_id.print_no, base_bill_id.session))
    return [_row_to_reference(row) for row in cursor.fetchall()]


def get_reference_bill_ids(conn: sqlite3.Connection) -> list[BaseBillId]:
    cursor = conn.cursor()
    cursor.execute('''
        SELECT DISTINCT base_print_no, session
        FROM bill_text_references
        ORDER BY session, base_print_no
    ''')
    return [BaseBillId(row[0], row[1]) for row in cursor.fetchall()]


# =============================================================================
# STORED BILLS
# =============================================================================

def save_bill(bill: Bill, conn: sqlite3.Connection) -> None:
    bill_id = str(bill.base_bill_id)
    cursor = conn.cursor()
    cursor.execute('''
        INSERT OR REPLACE INTO bills
        (bill_id, print_no, session, active_version, updated_at)
        VALUES (?, ?, ?, ?, ?)
    ''', (
        bill_id,
        bill.base_bill_id.print_no,
        bill.base_bill_id.session,
        bill.active_version,
        datetime.now().isoformat()
    ))

    for version, amendment in bill.amendments.items():
        cursor.execute('''
            INSERT OR REPLACE INTO bill_amendments
            (amendment_id, bill_id, version, full_text, memo, text_hash)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (
            str(amendment.bill_id),
            bill_id,
            version,
            amendment.full_text,
            amendment.memo,
            compute_text_hash(amendment.full_text)
        ))

    conn.commit()


def get_bill(base_bill_id: BaseBillId, conn: sqlite3.Connection) -> Optional[Bill]:
    bill_id = str(base_bill_id)
    cursor = conn.cursor()
    cursor.execute('SELECT active_version FROM bills WHERE bill_id = ?', (bill_id,))
    row = cursor.fetchone()
    if not row:
        return None

    bill = Bill(base_bill_id=base_bill_id, active_version=row[0])
    cursor.execute('''
        SELECT version, full_text, memo
        FROM bill_amendments
        WHERE bill_id = ?
        ORDER BY version
    ''', (bill_id,))
    for version, full_text, memo in cursor.fetchall():
        bill.add_amendment(BillAmendment(
            bill_id=base_bill_id.with_version(version),
            full_text=full_text or "",
            memo=memo or "",
        ))
    return bill
