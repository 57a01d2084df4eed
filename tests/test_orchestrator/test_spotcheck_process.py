"""
Spotcheck process tests.

Collaborators are mocked for ordering/failure behaviour; the real SQLite
store is used to check the archive guarantee end to end.
"""
from unittest.mock import MagicMock, call

import pytest

from spotcheck_core.db.store import SqliteBillRepository, SqliteDocumentStore
from spotcheck_core.exceptions import ParseError
from spotcheck_core.interfaces import CompositeReporter, ScrapedDocument
from spotcheck_core.models import BaseBillId
from spotcheck_core.orchestrator import BillTextSpotcheckProcess, build_process, run_spotcheck
from spotcheck_core.spotcheck.models import MismatchType


@pytest.fixture
def process(mock_document_store, mock_scraper, mock_bill_repository, mock_reporter):
    return BillTextSpotcheckProcess(mock_document_store, mock_scraper, mock_bill_repository, mock_reporter)


@pytest.fixture
def pending_documents(bill_page_builder):
    return [
        ScrapedDocument("2015-S1234-20150310T143000.html", bill_page_builder("S1234-A", ["\n text\n"], memo="memo")),
        ScrapedDocument("2015-A5678-20150310T143000.html", bill_page_builder("A5678", ["\n text\n"])),
        ScrapedDocument("2015-K200-20150310T143000.html", bill_page_builder("K200", ["\n text\n"])),
    ]


class TestCollate:
    """Tests for the collate phase."""

    def test_collate_delegates_to_scraper(self, process, mock_scraper):
        mock_scraper.scrape.return_value = 4
        assert process.collate() == 4
        mock_scraper.scrape.assert_called_once_with()


class TestIngest:
    """Tests for the ingest phase."""

    def test_ingest_stores_and_archives_all(self, process, mock_document_store, pending_documents):
        mock_document_store.get_pending_documents.return_value = pending_documents

        assert process.ingest() == 3
        assert mock_document_store.upsert_reference.call_count == 3
        assert mock_document_store.archive.call_args_list == [call(d) for d in pending_documents]

    def test_all_stored_before_any_archived(self, process, mock_document_store, pending_documents):
        mock_document_store.get_pending_documents.return_value = pending_documents

        process.ingest()

        names = [c[0] for c in mock_document_store.method_calls
                 if c[0] in ("upsert_reference", "archive")]
        assert names == ["upsert_reference"] * 3 + ["archive"] * 3

    def test_nothing_pending(self, process, mock_document_store):
        assert process.ingest() == 0
        mock_document_store.upsert_reference.assert_not_called()
        mock_document_store.archive.assert_not_called()

    def test_parse_failure_archives_nothing(self, process, mock_document_store, pending_documents):
        """One malformed page in the batch: the error propagates and no page is archived."""
        pending_documents[1] = ScrapedDocument("A5678.html", pending_documents[1].content)
        mock_document_store.get_pending_documents.return_value = pending_documents

        with pytest.raises(ParseError, match="A5678.html"):
            process.ingest()

        mock_document_store.upsert_reference.assert_not_called()
        mock_document_store.archive.assert_not_called()

    def test_store_failure_archives_nothing(self, process, mock_document_store, pending_documents):
        mock_document_store.get_pending_documents.return_value = pending_documents
        mock_document_store.upsert_reference.side_effect = [None, OSError("disk full"), None]

        with pytest.raises(OSError):
            process.ingest()

        mock_document_store.archive.assert_not_called()

    def test_parse_failure_leaves_inbox_untouched(self, temp_db, tmp_path, bill_page_builder,
                                                  mock_scraper, mock_bill_repository, mock_reporter):
        inbox = tmp_path / "incoming"
        store = SqliteDocumentStore(temp_db, str(inbox), str(tmp_path / "archive"))
        (inbox / "2015-S1234-20150310T143000.html").write_text(bill_page_builder("S1234", ["a"]))
        (inbox / "2015-S2000-20150310T143000.html").write_text(bill_page_builder("not a print no", ["b"]))
        (inbox / "2015-S3000-20150310T143000.html").write_text(bill_page_builder("S3000", ["c"]))

        process = BillTextSpotcheckProcess(store, mock_scraper, mock_bill_repository, mock_reporter)
        with pytest.raises(ParseError):
            process.ingest()

        assert len(store.get_pending_documents()) == 3
        assert store.get_reference_bill_ids() == []

    def test_reingest_after_fix(self, temp_db, tmp_path, bill_page_builder,
                                mock_scraper, mock_bill_repository, mock_reporter):
        """Fixing the bad page and re-running ingests the whole batch once."""
        inbox = tmp_path / "incoming"
        store = SqliteDocumentStore(temp_db, str(inbox), str(tmp_path / "archive"))
        (inbox / "2015-S1234-20150310T143000.html").write_text(bill_page_builder("S1234", ["a"]))
        bad = inbox / "2015-S2000-20150310T143000.html"
        bad.write_text(bill_page_builder("???", ["b"]))

        process = BillTextSpotcheckProcess(store, mock_scraper, mock_bill_repository, mock_reporter)
        with pytest.raises(ParseError):
            process.ingest()

        bad.write_text(bill_page_builder("S2000", ["b"]))
        assert process.ingest() == 2
        assert store.get_pending_documents() == []
        assert store.get_reference_bill_ids() == [BaseBillId("S1234", 2015), BaseBillId("S2000", 2015)]
        assert (tmp_path / "archive" / "2015" / "2015-S2000-20150310T143000.html").exists()


class TestCompare:
    """Tests for the compare phase."""

    def test_compare_all_reference_bills(self, process, mock_document_store, mock_bill_repository,
                                         mock_reporter, sample_bill, sample_reference):
        mock_document_store.get_reference_bill_ids.return_value = [sample_bill.base_bill_id]
        mock_document_store.get_latest_reference.return_value = sample_reference
        mock_bill_repository.get_bill.return_value = sample_bill

        observations = process.compare()

        assert len(observations) == 1
        assert observations[0].key == "S1234-2015"
        assert not observations[0].has_mismatches()
        mock_reporter.report.assert_called_once_with(observations)

    def test_compare_selected_bills(self, process, mock_document_store):
        process.compare([BaseBillId("S1234", 2015)])

        mock_document_store.get_reference_bill_ids.assert_not_called()
        mock_document_store.get_latest_reference.assert_called_once_with(BaseBillId("S1234", 2015))

    def test_bill_without_reference_skipped(self, process, mock_document_store, mock_bill_repository, mock_reporter):
        mock_document_store.get_reference_bill_ids.return_value = [BaseBillId("S1234", 2015)]

        assert process.compare() == []
        mock_bill_repository.get_bill.assert_not_called()
        mock_reporter.report.assert_called_once_with([])

    def test_bill_missing_from_repository_skipped(self, process, mock_document_store, sample_reference):
        mock_document_store.get_reference_bill_ids.return_value = [BaseBillId("S1234", 2015)]
        mock_document_store.get_latest_reference.return_value = sample_reference

        assert process.compare() == []

    def test_mismatches_reported(self, process, mock_document_store, mock_bill_repository,
                                 mock_reporter, sample_bill, sample_reference):
        sample_bill.active_version = ""
        mock_document_store.get_reference_bill_ids.return_value = [sample_bill.base_bill_id]
        mock_document_store.get_latest_reference.return_value = sample_reference
        mock_bill_repository.get_bill.return_value = sample_bill

        observations = process.compare()

        assert observations[0].mismatch_types() == [MismatchType.BILL_ACTIVE_AMENDMENT]
        reported = mock_reporter.report.call_args[0][0]
        assert reported == observations

    def test_custom_checker_used(self, mock_document_store, mock_scraper, mock_bill_repository,
                                 mock_reporter, sample_bill, sample_reference):
        checker = MagicMock()
        mock_document_store.get_reference_bill_ids.return_value = [sample_bill.base_bill_id]
        mock_document_store.get_latest_reference.return_value = sample_reference
        mock_bill_repository.get_bill.return_value = sample_bill

        process = BillTextSpotcheckProcess(mock_document_store, mock_scraper, mock_bill_repository,
                                           mock_reporter, checker=checker)
        process.compare()

        checker.check.assert_called_once_with(sample_bill, sample_reference)


class TestRun:
    """Tests for the full run and the run_spotcheck entry point."""

    def test_run_calls_phases_in_order(self, process, mock_scraper, mock_document_store):
        manager = MagicMock()
        manager.attach_mock(mock_scraper.scrape, "scrape")
        manager.attach_mock(mock_document_store.get_pending_documents, "get_pending_documents")
        manager.attach_mock(mock_document_store.get_reference_bill_ids, "get_reference_bill_ids")

        result = process.run()

        assert [c[0] for c in manager.mock_calls] == ["scrape", "get_pending_documents", "get_reference_bill_ids"]
        assert result == {"collated": 0, "ingested": 0, "observations": []}

    @pytest.mark.parametrize("phase,expected_calls", [
        ("collate", ["collate"]),
        ("ingest", ["ingest"]),
        ("compare", ["compare"]),
        ("run", ["collate", "ingest", "compare"]),
    ])
    def test_run_spotcheck_phase(self, phase, expected_calls):
        process = MagicMock()
        process.compare.return_value = []

        run_spotcheck(phase, process=process)

        assert [c[0] for c in process.method_calls] == expected_calls

    def test_run_spotcheck_passes_bill_ids(self):
        process = MagicMock()
        process.compare.return_value = []
        bill_ids = [BaseBillId("S1234", 2015)]

        run_spotcheck("compare", process=process, base_bill_ids=bill_ids)

        process.compare.assert_called_once_with(bill_ids)

    def test_unknown_phase(self):
        with pytest.raises(ValueError, match="Unknown phase"):
            run_spotcheck("publish", process=MagicMock())

    def test_run_spotcheck_from_config(self, tmp_path, bill_page_builder):
        """End to end with the default collaborators and no bills to scrape."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "paths:\n"
            f"  inbox: {tmp_path / 'incoming'}\n"
            f"  archive: {tmp_path / 'archive'}\n"
            f"  database: {tmp_path / 'db' / 'spotcheck.db'}\n"
            f"  reports: {tmp_path / 'reports'}\n"
            "scraper:\n"
            "  bills: []\n"
            "reports:\n"
            "  formats: [json]\n"
        )
        (tmp_path / "incoming").mkdir()
        (tmp_path / "incoming" / "2015-S1234-20150310T143000.html").write_text(
            bill_page_builder("S1234-A", ["\nAN ACT to amend the tax law\n"], memo="Sponsor memo for S1234A")
        )

        observations = run_spotcheck("run", config_path=str(config_path))

        # S1234 is not in the bill repository, so it is skipped
        assert observations == []
        assert (tmp_path / "archive" / "2015" / "2015-S1234-20150310T143000.html").exists()
        assert (tmp_path / "db" / "spotcheck.db").exists()


class TestBuildProcess:
    """Tests for wiring the default collaborators from config."""

    def test_default_collaborators(self, temp_db, tmp_path):
        config = {
            "paths": {
                "inbox": str(tmp_path / "in"),
                "archive": str(tmp_path / "out"),
                "database": str(tmp_path / "db.sqlite"),
                "reports": str(tmp_path / "reports"),
            },
            "scraper": {"bills": [{"print_no": "S1234", "session": 2015}]},
            "reports": {"formats": ["json", "markdown", "console"]},
        }
        process = build_process(config, temp_db)

        assert isinstance(process.document_store, SqliteDocumentStore)
        assert isinstance(process.bill_repository, SqliteBillRepository)
        assert process.scraper.bills == [BaseBillId("S1234", 2015)]
        assert isinstance(process.reporter, CompositeReporter)
        assert len(process.reporter.reporters) == 2
