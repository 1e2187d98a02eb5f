"""Shared pytest fixtures for ledgersync tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from ledgersync.database.factories import open_mapping_store
from ledgersync.domain.entities import LedgerAccount
from ledgersync.domain.mapping import AccountMappingService
from ledgersync.domain.reconciliation import Chooser, MatchAction
from ledgersync.ledger.base import LedgerService, TransactionBatchResult


class FakeLedger(LedgerService):
    """In-memory ledger that deduplicates by external ID like the real service."""

    def __init__(self, accounts=None):
        self.accounts = list(accounts or [])
        self.next_id = max([a.id for a in self.accounts], default=100) + 1
        self.create_account_failures = []
        self.created_accounts = []
        self.batches = []
        self.batch_failures = {}
        self.known_external_ids = set()
        self.user = {"name": "Test User", "email": "test@example.com"}

    def get_me(self):
        return self.user

    def get_all_manual_accounts(self):
        return list(self.accounts)

    def create_manual_account(self, name, type, balance=Decimal("0")):
        if self.create_account_failures:
            raise self.create_account_failures.pop(0)
        account = LedgerAccount(id=self.next_id, name=name, type=type)
        self.next_id += 1
        self.accounts.append(account)
        self.created_accounts.append(account)
        return account

    def create_transactions(self, transactions, skip_duplicates=False, apply_rules=True):
        self.batches.append(
            {
                "transactions": list(transactions),
                "skip_duplicates": skip_duplicates,
                "apply_rules": apply_rules,
            }
        )
        batch_number = len(self.batches)
        if batch_number in self.batch_failures:
            raise self.batch_failures[batch_number]

        result = TransactionBatchResult()
        for draft in transactions:
            payload = draft.to_payload()
            if draft.external_id in self.known_external_ids:
                result.skipped_duplicates.append(payload)
            else:
                self.known_external_ids.add(draft.external_id)
                result.transactions.append(payload)
        return result


class ScriptedChooser(Chooser):
    """Chooser answering from a prepared script.

    ``select`` answers may be an option label, a MatchAction or a
    LedgerAccount; ``text_input`` answers of None accept the default. Each
    call is recorded in ``calls`` as (kind, prompt, options-or-default).
    """

    def __init__(self, answers=None):
        self.answers = list(answers or [])
        self.calls = []

    def _next(self):
        if not self.answers:
            raise AssertionError("Chooser ran out of scripted answers")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, prompt, options):
        self.calls.append(("select", prompt, options))
        answer = self._next()
        if isinstance(answer, (MatchAction, LedgerAccount)):
            return answer
        for option in options:
            if option.label == answer:
                return option.value
        raise AssertionError(f"No option labelled {answer!r} in {prompt!r}")

    def confirm(self, prompt, default=False):
        self.calls.append(("confirm", prompt, default))
        return self._next()

    def text_input(self, prompt, default=None):
        self.calls.append(("text_input", prompt, default))
        answer = self._next()
        return default if answer is None else answer


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = open_mapping_store(db_path)
    # Store the path for tests that need it
    db.database_path = db_path

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def mapping_service(temp_db):
    """Create an AccountMappingService with a temporary database."""
    return AccountMappingService(temp_db)


@pytest.fixture
def ledger_accounts():
    """Ledger accounts that exist before reconciliation."""
    return [
        LedgerAccount(id=1, name="Wallet", type="cash"),
        LedgerAccount(id=2, name="Visa", type="credit"),
        LedgerAccount(id=3, name="Savings", type="cash"),
    ]


@pytest.fixture
def fake_ledger(ledger_accounts):
    """Create a FakeLedger holding the sample ledger accounts."""
    return FakeLedger(ledger_accounts)


@pytest.fixture
def scripted_chooser():
    """Return a factory for ScriptedChooser instances."""
    return ScriptedChooser


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


REVOLUT_HEADER = (
    "Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance\n"
)


@pytest.fixture
def revolut_header():
    """Header row of a Revolut statement export."""
    return REVOLUT_HEADER


@pytest.fixture
def revolut_data_dir(tmp_path):
    """Data directory with one Revolut statement covering two currencies."""
    revolut_dir = tmp_path / "revolut"
    revolut_dir.mkdir()
    (revolut_dir / "statement.csv").write_text(
        REVOLUT_HEADER
        + "Card Payment,Current,2024-01-15 10:31:02,2024-01-16 08:00:00,Coffee Shop,42.50,1.00,EUR,COMPLETED,900.00\n"
        + "Topup,Current,2024-01-17 09:00:00,2024-01-17 09:00:05,Top-up,-100.00,0.00,EUR,COMPLETED,1000.00\n"
        + "Card Payment,Current,2024-01-18 12:00:00,,Pending Taxi,15.00,0.00,EUR,PENDING,985.00\n"
        + "Exchange,Current,2024-01-19 12:00:00,2024-01-19 12:00:01,To GBP,20.00,0.00,GBP,COMPLETED,20.00\n",
        encoding="utf-8",
    )
    return tmp_path
