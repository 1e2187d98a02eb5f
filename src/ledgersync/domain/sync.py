"""Sync domain service: load, reconcile and import one integration."""

import logging

from ledgersync.domain.entities import ImportResult
from ledgersync.domain.reconciliation import AccountReconciler, Chooser
from ledgersync.domain.transaction_import import DEFAULT_BATCH_SIZE, TransactionImporter
from ledgersync.ledger.base import LedgerService
from ledgersync.sources.base import SourceAdapter

logger = logging.getLogger(__name__)


class SyncService:
    """Runs the whole pipeline for a source adapter."""

    def __init__(
        self,
        db,
        ledger: LedgerService,
        chooser: Chooser,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """Initialize sync service.

        Args:
            db: Database instance holding the mapping table
            ledger: Ledger service
            chooser: Prompt implementation for reconciliation
            batch_size: Maximum transactions per ledger call
        """
        self.reconciler = AccountReconciler(db, ledger, chooser)
        self.importer = TransactionImporter(ledger, batch_size=batch_size)

    def run(self, source: SourceAdapter) -> ImportResult:
        """Load the source, reconcile its accounts and import its transactions.

        Raises:
            LedgerSubmissionError: If the ledger rejects a transaction batch
        """
        integration = source.integration

        logger.info("Loading %s transactions from CSV files...", integration)
        loaded = source.load()
        transactions = source.importable(loaded.transactions)
        logger.info("Loaded %d importable %s transactions", len(transactions), integration)

        logger.info("Syncing %s accounts", integration)
        mappings = self.reconciler.reconcile(integration, source.external_accounts(loaded))

        result = self.importer.import_transactions(integration, transactions, mappings)
        logger.info(
            "Complete! Inserted %d transactions, skipped %d duplicates",
            result.inserted,
            result.skipped,
        )
        return result
