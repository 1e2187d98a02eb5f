"""Common source adapter behaviour."""

import csv
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ledgersync.domain.entities import (
    ExternalAccountRef,
    ImportedTransaction,
    NormalizationResult,
    ValidationIssue,
)

logger = logging.getLogger(__name__)


def read_csv_rows(csv_path: Path) -> list[dict[str, str]]:
    """Read a CSV file with a header row into a list of dicts.

    Blank rows are skipped. Values past the last header column are dropped.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    rows = []
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            # DictReader collects surplus values as a list under the None key
            row.pop(None, None)
            if any((value or "").strip() for value in row.values()):
                rows.append(row)
    return rows


class IssueCollector:
    """Collects validation issues for the row being normalized."""

    def __init__(self, source: str, record_index: int, issues: list[ValidationIssue]):
        self.source = source
        self.record_index = record_index
        self.issues = issues
        self.failed = False

    def add(self, field: str, raw_value: str | None, message: str) -> None:
        self.issues.append(
            ValidationIssue(
                source=self.source,
                record_index=self.record_index,
                field=field,
                raw_value=raw_value or "",
                message=message,
            )
        )
        self.failed = True


class SourceAdapter(ABC):
    """Turns the files of one integration into normalized transactions."""

    integration: str

    def __init__(self, data_dir: Path):
        """Initialize source adapter.

        Args:
            data_dir: Directory holding this integration's files
        """
        self.data_dir = Path(data_dir)

    @abstractmethod
    def discover_files(self) -> list[Path]:
        """Return the transaction files to load, in load order."""
        pass

    @abstractmethod
    def normalize(self, rows: Iterable[dict[str, str]], source: str) -> NormalizationResult:
        """Validate raw rows into transactions; never raises for bad rows."""
        pass

    @abstractmethod
    def external_accounts(self, result: NormalizationResult) -> list[ExternalAccountRef]:
        """Return the accounts the integration reports for this run."""
        pass

    def importable(self, transactions: list[ImportedTransaction]) -> list[ImportedTransaction]:
        """Return the transactions that should be sent to the ledger."""
        return transactions

    def load(self) -> NormalizationResult:
        """Load and normalize every discovered file.

        A missing file contributes zero transactions. Validation issues are
        logged once all files have been read.
        """
        result = NormalizationResult()
        files = self.discover_files()
        if not files:
            logger.info("No CSV files found in %s", self.data_dir)
            return result

        for csv_path in files:
            logger.info("Loading %s...", csv_path.name)
            try:
                rows = read_csv_rows(csv_path)
            except FileNotFoundError:
                logger.info("File %s not found, skipping", csv_path.name)
                continue
            except (OSError, UnicodeDecodeError, csv.Error) as e:
                logger.error("Error loading %s: %s", csv_path.name, e)
                continue

            file_result = self.normalize(rows, csv_path.name)
            result.extend(file_result)
            logger.info(
                "Loaded %d valid transactions from %s",
                len(file_result.transactions),
                csv_path.name,
            )

        if result.issues:
            logger.error("Validation errors found (%d total):", len(result.issues))
            for issue in result.issues:
                logger.error("  %s", issue)

        logger.info("Total valid transactions loaded: %d", len(result.transactions))
        return result
