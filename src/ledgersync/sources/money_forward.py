"""Money Forward monthly export adapter."""

import csv
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from ledgersync.domain.entities import (
    ExternalAccountRef,
    ImportedTransaction,
    NormalizationResult,
)
from ledgersync.sources.base import IssueCollector, SourceAdapter, read_csv_rows
from ledgersync.utils.amount_parser import parse_whole_amount
from ledgersync.utils.date_parser import parse_date, recent_months

logger = logging.getLogger(__name__)

INTEGRATION = "money-forward"
DEFAULT_MONTHS = 18
ACCOUNTS_FILE = "accounts.csv"

# Column headers of the Money Forward cash-flow export
COL_IS_CALCULATED = "計算対象"
COL_DATE = "日付"
COL_DESCRIPTION = "内容"
COL_AMOUNT = "金額（円）"
COL_INSTITUTION = "保有金融機関"
COL_CATEGORY = "大項目"
COL_SUBCATEGORY = "中項目"
COL_MEMO = "メモ"
COL_IS_TRANSFER = "振替"
COL_ID = "ID"


@dataclass(frozen=True, kw_only=True)
class MoneyForwardTransaction(ImportedTransaction):
    """Money Forward cash-flow row; the account is the holding institution."""

    category: str = ""
    subcategory: str = ""
    memo: str = ""
    is_calculated: bool = True
    is_transfer: bool = False


@dataclass(frozen=True)
class AccountStatus:
    """Registered account as listed by the scraper in accounts.csv."""

    mf_id: str
    name: str
    type: str = ""
    status: str = ""
    last_updated: str = ""
    url: str = ""
    error_message: Optional[str] = None


def monthly_filename(month: date) -> str:
    return f"{month.year}-{month.month:02d}.csv"


class MoneyForwardSource(SourceAdapter):
    """Adapter for the most recent monthly exports in the data directory."""

    integration = INTEGRATION

    def __init__(self, data_dir: Path, months: int = DEFAULT_MONTHS, today: Optional[date] = None):
        """Initialize Money Forward adapter.

        Args:
            data_dir: Directory with ``YYYY-MM.csv`` exports and accounts.csv
            months: Number of months to load, counting back from ``today``
            today: Reference date (defaults to the current date)
        """
        super().__init__(data_dir)
        self.months = months
        self.today = today

    def discover_files(self) -> list[Path]:
        # Missing months are reported by load() and contribute no rows
        return [self.data_dir / monthly_filename(m) for m in recent_months(self.months, self.today)]

    def normalize(self, rows: Iterable[dict[str, str]], source: str) -> NormalizationResult:
        result = NormalizationResult()
        for index, row in enumerate(rows, start=1):
            errors = IssueCollector(source, index, result.issues)

            source_id = (row.get(COL_ID) or "").strip()
            if not source_id:
                errors.add(COL_ID, source_id, "Transaction ID is required")

            raw_date = row.get(COL_DATE)
            try:
                txn_date = parse_date(raw_date)
            except ValueError:
                errors.add(COL_DATE, raw_date, "Date must be a valid date")

            raw_amount = row.get(COL_AMOUNT)
            try:
                amount = parse_whole_amount(raw_amount)
            except ValueError:
                errors.add(COL_AMOUNT, raw_amount, "Amount must be a whole yen amount")

            if errors.failed:
                continue

            result.transactions.append(
                MoneyForwardTransaction(
                    source_id=source_id,
                    date=txn_date,
                    description=row.get(COL_DESCRIPTION) or "",
                    amount=amount,
                    external_account_ref=row.get(COL_INSTITUTION) or "",
                    category=row.get(COL_CATEGORY) or "",
                    subcategory=row.get(COL_SUBCATEGORY) or "",
                    memo=row.get(COL_MEMO) or "",
                    is_calculated=row.get(COL_IS_CALCULATED) == "1",
                    is_transfer=row.get(COL_IS_TRANSFER) == "1",
                )
            )
        return result

    def load_accounts(self) -> list[AccountStatus]:
        """Read the registered accounts saved by the scraper.

        A missing or unreadable file yields an empty list.
        """
        accounts_path = self.data_dir / ACCOUNTS_FILE
        logger.info("Loading accounts from %s...", accounts_path)
        try:
            rows = read_csv_rows(accounts_path)
        except FileNotFoundError:
            logger.info("File %s not found", accounts_path)
            return []
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error("Error loading accounts: %s", e)
            return []

        accounts = [
            AccountStatus(
                mf_id=row.get("mfId") or "",
                name=row.get("name") or "",
                type=row.get("type") or "",
                status=row.get("status") or "",
                last_updated=row.get("lastUpdated") or "",
                url=row.get("url") or "",
                error_message=row.get("errorMessage") or None,
            )
            for row in rows
            if row.get("mfId")
        ]
        logger.info("Loaded %d accounts", len(accounts))
        return accounts

    def external_accounts(self, result: NormalizationResult) -> list[ExternalAccountRef]:
        """Accounts come from accounts.csv rather than from the transactions."""
        return [
            ExternalAccountRef(
                integration=self.integration,
                external_id=account.mf_id,
                display_name=account.name,
            )
            for account in self.load_accounts()
        ]
