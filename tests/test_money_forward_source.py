"""Tests for the Money Forward export adapter."""

import pytest
from datetime import date
from decimal import Decimal

from ledgersync.sources import MoneyForwardSource, create_source
from ledgersync.sources.money_forward import AccountStatus, monthly_filename

MF_HEADER = "計算対象,日付,内容,金額（円）,保有金融機関,大項目,中項目,メモ,振替,ID\n"
ACCOUNTS_HEADER = "mfId,name,type,status,lastUpdated,url,errorMessage\n"


def row(**overrides):
    values = {
        "計算対象": "1",
        "日付": "2024/01/15",
        "内容": "コンビニ",
        "金額（円）": "-1200",
        "保有金融機関": "Bank A",
        "大項目": "食費",
        "中項目": "食料品",
        "メモ": "",
        "振替": "0",
        "ID": "mf-txn-1",
    }
    values.update(overrides)
    return values


@pytest.fixture
def mf_dir(tmp_path):
    mf_dir = tmp_path / "money-forward"
    mf_dir.mkdir()
    return mf_dir


class TestNormalize:
    def test_valid_row(self, mf_dir):
        result = MoneyForwardSource(mf_dir).normalize([row()], "2024-01.csv")

        assert result.issues == []
        txn = result.transactions[0]
        assert txn.source_id == "mf-txn-1"
        assert txn.date == date(2024, 1, 15)
        assert txn.amount == Decimal("-1200")
        assert txn.fee == Decimal("0")
        assert txn.description == "コンビニ"
        assert txn.external_account_ref == "Bank A"
        assert txn.category == "食費"
        assert txn.is_calculated is True
        assert txn.is_transfer is False

    def test_bad_amount_reported(self, mf_dir):
        result = MoneyForwardSource(mf_dir).normalize(
            [row(), row(**{"金額（円）": "12.5", "ID": "mf-txn-2"})], "2024-01.csv"
        )

        assert [t.source_id for t in result.transactions] == ["mf-txn-1"]
        assert result.issues[0].record_index == 2
        assert result.issues[0].field == "金額（円）"

    def test_missing_id_reported(self, mf_dir):
        result = MoneyForwardSource(mf_dir).normalize([row(ID="  ")], "2024-01.csv")

        assert result.transactions == []
        assert result.issues[0].field == "ID"


def test_monthly_filename():
    assert monthly_filename(date(2024, 3, 1)) == "2024-03.csv"


def test_discover_files_counts_back_from_today(mf_dir):
    source = MoneyForwardSource(mf_dir, months=3, today=date(2024, 2, 20))

    assert [p.name for p in source.discover_files()] == ["2024-02.csv", "2024-01.csv", "2023-12.csv"]


def test_default_window_is_eighteen_months(mf_dir):
    source = MoneyForwardSource(mf_dir, today=date(2024, 6, 1))
    files = source.discover_files()

    assert len(files) == 18
    assert files[-1].name == "2023-01.csv"


def test_missing_months_are_skipped(mf_dir):
    """Test a gap in the monthly exports is not fatal."""
    (mf_dir / "2024-01.csv").write_text(
        MF_HEADER + "1,2024/01/15,コンビニ,-1200,Bank A,食費,食料品,,0,mf-txn-1\n",
        encoding="utf-8",
    )
    source = MoneyForwardSource(mf_dir, months=3, today=date(2024, 2, 10))

    result = source.load()

    assert [t.source_id for t in result.transactions] == ["mf-txn-1"]


def test_load_accounts(mf_dir):
    (mf_dir / "accounts.csv").write_text(
        ACCOUNTS_HEADER
        + "mf-1,Bank A,bank,ok,2024-01-20,https://example.com/a,\n"
        + "mf-2,Card B,card,error,2024-01-19,https://example.com/b,Login failed\n",
        encoding="utf-8",
    )

    accounts = MoneyForwardSource(mf_dir).load_accounts()

    assert accounts == [
        AccountStatus("mf-1", "Bank A", "bank", "ok", "2024-01-20", "https://example.com/a", None),
        AccountStatus("mf-2", "Card B", "card", "error", "2024-01-19", "https://example.com/b", "Login failed"),
    ]


def test_load_accounts_without_file(mf_dir):
    assert MoneyForwardSource(mf_dir).load_accounts() == []


def test_external_accounts_come_from_accounts_file(tmp_path):
    mf_dir = tmp_path / "money-forward"
    mf_dir.mkdir()
    (mf_dir / "accounts.csv").write_text(
        ACCOUNTS_HEADER + "mf-1,Bank A,bank,ok,,,\n", encoding="utf-8"
    )
    source = create_source("money-forward", tmp_path, months=1)

    refs = source.external_accounts(source.load())

    assert [(r.integration, r.external_id, r.display_name) for r in refs] == [
        ("money-forward", "mf-1", "Bank A")
    ]
