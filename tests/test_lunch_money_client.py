"""Tests for the Lunch Money HTTP client."""

import json
import pytest
import requests
from datetime import date
from decimal import Decimal

from ledgersync.domain.entities import LedgerAccount, LedgerTransactionDraft
from ledgersync.ledger import LedgerError, LunchMoneyClient


def make_response(status_code=200, body=None, text=None, reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = "https://api.test/v2"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    return response


class FakeSession(requests.Session):
    """Session that records requests and replays canned responses."""

    def __init__(self, responses):
        super().__init__()
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        return self.responses.pop(0)


def make_client(*responses):
    session = FakeSession(responses)
    client = LunchMoneyClient("secret", base_url="https://api.test/v2/", timeout=5, session=session)
    return client, session


def test_authorization_headers():
    client, session = make_client(make_response(body={"name": "Ann", "email": "ann@example.com"}))

    user = client.get_me()

    assert user["name"] == "Ann"
    assert session.headers["Authorization"] == "Bearer secret"
    assert session.headers["Content-Type"] == "application/json"
    assert session.requests[0]["url"] == "https://api.test/v2/me"
    assert session.requests[0]["timeout"] == 5


def test_get_all_manual_accounts():
    client, session = make_client(
        make_response(
            body={
                "manual_accounts": [
                    {"id": 1, "name": "Wallet", "type": "cash"},
                    {"id": 2, "name": "Visa", "type": "credit", "display_name": "My Visa"},
                ]
            }
        )
    )

    accounts = client.get_all_manual_accounts()

    assert accounts == [
        LedgerAccount(id=1, name="Wallet", type="cash"),
        LedgerAccount(id=2, name="Visa", type="credit", display_name="My Visa"),
    ]
    assert accounts[1].label == "My Visa"
    assert session.requests[0]["method"] == "GET"


def test_create_manual_account():
    client, session = make_client(make_response(body={"id": 7, "name": "JPY", "type": "cash"}))

    account = client.create_manual_account("JPY", "cash")

    assert account.id == 7
    assert session.requests[0]["url"].endswith("/manual_accounts")
    assert session.requests[0]["json"] == {"name": "JPY", "type": "cash", "balance": "0"}


def test_create_transactions_payload():
    client, session = make_client(
        make_response(body={"transactions": [{"id": 1}], "skipped_duplicates": [{"external_id": "b"}]})
    )
    drafts = [
        LedgerTransactionDraft(
            account_id=3,
            date=date(2024, 1, 15),
            amount=Decimal("-43.50"),
            payee="Coffee Shop",
            notes="Coffee Shop",
            external_id="a",
        )
    ]

    result = client.create_transactions(drafts, skip_duplicates=False, apply_rules=True)

    sent = session.requests[0]["json"]
    assert sent["skip_duplicates"] is False
    assert sent["apply_rules"] is True
    assert sent["transactions"] == [
        {
            "manual_account_id": 3,
            "date": "2024-01-15",
            "amount": "-43.50",
            "payee": "Coffee Shop",
            "notes": "Coffee Shop",
            "external_id": "a",
        }
    ]
    assert len(result.transactions) == 1
    assert len(result.skipped_duplicates) == 1


def test_structured_rejection_raises_ledger_error():
    client, _ = make_client(
        make_response(
            status_code=400,
            reason="Bad Request",
            body={"message": "Invalid request", "errors": [{"field": "date", "message": "bad"}]},
        )
    )

    with pytest.raises(LedgerError) as excinfo:
        client.create_transactions([])

    error = excinfo.value
    assert error.message == "Invalid request"
    assert error.status_code == 400
    assert error.errors == [{"field": "date", "message": "bad"}]
    assert error.describe()[0] == "Invalid request"


def test_unstructured_failure_raises_http_error():
    client, _ = make_client(
        make_response(status_code=502, reason="Bad Gateway", text="<html>upstream</html>")
    )

    with pytest.raises(requests.HTTPError):
        client.get_me()
