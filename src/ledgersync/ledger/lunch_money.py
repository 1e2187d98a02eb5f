"""Lunch Money v2 HTTP client."""

import logging
from decimal import Decimal
from typing import Any, Optional

import requests

from ledgersync.domain.entities import LedgerAccount, LedgerTransactionDraft
from ledgersync.ledger.base import LedgerError, LedgerService, TransactionBatchResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.lunchmoney.dev/v2"
DEFAULT_TIMEOUT = 30


def account_from_payload(payload: dict[str, Any]) -> LedgerAccount:
    """Convert a manual account JSON object to a LedgerAccount."""
    return LedgerAccount(
        id=int(payload["id"]),
        name=payload.get("name") or "",
        type=payload.get("type") or "",
        display_name=payload.get("display_name") or None,
    )


def extract_ledger_error(response: requests.Response) -> Optional[LedgerError]:
    """Build a LedgerError from an error response, if the body is structured.

    Returns None when the body is not a JSON object, leaving the failure to
    the transport layer.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    message = body.get("message") or body.get("error") or response.reason or "Request failed"
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message)
    errors = body.get("errors") or []
    if not isinstance(errors, list):
        errors = [errors]
    return LedgerError(str(message), errors, status_code=response.status_code)


class LunchMoneyClient(LedgerService):
    """LedgerService backed by the Lunch Money REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Lunch Money access token
            base_url: API root, without trailing slash
            timeout: Per-request timeout in seconds
            session: Optional preconfigured session (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _request(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> Any:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            error = extract_ledger_error(response)
            if error is not None:
                raise error
            response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    def get_me(self) -> dict[str, Any]:
        return self._request("GET", "/me")

    def get_all_manual_accounts(self) -> list[LedgerAccount]:
        body = self._request("GET", "/manual_accounts")
        accounts = body.get("manual_accounts", []) if isinstance(body, dict) else body
        return [account_from_payload(item) for item in accounts]

    def create_manual_account(
        self, name: str, type: str, balance: Decimal = Decimal("0")
    ) -> LedgerAccount:
        body = self._request(
            "POST",
            "/manual_accounts",
            json={"name": name, "type": type, "balance": str(balance)},
        )
        account = account_from_payload(body)
        logger.info("Created ledger account %s (%s)", account.name, account.id)
        return account

    def create_transactions(
        self,
        transactions: list[LedgerTransactionDraft],
        skip_duplicates: bool = False,
        apply_rules: bool = True,
    ) -> TransactionBatchResult:
        body = self._request(
            "POST",
            "/transactions",
            json={
                "transactions": [t.to_payload() for t in transactions],
                "skip_duplicates": skip_duplicates,
                "apply_rules": apply_rules,
            },
        )
        return TransactionBatchResult(
            transactions=list(body.get("transactions") or []),
            skipped_duplicates=list(body.get("skipped_duplicates") or []),
        )
