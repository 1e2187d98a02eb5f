"""Account reconciliation domain service.

Pairs every account an integration reports with a ledger account, asking the
user through an injected :class:`Chooser`. Each external account moves through
a small state machine::

    PROMPTING --CHOSE_EXISTING--> MAPPED
    PROMPTING --CHOSE_SKIP------> SKIPPED
    PROMPTING --CHOSE_CREATE----> CREATING_ACCOUNT
    CREATING_ACCOUNT --CREATE_SUCCEEDED--> MAPPED
    CREATING_ACCOUNT --CREATE_FAILED-----> PROMPTING

A failed account creation goes back to the prompt for the same account; the
pass never drops an account silently and never aborts because of one failure.
"""

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Union

import requests

from ledgersync.domain.entities import AccountMapping, ExternalAccountRef, LedgerAccount
from ledgersync.domain.mapping import AccountMappingService
from ledgersync.ledger.base import ACCOUNT_TYPES, LedgerError, LedgerService

logger = logging.getLogger(__name__)

REMATCH_PROMPT = (
    "There are existing matches from a previous import. "
    "Do you want to rematch your accounts?"
)


class MatchAction(enum.Enum):
    """Sentinel choices offered next to the ledger accounts."""

    CREATE_NEW = "create"
    SKIP = "skip"


class MatchState(enum.Enum):
    PROMPTING = "prompting"
    CREATING_ACCOUNT = "creating_account"
    MAPPED = "mapped"
    SKIPPED = "skipped"


class MatchEvent(enum.Enum):
    CHOSE_EXISTING = "chose_existing"
    CHOSE_CREATE = "chose_create"
    CHOSE_SKIP = "chose_skip"
    CREATE_SUCCEEDED = "create_succeeded"
    CREATE_FAILED = "create_failed"


TERMINAL_STATES = frozenset({MatchState.MAPPED, MatchState.SKIPPED})

_TRANSITIONS = {
    (MatchState.PROMPTING, MatchEvent.CHOSE_EXISTING): MatchState.MAPPED,
    (MatchState.PROMPTING, MatchEvent.CHOSE_SKIP): MatchState.SKIPPED,
    (MatchState.PROMPTING, MatchEvent.CHOSE_CREATE): MatchState.CREATING_ACCOUNT,
    (MatchState.CREATING_ACCOUNT, MatchEvent.CREATE_SUCCEEDED): MatchState.MAPPED,
    (MatchState.CREATING_ACCOUNT, MatchEvent.CREATE_FAILED): MatchState.PROMPTING,
}


def transition(state: MatchState, event: MatchEvent) -> MatchState:
    """Return the next state of one external account.

    Raises:
        ValueError: If the event is not valid in the given state
    """
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"Invalid event {event.name} in state {state.name}")


@dataclass(frozen=True)
class Option:
    """One entry of a selection prompt."""

    label: str
    value: Any
    description: Optional[str] = None


class Chooser(ABC):
    """Interactive prompts needed by the reconciler."""

    @abstractmethod
    def select(self, prompt: str, options: list[Option]) -> Any:
        """Ask the user to pick one option; returns the option's value."""
        pass

    @abstractmethod
    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        pass

    @abstractmethod
    def text_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Ask for a line of text, pre-filled with ``default``."""
        pass


Selection = Union[LedgerAccount, MatchAction]


class AccountReconciler:
    """Service producing the account mapping of one integration."""

    def __init__(self, db, ledger: LedgerService, chooser: Chooser):
        """Initialize account reconciler.

        Args:
            db: Database instance holding the mapping table
            ledger: Ledger service used to list and create accounts
            chooser: Prompt implementation used for every user decision
        """
        self.mappings = AccountMappingService(db)
        self.ledger = ledger
        self.chooser = chooser

    def reconcile(
        self, integration: str, external_accounts: list[ExternalAccountRef]
    ) -> list[AccountMapping]:
        """Return a complete mapping for the accounts observed this run.

        Existing mappings are reused when the user declines to rematch. When
        rematching, the stored rows are cleared before the first prompt, so
        an interrupted pass leaves no mappings rather than a mix of old and
        new ones.

        Args:
            integration: Integration tag
            external_accounts: Accounts reported by the source, in prompt order

        Returns:
            Mappings persisted for the integration
        """
        ledger_accounts = self.ledger.get_all_manual_accounts()
        existing = self.mappings.list_mappings(integration)

        report = self.mappings.build_report(integration, external_accounts, ledger_accounts)
        self._log_report(integration, report)

        if existing and not self.chooser.confirm(REMATCH_PROMPT, default=False):
            return existing

        self.mappings.clear(integration)

        accounts = _unique_accounts(external_accounts)
        pool = list(ledger_accounts)
        pending = []
        for external in accounts:
            mapping = self._match_account(integration, external, pool)
            if mapping is not None:
                pending.append(mapping)

        self.mappings.replace_all(integration, pending)
        logger.info(
            "Saved %d %s account mapping(s), skipped %d",
            len(pending),
            integration,
            len(accounts) - len(pending),
        )
        return self.mappings.list_mappings(integration)

    def _match_account(
        self,
        integration: str,
        external: ExternalAccountRef,
        pool: list[LedgerAccount],
    ) -> Optional[AccountMapping]:
        state = MatchState.PROMPTING
        chosen: Optional[LedgerAccount] = None

        while state not in TERMINAL_STATES:
            if state is MatchState.PROMPTING:
                selection = self.chooser.select(
                    f"Which ledger account matches {external.display_name}?",
                    self._options(pool),
                )
                if selection is MatchAction.SKIP:
                    event = MatchEvent.CHOSE_SKIP
                elif selection is MatchAction.CREATE_NEW:
                    event = MatchEvent.CHOSE_CREATE
                else:
                    chosen = selection
                    event = MatchEvent.CHOSE_EXISTING
            else:
                chosen = self._create_account(external)
                event = MatchEvent.CREATE_FAILED if chosen is None else MatchEvent.CREATE_SUCCEEDED
            state = transition(state, event)

        if state is MatchState.SKIPPED:
            logger.info("Skipping %s account %s", integration, external.display_name)
            return None

        pool[:] = [account for account in pool if account.id != chosen.id]
        return AccountMapping(
            integration=integration,
            ledger_account_id=chosen.id,
            external_id=external.external_id,
            external_name=external.display_name,
        )

    def _create_account(self, external: ExternalAccountRef) -> Optional[LedgerAccount]:
        name = self.chooser.text_input("Account name", default=external.display_name)
        account_type = self.chooser.select(
            "Account type", [Option(label=t, value=t) for t in ACCOUNT_TYPES]
        )
        try:
            return self.ledger.create_manual_account(
                name=name, type=account_type, balance=Decimal("0")
            )
        except LedgerError as e:
            logger.error("Error creating account: %s", "\n".join(e.describe()))
        except requests.RequestException as e:
            logger.error("Error creating account. Please try again. (%s)", e)
        return None

    @staticmethod
    def _options(pool: list[LedgerAccount]) -> list[Option]:
        return (
            [Option(label="Create new account", value=MatchAction.CREATE_NEW)]
            + [Option(label=a.label, value=a, description=a.type) for a in pool]
            + [Option(label="N/A (skip)", value=MatchAction.SKIP)]
        )

    @staticmethod
    def _log_report(integration, report) -> None:
        logger.info("Existing %s to ledger account mappings:", integration)
        for pair in report.mapped:
            logger.info("  %s -> %s", pair.ledger_name, pair.external_name)
        if report.unmapped:
            logger.info("Unmapped %s accounts:", integration)
            for account in report.unmapped:
                logger.info("  %s", account.display_name)


def _unique_accounts(accounts: list[ExternalAccountRef]) -> list[ExternalAccountRef]:
    """Drop repeated external ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for account in accounts:
        if account.external_id not in seen:
            seen.add(account.external_id)
            unique.append(account)
    return unique
