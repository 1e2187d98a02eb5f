"""Account mapping domain service."""

import logging

from ledgersync.database.base import Database
from ledgersync.domain.entities import (
    AccountMapping,
    ExternalAccountRef,
    LedgerAccount,
    MappedPair,
    MappingReport,
)
from ledgersync.domain.errors import (
    ConflictError,
    ValidationError,
    duplicate_external_account,
    duplicate_ledger_account,
)

logger = logging.getLogger(__name__)

MISSING_NAME = "<missing>"


class AccountMappingService:
    """Service for the persisted external-to-ledger account mappings."""

    def __init__(self, db: Database):
        """Initialize account mapping service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_mappings(self, integration: str) -> list[AccountMapping]:
        """List persisted mappings for one integration.

        Args:
            integration: Integration tag (e.g. "revolut")

        Returns:
            List of mapping entities, in no guaranteed order
        """
        return self.db.list_mappings(integration)

    def list_integrations(self) -> list[str]:
        """List integration tags with stored mappings."""
        return self.db.list_integrations()

    def replace_all(self, integration: str, mappings: list[AccountMapping]) -> None:
        """Replace every mapping of an integration with the given set.

        This is the only way mappings change. Passing an empty list clears the
        integration.

        Args:
            integration: Integration tag
            mappings: Complete new mapping set

        Raises:
            ValidationError: If a mapping belongs to another integration
            ConflictError: If the set maps an external account or a ledger
                account more than once
        """
        seen_external: set[str] = set()
        seen_ledger: set[int] = set()
        for mapping in mappings:
            if mapping.integration != integration:
                raise ValidationError(
                    f"Mapping for '{mapping.external_id}' belongs to "
                    f"{mapping.integration}, not {integration}"
                )
            if mapping.external_id in seen_external:
                raise ConflictError(duplicate_external_account(integration, mapping.external_id))
            if mapping.ledger_account_id in seen_ledger:
                raise ConflictError(
                    duplicate_ledger_account(integration, mapping.ledger_account_id)
                )
            seen_external.add(mapping.external_id)
            seen_ledger.add(mapping.ledger_account_id)

        self.db.replace_all_mappings(integration, mappings)

    def clear(self, integration: str) -> None:
        """Remove every mapping of an integration."""
        self.replace_all(integration, [])

    def build_report(
        self,
        integration: str,
        external_accounts: list[ExternalAccountRef],
        ledger_accounts: list[LedgerAccount],
    ) -> MappingReport:
        """Diff stored mappings against the live accounts on both sides.

        Args:
            integration: Integration tag
            external_accounts: Accounts observed in the source this run
            ledger_accounts: Current ledger accounts

        Returns:
            Report of stored pairs (with "<missing>" for a side that no longer
            exists) and of external accounts without a mapping
        """
        ledger_by_id = {account.id: account for account in ledger_accounts}
        external_by_id = {account.external_id: account for account in external_accounts}

        mapped = []
        mapped_external_ids = set()
        for mapping in self.list_mappings(integration):
            ledger_account = ledger_by_id.get(mapping.ledger_account_id)
            external_account = external_by_id.get(mapping.external_id)
            if external_account is not None:
                mapped_external_ids.add(external_account.external_id)
            mapped.append(
                MappedPair(
                    ledger_name=ledger_account.label if ledger_account else MISSING_NAME,
                    external_name=(
                        external_account.display_name if external_account else MISSING_NAME
                    ),
                )
            )

        unmapped = [
            account
            for account in external_accounts
            if account.external_id not in mapped_external_ids
        ]
        return MappingReport(mapped=mapped, unmapped=unmapped)

    @staticmethod
    def lookup(mappings: list[AccountMapping]) -> dict[str, int]:
        """Build the account lookup used when importing transactions.

        Transactions reference their account by the name the source prints,
        so the lookup is keyed by ``external_name``. When two mappings share a
        name the first one is kept and a warning is logged.
        """
        lookup: dict[str, int] = {}
        for mapping in mappings:
            if mapping.external_name in lookup:
                logger.warning(
                    "Account %s shares the name '%s' with another mapping; "
                    "its transactions go to ledger account %d",
                    mapping.external_id,
                    mapping.external_name,
                    lookup[mapping.external_name],
                )
                continue
            lookup[mapping.external_name] = mapping.ledger_account_id
        return lookup
