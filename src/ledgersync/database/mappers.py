"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the column names of the
``accounts`` table (``lm_id``, ``account_id``, ``account_name``) never leak
into the domain.
"""

from ledgersync.domain import entities as domain
from ledgersync.database.models import AccountMapping as ORMAccountMapping


def account_mapping_to_domain(orm_mapping: ORMAccountMapping) -> domain.AccountMapping:
    """Convert SQLAlchemy AccountMapping model to domain AccountMapping entity."""
    return domain.AccountMapping(
        id=orm_mapping.id,
        integration=orm_mapping.integration,
        ledger_account_id=orm_mapping.lm_id,
        external_id=orm_mapping.account_id,
        external_name=orm_mapping.account_name,
    )


def account_mapping_to_orm(mapping: domain.AccountMapping) -> ORMAccountMapping:
    """Convert domain AccountMapping entity to a new SQLAlchemy row.

    The domain ``id`` is ignored; rows always get a fresh primary key.
    """
    return ORMAccountMapping(
        integration=mapping.integration,
        lm_id=mapping.ledger_account_id,
        account_id=mapping.external_id,
        account_name=mapping.external_name,
    )
