"""SQLAlchemy models for ledgersync database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class AccountMapping(Base):
    """External account to ledger account mapping.

    ``integration`` namespaces the rows of each source system within the one
    table. ``account_id``/``account_name`` are the external side, ``lm_id`` the
    ledger side.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    integration = Column(String, nullable=False, index=True)
    lm_id = Column(Integer, nullable=False)
    account_id = Column(String, nullable=False)
    account_name = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("integration", "account_id", name="uq_integration_account_id"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
