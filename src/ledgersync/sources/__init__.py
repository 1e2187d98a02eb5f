"""Source adapters, one per integration."""

from pathlib import Path

from ledgersync.domain.errors import NotFoundError, unknown_integration
from ledgersync.sources.base import SourceAdapter
from ledgersync.sources.money_forward import MoneyForwardSource
from ledgersync.sources.revolut import RevolutSource

SOURCES: dict[str, type[SourceAdapter]] = {
    MoneyForwardSource.integration: MoneyForwardSource,
    RevolutSource.integration: RevolutSource,
}


def create_source(integration: str, data_dir: Path, **options) -> SourceAdapter:
    """Create the adapter for an integration reading from ``data_dir/<integration>``.

    Raises:
        NotFoundError: If no adapter exists for the integration
    """
    source_cls = SOURCES.get(integration)
    if source_cls is None:
        raise NotFoundError(unknown_integration(integration, sorted(SOURCES)))
    return source_cls(Path(data_dir) / integration, **options)


__all__ = ["SOURCES", "SourceAdapter", "MoneyForwardSource", "RevolutSource", "create_source"]
