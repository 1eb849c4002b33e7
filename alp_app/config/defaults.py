"""Default configuration parameters for the dashboard."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LedgerParams:
    """Where the ledger contract lives and how its currency is scaled."""
    contract_address: str = "0x0000000000000000000000000000000000000000"
    currency_symbol: str = "ETH"
    currency_decimals: int = 18                      # Base units per display unit = 10**decimals


@dataclass(frozen=True)
class TimeoutParams:
    """Suspend point limits."""
    confirmation_timeout_seconds: Optional[float] = 120.0   # None waits indefinitely
    read_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class CatalogParams:
    """Catalog enumeration parameters."""
    max_concurrent_reads: int = 8


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DashboardConfig:
    """Complete dashboard configuration."""
    ledger: LedgerParams
    timeouts: TimeoutParams
    catalog: CatalogParams
    logging: LoggingParams


def get_default_config() -> DashboardConfig:
    """Get the default configuration instance."""
    return DashboardConfig(
        ledger=LedgerParams(),
        timeouts=TimeoutParams(),
        catalog=CatalogParams(),
        logging=LoggingParams(),
    )
