# starnotary/config.py
import logging
import os
from dataclasses import dataclass

NETWORKS = ("mainnet", "testnet", "regtest")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings. Resolution order (first wins):
    1. explicit arguments (CLI flags)
    2. STARNOTARY_* environment variables
    3. defaults below
    """
    network: str = "mainnet"
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.network not in NETWORKS:
            raise ValueError(f"Unsupported network '{self.network}' (expected one of {', '.join(NETWORKS)})")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level '{self.log_level}'")

    @classmethod
    def from_env(cls, network: str | None = None, log_level: str | None = None) -> "Settings":
        return cls(
            network=(network or os.environ.get("STARNOTARY_NETWORK") or cls.network).lower(),
            log_level=(log_level or os.environ.get("STARNOTARY_LOG_LEVEL") or cls.log_level).upper(),
        )
