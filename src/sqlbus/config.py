"""Configuration for SqlBroker."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from sqlbus.types import TimeUnit

ENV_PREFIX = "SQLBUS_"


@dataclass
class BrokerConfig:
    """Settings shared by every broker on the same table."""

    table_prefix: str = ""
    """Prefix for the message table. '' gives 'messenger', 'app_' gives 'app_messenger'."""

    poll_interval: float = 10
    """Delay between polls, in `poll_unit`. Retention runs every 30 intervals."""

    poll_unit: TimeUnit = TimeUnit.SECONDS

    dsn: Optional[str] = None
    """PostgreSQL DSN used by SqlBroker.from_dsn()."""

    @property
    def poll_seconds(self) -> float:
        return self.poll_unit.to_seconds(self.poll_interval)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX
    ) -> "BrokerConfig":
        """
        Read SQLBUS_TABLE_PREFIX, SQLBUS_POLL_INTERVAL, SQLBUS_POLL_UNIT and
        SQLBUS_DSN; unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()
        if f"{prefix}TABLE_PREFIX" in env:
            config.table_prefix = env[f"{prefix}TABLE_PREFIX"]
        if env.get(f"{prefix}POLL_INTERVAL"):
            try:
                config.poll_interval = float(env[f"{prefix}POLL_INTERVAL"])
            except ValueError as e:
                raise ValueError(
                    f"{prefix}POLL_INTERVAL must be a number, "
                    f"got {env[f'{prefix}POLL_INTERVAL']!r}"
                ) from e
        if env.get(f"{prefix}POLL_UNIT"):
            config.poll_unit = TimeUnit(env[f"{prefix}POLL_UNIT"])
        config.dsn = env.get(f"{prefix}DSN") or None
        return config
