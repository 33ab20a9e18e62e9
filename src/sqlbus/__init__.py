"""
sqlbus - publish/subscribe over a shared SQL table
"""

__version__ = "0.1.0"

from sqlbus.broker import SqlBroker
from sqlbus.codec import Base64Codec, Codec
from sqlbus.config import BrokerConfig
from sqlbus.dialect import Dialect, MySQLDialect, PostgresDialect
from sqlbus.errors import DecodeError, PublishError, SqlBusError
from sqlbus.scheduler import AsyncioScheduler, Scheduler
from sqlbus.source import ConnectionSource, DataSource, Ownership, PooledSource
from sqlbus.types import NO_ID, BrokerState, Message, TimeUnit

__all__ = [
    "AsyncioScheduler",
    "Base64Codec",
    "BrokerConfig",
    "BrokerState",
    "Codec",
    "ConnectionSource",
    "DataSource",
    "DecodeError",
    "Dialect",
    "Message",
    "MySQLDialect",
    "NO_ID",
    "Ownership",
    "PooledSource",
    "PostgresDialect",
    "PublishError",
    "Scheduler",
    "SqlBroker",
    "SqlBusError",
    "TimeUnit",
    "__version__",
]
