"""
SQL dialects for the message table.

Schema (table name is `<prefix>messenger`):

  id       auto-increment primary key
  time     TIMESTAMP NOT NULL   -- TIMESTAMPTZ on PostgreSQL; set to NOW() on insert
  channel  VARCHAR(255) NOT NULL
  msg      TEXT NOT NULL        -- payload encoded by the broker's codec

All statements use the store's own NOW(), so every participant compares rows
against the same clock regardless of local time on the publishing host.
"""

from datetime import timedelta
from typing import Any, Optional

UNKNOWN_CHARSET_MARKER = "Unknown character set"


class Dialect:
    """Base dialect. Subclasses render the statements used by SqlBroker."""

    name = "generic"
    #: Preferred table charset, None if the dialect has no such clause.
    charset: Optional[str] = None
    #: Charset retried when the store rejects `charset`.
    fallback_charset: Optional[str] = None

    def quote(self, identifier: str) -> str:
        return f'"{identifier}"'

    def param(self, index: int) -> str:
        """Placeholder for the 1-based parameter `index`."""
        raise NotImplementedError

    def interval(self, age: timedelta) -> Any:
        """Parameter value representing `age` in the store's time arithmetic."""
        raise NotImplementedError

    def create_table(self, table: str, charset: Optional[str] = None) -> str:
        raise NotImplementedError

    def select_max_id(self, table: str) -> str:
        return f"SELECT MAX(id) AS latest FROM {self.quote(table)}"

    def insert_message(self, table: str) -> str:
        return (
            f"INSERT INTO {self.quote(table)} (time, channel, msg) "
            f"VALUES (NOW(), {self.param(1)}, {self.param(2)})"
        )

    def select_messages(self, table: str) -> str:
        raise NotImplementedError

    def delete_messages(self, table: str) -> str:
        raise NotImplementedError

    def is_unknown_charset(self, exc: BaseException) -> bool:
        """True if `exc` says the store does not support the requested charset."""
        return UNKNOWN_CHARSET_MARKER in str(exc)


class PostgresDialect(Dialect):
    """PostgreSQL via asyncpg: $n placeholders, interval parameters."""

    name = "postgresql"

    def param(self, index: int) -> str:
        return f"${index}"

    def interval(self, age: timedelta) -> timedelta:
        return age

    def create_table(self, table: str, charset: Optional[str] = None) -> str:
        return f"""
            CREATE TABLE IF NOT EXISTS {self.quote(table)} (
                id BIGSERIAL PRIMARY KEY,
                time TIMESTAMPTZ NOT NULL,
                channel VARCHAR(255) NOT NULL,
                msg TEXT NOT NULL
            )
            """

    def select_messages(self, table: str) -> str:
        return f"""
            SELECT id, channel, msg
            FROM {self.quote(table)}
            WHERE id > $1 AND time > NOW() - $2::interval
            ORDER BY id
            """

    def delete_messages(self, table: str) -> str:
        return f"DELETE FROM {self.quote(table)} WHERE time < NOW() - $1::interval"


class MySQLDialect(Dialect):
    """
    MySQL/MariaDB.

    No DataSource for MySQL ships with this package: PooledSource and
    ConnectionSource speak asyncpg only. To use this dialect, provide a
    DataSource whose connections expose asyncpg-style coroutines
    (execute(sql, *args), fetch(sql, *args) returning rows with mapping access
    by column name, fetchval(sql, *args)) taking %s placeholders, and whose
    `errors` tuple lists the MySQL driver's exception types. The utf8mb4 to
    utf8 fallback only triggers for errors in that tuple.
    """

    name = "mysql"
    charset = "utf8mb4"
    fallback_charset = "utf8"

    def quote(self, identifier: str) -> str:
        return f"`{identifier}`"

    def param(self, index: int) -> str:
        return "%s"

    def interval(self, age: timedelta) -> int:
        return int(age.total_seconds())

    def create_table(self, table: str, charset: Optional[str] = None) -> str:
        charset = charset or self.charset
        return (
            f"CREATE TABLE IF NOT EXISTS {self.quote(table)} ("
            "`id` BIGINT AUTO_INCREMENT NOT NULL, "
            "`time` TIMESTAMP NOT NULL, "
            "`channel` VARCHAR(255) NOT NULL, "
            "`msg` TEXT NOT NULL, "
            "PRIMARY KEY (`id`)"
            f") DEFAULT CHARSET = {charset}"
        )

    def select_messages(self, table: str) -> str:
        return (
            f"SELECT `id`, `channel`, `msg` FROM {self.quote(table)} "
            "WHERE `id` > %s AND `time` > NOW() - INTERVAL %s SECOND "
            "ORDER BY `id`"
        )

    def delete_messages(self, table: str) -> str:
        return (
            f"DELETE FROM {self.quote(table)} "
            "WHERE `time` < NOW() - INTERVAL %s SECOND"
        )
