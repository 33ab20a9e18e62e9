"""
Exceptions raised by the sql bus.
"""


class SqlBusError(Exception):
    """Base class for sql bus errors."""


class PublishError(SqlBusError, OSError):
    """A message could not be written to the message table."""


class DecodeError(SqlBusError, ValueError):
    """A stored message could not be decoded back to bytes."""
