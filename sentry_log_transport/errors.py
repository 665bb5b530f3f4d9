# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Error objects reported on the exception-capture path."""

from typing import Any, Mapping


class ExtendedError(Exception):
    """Exception synthesized from a log record that carries no exception.

    Attributes:
        message: The record's message (may be None)
        name: Error type name from the record, "Error" when absent
        stack: The record's stack text, only when it is a non-empty string
    """

    def __init__(self, record: Mapping[str, Any]):
        message = record.get("message")
        super().__init__(message)
        self.message = message
        self.name = record.get("name") or "Error"
        stack = record.get("stack")
        self.stack = stack if isinstance(stack, str) and stack else None

    def __str__(self) -> str:
        if self.message is None:
            return ""
        return str(self.message)


def is_error(value: Any) -> bool:
    """Return True if the value is an exception instance."""
    return isinstance(value, BaseException)


def find_error(record: Mapping[str, Any]) -> BaseException | None:
    """Return the first field value of the record that is an exception."""
    for value in record.values():
        if is_error(value):
            return value
    return None


def to_error(record: Mapping[str, Any]) -> BaseException:
    """Return the record's embedded exception, or synthesize one.

    Args:
        record: Log record mapping

    Returns:
        The embedded exception unchanged, else an ExtendedError built from
        the record's message, name and stack fields
    """
    error = find_error(record)
    if error is not None:
        return error
    return ExtendedError(record)
