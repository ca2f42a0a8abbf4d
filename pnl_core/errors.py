from __future__ import annotations


class StatementError(Exception):
    """Base error for an upload that could not become the new record set.

    The message is user-facing and shown as-is in the error banner.
    """


class EmptyStatementError(StatementError):
    """The file parsed but yielded no transaction rows."""


class StatementParseError(StatementError):
    """The file could not be decoded or parsed."""
