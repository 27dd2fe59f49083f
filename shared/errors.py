"""Exceptions raised locally by the snippets before any remote call is made."""

from __future__ import annotations

from typing import Any, Mapping

__all__ = [
    "InvalidWrappedKeyError",
    "SnippetConfigurationError",
    "SnippetError",
]


class SnippetError(RuntimeError):
    """Base exception carrying structured, non-sensitive context."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.context = dict(context or {})


class SnippetConfigurationError(SnippetError):
    """Raised when local configuration cannot be used."""


class InvalidWrappedKeyError(SnippetError, ValueError):
    """Raised when the KMS wrapped key is not valid base64.

    The message never includes the key material itself.
    """

    def __init__(self, *, key_name: str | None = None, reason: str | None = None) -> None:
        context: dict[str, Any] = {"crypto_key_name": key_name}
        if reason:
            context["reason"] = reason
        super().__init__(
            "The wrapped key is not valid base64 and cannot be sent to Cloud DLP.",
            context=context,
        )
