"""Retry helpers for outbound Google Cloud calls.

The default policy performs a single attempt so a snippet call is made exactly
once. Operators can opt into Tenacity backed retries for transient failures via
``SNIPPETS_RETRY_ATTEMPTS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from google.api_core import exceptions as core_exceptions
from googleapiclient.errors import HttpError
from tenacity import (
    Retrying,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shared.config.settings import RetrySettings
from shared.errors import SnippetConfigurationError
from shared.observability.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    core_exceptions.ServiceUnavailable,
    core_exceptions.DeadlineExceeded,
    core_exceptions.TooManyRequests,
    ConnectionError,
    TimeoutError,
)

# Discovery clients raise a single ``HttpError`` type, so transient failures
# are identified by response status instead.
TRANSIENT_HTTP_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for Tenacity retry execution."""

    attempts: int = 1
    initial_delay: float = 0.5
    max_delay: float = 8.0
    backoff_multiplier: float = 2.0
    retry_exceptions: tuple[type[BaseException], ...] = TRANSIENT_EXCEPTIONS
    retry_http_statuses: frozenset[int] = TRANSIENT_HTTP_STATUSES

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise SnippetConfigurationError(
                "Retry policy must allow at least one attempt.",
                context={"attempts": self.attempts},
            )

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> "RetryPolicy":
        return cls(
            attempts=settings.attempts,
            initial_delay=settings.initial_delay,
            max_delay=settings.max_delay,
        )


def _coerce_exceptions(
    exceptions: Iterable[type[BaseException]] | tuple[type[BaseException], ...]
) -> tuple[type[BaseException], ...]:
    """Ensure ``exceptions`` is a tuple for Tenacity configuration."""

    if isinstance(exceptions, tuple):
        return exceptions
    return tuple(exceptions)


def is_transient_http_error(
    error: BaseException, statuses: frozenset[int] = TRANSIENT_HTTP_STATUSES
) -> bool:
    """Return whether ``error`` is an ``HttpError`` carrying a retryable status."""

    if not isinstance(error, HttpError):
        return False
    status = getattr(error.resp, "status", None)
    try:
        return int(status) in statuses
    except (TypeError, ValueError):
        return False


def _log_retry(retry_state: Any) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    logger.warning(
        "remote_call_retry",
        attempt=retry_state.attempt_number,
        error_type=type(error).__name__ if error is not None else None,
    )


def call_with_retry(
    func: Callable[..., T],
    *args: Any,
    policy: RetryPolicy | None = None,
    **kwargs: Any,
) -> T:
    """Execute ``func`` with Tenacity retry semantics.

    The final exception is re-raised unchanged once attempts are exhausted.
    """

    resolved_policy = policy or RetryPolicy()
    retrying = Retrying(
        retry=(
            retry_if_exception_type(
                _coerce_exceptions(resolved_policy.retry_exceptions)
            )
            | retry_if_exception(
                lambda error: is_transient_http_error(
                    error, resolved_policy.retry_http_statuses
                )
            )
        ),
        stop=stop_after_attempt(resolved_policy.attempts),
        wait=wait_exponential(
            multiplier=resolved_policy.initial_delay,
            min=resolved_policy.initial_delay,
            max=resolved_policy.max_delay,
            exp_base=resolved_policy.backoff_multiplier,
        ),
        before_sleep=_log_retry,
        reraise=True,
    )

    for attempt in retrying:
        with attempt:
            return func(*args, **kwargs)

    # The loop always returns or raises, but mypy requires an explicit return.
    raise RuntimeError("Retry loop terminated without executing the function.")


__all__ = [
    "RetryPolicy",
    "TRANSIENT_EXCEPTIONS",
    "TRANSIENT_HTTP_STATUSES",
    "call_with_retry",
    "is_transient_http_error",
]
