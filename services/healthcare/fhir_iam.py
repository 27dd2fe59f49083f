"""Read and replace the IAM policy of a Cloud Healthcare FHIR store."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, ContextManager

from shared.config.settings import Settings, resolve_settings
from shared.observability.logger import get_logger, operation_context
from shared.resilience import RetryPolicy, call_with_retry

from .client import create_healthcare_client
from .models import AccessPolicy, default_policy

logger = get_logger(__name__)


def _open_client(client: Any | None, settings: Settings) -> ContextManager[Any]:
    # Injected clients belong to the caller and are left open.
    if client is not None:
        return nullcontext(client)
    return create_healthcare_client(settings)


def _fhir_stores(client: Any) -> Any:
    return client.projects().locations().datasets().fhirStores()


def build_set_iam_policy_body(policy: AccessPolicy) -> dict[str, Any]:
    """Wrap ``policy`` in a ``SetIamPolicyRequest`` body."""

    return {"policy": policy.to_api()}


def set_fhir_store_iam_policy(
    fhir_store_name: str,
    *,
    policy: AccessPolicy | None = None,
    settings: Settings | None = None,
    client: Any | None = None,
    retry_policy: RetryPolicy | None = None,
) -> AccessPolicy:
    """Replace the FHIR store policy and return the policy confirmed by the service.

    The existing policy is overwritten, not merged. ``fhir_store_name`` is
    passed through as-is; malformed names are rejected by the service.
    """

    resolved = resolve_settings(settings)
    requested = policy or default_policy(resolved.healthcare)
    body = build_set_iam_policy_body(requested)
    attempts = retry_policy or RetryPolicy.from_settings(resolved.retry)

    with operation_context("healthcare.fhir_iam.set"):
        logger.info(
            "healthcare.fhir_iam.set.request",
            resource=fhir_store_name,
            roles=[binding.role for binding in requested.bindings],
            binding_count=len(requested.bindings),
        )
        with _open_client(client, resolved) as healthcare:
            request = _fhir_stores(healthcare).setIamPolicy(
                resource=fhir_store_name, body=body
            )
            response = call_with_retry(request.execute, policy=attempts)
        updated = AccessPolicy.model_validate(response)
        logger.info(
            "healthcare.fhir_iam.set.response",
            resource=fhir_store_name,
            binding_count=len(updated.bindings),
            version=updated.version,
        )
    return updated


def get_fhir_store_iam_policy(
    fhir_store_name: str,
    *,
    settings: Settings | None = None,
    client: Any | None = None,
    retry_policy: RetryPolicy | None = None,
) -> AccessPolicy:
    """Return the current IAM policy attached to the FHIR store."""

    resolved = resolve_settings(settings)
    attempts = retry_policy or RetryPolicy.from_settings(resolved.retry)

    with operation_context("healthcare.fhir_iam.get"):
        logger.info("healthcare.fhir_iam.get.request", resource=fhir_store_name)
        with _open_client(client, resolved) as healthcare:
            request = _fhir_stores(healthcare).getIamPolicy(resource=fhir_store_name)
            response = call_with_retry(request.execute, policy=attempts)
        current = AccessPolicy.model_validate(response)
        logger.info(
            "healthcare.fhir_iam.get.response",
            resource=fhir_store_name,
            binding_count=len(current.bindings),
        )
    return current


__all__ = [
    "build_set_iam_policy_body",
    "get_fhir_store_iam_policy",
    "set_fhir_store_iam_policy",
]
