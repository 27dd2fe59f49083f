"""De-identify and re-identify text with Cloud DLP deterministic encryption.

Matched substrings are replaced by ``SURROGATE(len):token`` values computed by
the service from a KMS wrapped AES-256 key. The same plaintext and key always
yield the same token, which is what makes the transformation reversible by
:func:`reidentify_with_deterministic_encryption`.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, ContextManager, Sequence

from google.api_core.client_options import ClientOptions
from google.cloud import dlp_v2

from shared.config.settings import DlpSettings, Settings, resolve_settings
from shared.observability.logger import get_logger, operation_context
from shared.resilience import RetryPolicy, call_with_retry

from .models import (
    ContentItem,
    DeterministicTransformSpec,
    DlpParent,
    InfoTypeSpec,
    WrappedEncryptionKey,
)

logger = get_logger(__name__)


def create_dlp_client(settings: Settings | None = None) -> dlp_v2.DlpServiceClient:
    """Return a DLP client authenticated with Application Default Credentials."""

    dlp_settings = resolve_settings(settings).dlp
    client_options = None
    if dlp_settings.api_endpoint:
        client_options = ClientOptions(api_endpoint=dlp_settings.api_endpoint)
    return dlp_v2.DlpServiceClient(client_options=client_options)


def _open_client(client: Any | None, settings: Settings) -> ContextManager[Any]:
    # Injected clients belong to the caller and are left open.
    if client is not None:
        return nullcontext(client)
    return create_dlp_client(settings)


def _call_options(dlp_settings: DlpSettings) -> dict[str, Any]:
    # ``retry=None`` disables the GAPIC default retry so the call is sent once
    # unless a RetryPolicy explicitly allows more attempts.
    options: dict[str, Any] = {"retry": None}
    if dlp_settings.timeout_seconds is not None:
        options["timeout"] = dlp_settings.timeout_seconds
    return options


def _info_type_specs(
    info_types: Sequence[str] | None, dlp_settings: DlpSettings
) -> list[InfoTypeSpec]:
    names = list(info_types) if info_types else [dlp_settings.info_type]
    return [InfoTypeSpec(name=name) for name in names]


def build_deidentify_request(
    parent: DlpParent,
    item: ContentItem,
    info_types: Sequence[InfoTypeSpec],
    transform: DeterministicTransformSpec,
) -> dict[str, Any]:
    """Combine the content, inspection and encryption configuration."""

    return {
        "parent": parent.path,
        "item": item.to_request(),
        "inspect_config": {
            "info_types": [info_type.to_request() for info_type in info_types]
        },
        "deidentify_config": transform.to_transformation_config(),
    }


def build_reidentify_request(
    parent: DlpParent,
    item: ContentItem,
    transform: DeterministicTransformSpec,
) -> dict[str, Any]:
    """Build the inverse request; the surrogate is inspected as a custom info type."""

    return {
        "parent": parent.path,
        "item": item.to_request(),
        "inspect_config": {
            "custom_info_types": [
                {
                    "info_type": transform.surrogate_info_type.to_request(),
                    "surrogate_type": {},
                }
            ]
        },
        "reidentify_config": transform.to_transformation_config(),
    }


def deidentify_with_deterministic_encryption(
    project_id: str,
    text: str,
    wrapped_key: str,
    key_name: str,
    *,
    info_types: Sequence[str] | None = None,
    surrogate_type: str | None = None,
    settings: Settings | None = None,
    client: Any | None = None,
    retry_policy: RetryPolicy | None = None,
) -> str:
    """Encrypt every ``info_types`` finding in ``text`` and return the result.

    ``wrapped_key`` is the base64 encoded AES-256 key wrapped by the Cloud KMS
    key ``key_name``. It is decoded before any client is created, so malformed
    input never reaches the network. Remote failures propagate unchanged.
    """

    resolved = resolve_settings(settings)
    crypto_key = WrappedEncryptionKey.from_base64(wrapped_key, key_name)
    transform = DeterministicTransformSpec(
        surrogate_info_type=InfoTypeSpec(
            name=surrogate_type or resolved.dlp.surrogate_info_type
        ),
        crypto_key=crypto_key,
    )
    specs = _info_type_specs(info_types, resolved.dlp)
    parent = DlpParent(project_id=project_id, location=resolved.dlp.location)
    request = build_deidentify_request(parent, ContentItem(value=text), specs, transform)
    policy = retry_policy or RetryPolicy.from_settings(resolved.retry)

    with operation_context("dlp.deidentify"):
        logger.info(
            "dlp.deidentify.request",
            parent=parent.path,
            info_types=[spec.name for spec in specs],
            surrogate_info_type=transform.surrogate_info_type.name,
            text_length=len(text),
        )
        with _open_client(client, resolved) as dlp:
            response = call_with_retry(
                dlp.deidentify_content,
                request=request,
                policy=policy,
                **_call_options(resolved.dlp),
            )
        result = response.item.value
        logger.info("dlp.deidentify.response", text_length=len(result))
    return result


def reidentify_with_deterministic_encryption(
    project_id: str,
    text: str,
    wrapped_key: str,
    key_name: str,
    *,
    surrogate_type: str | None = None,
    settings: Settings | None = None,
    client: Any | None = None,
    retry_policy: RetryPolicy | None = None,
) -> str:
    """Restore text previously produced by :func:`deidentify_with_deterministic_encryption`."""

    resolved = resolve_settings(settings)
    crypto_key = WrappedEncryptionKey.from_base64(wrapped_key, key_name)
    transform = DeterministicTransformSpec(
        surrogate_info_type=InfoTypeSpec(
            name=surrogate_type or resolved.dlp.surrogate_info_type
        ),
        crypto_key=crypto_key,
    )
    parent = DlpParent(project_id=project_id, location=resolved.dlp.location)
    request = build_reidentify_request(parent, ContentItem(value=text), transform)
    policy = retry_policy or RetryPolicy.from_settings(resolved.retry)

    with operation_context("dlp.reidentify"):
        logger.info(
            "dlp.reidentify.request",
            parent=parent.path,
            surrogate_info_type=transform.surrogate_info_type.name,
            text_length=len(text),
        )
        with _open_client(client, resolved) as dlp:
            response = call_with_retry(
                dlp.reidentify_content,
                request=request,
                policy=policy,
                **_call_options(resolved.dlp),
            )
        result = response.item.value
        logger.info("dlp.reidentify.response", text_length=len(result))
    return result


__all__ = [
    "build_deidentify_request",
    "build_reidentify_request",
    "create_dlp_client",
    "deidentify_with_deterministic_encryption",
    "reidentify_with_deterministic_encryption",
]
