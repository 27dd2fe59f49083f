"""Cloud DLP deterministic encryption snippets."""

from .deidentify import (
    build_deidentify_request,
    build_reidentify_request,
    create_dlp_client,
    deidentify_with_deterministic_encryption,
    reidentify_with_deterministic_encryption,
)
from .models import (
    ContentItem,
    DeterministicTransformSpec,
    DlpParent,
    InfoTypeSpec,
    WrappedEncryptionKey,
)

__all__ = [
    "ContentItem",
    "DeterministicTransformSpec",
    "DlpParent",
    "InfoTypeSpec",
    "WrappedEncryptionKey",
    "build_deidentify_request",
    "build_reidentify_request",
    "create_dlp_client",
    "deidentify_with_deterministic_encryption",
    "reidentify_with_deterministic_encryption",
]
