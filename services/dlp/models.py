"""Request scoped value objects for Cloud DLP deterministic encryption."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import InvalidWrappedKeyError


class DlpModel(BaseModel):
    """Base model for immutable DLP request fragments."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class DlpParent(DlpModel):
    """Project and location the request is processed in."""

    project_id: str = Field(..., min_length=1, description="Google Cloud project identifier")
    location: str = Field(default="global", min_length=1, description="DLP processing location")

    @property
    def path(self) -> str:
        return f"projects/{self.project_id}/locations/{self.location}"


class ContentItem(DlpModel):
    """Raw text payload sent to the service."""

    value: str = Field(..., min_length=1, description="Text to transform")

    def to_request(self) -> dict[str, Any]:
        return {"value": self.value}


class InfoTypeSpec(DlpModel):
    """Named info type category, e.g. ``US_SOCIAL_SECURITY_NUMBER``.

    See https://cloud.google.com/dlp/docs/infotypes-reference for the list of
    built-in detectors.
    """

    name: str = Field(..., min_length=1)

    def to_request(self) -> dict[str, Any]:
        return {"name": self.name}


class WrappedEncryptionKey(DlpModel):
    """AES-256 key encrypted by Cloud KMS.

    The plaintext key is never visible locally; Cloud DLP unwraps it with the
    named KMS key.
    """

    wrapped_key: bytes = Field(..., min_length=1, repr=False)
    crypto_key_name: str = Field(
        ...,
        min_length=1,
        description="projects/*/locations/*/keyRings/*/cryptoKeys/* resource name",
    )

    @classmethod
    def from_base64(cls, encoded: str, crypto_key_name: str) -> "WrappedEncryptionKey":
        """Decode ``encoded`` strictly; non-alphabet characters are rejected."""

        try:
            raw = base64.b64decode(encoded.encode("utf-8"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidWrappedKeyError(
                key_name=crypto_key_name, reason=type(exc).__name__
            ) from None
        if not raw:
            raise InvalidWrappedKeyError(key_name=crypto_key_name, reason="empty")
        return cls(wrapped_key=raw, crypto_key_name=crypto_key_name)

    def to_request(self) -> dict[str, Any]:
        return {
            "kms_wrapped": {
                "wrapped_key": self.wrapped_key,
                "crypto_key_name": self.crypto_key_name,
            }
        }


class DeterministicTransformSpec(DlpModel):
    """How matched content is rewritten: surrogate label plus wrapped key."""

    surrogate_info_type: InfoTypeSpec
    crypto_key: WrappedEncryptionKey

    def to_crypto_config(self) -> dict[str, Any]:
        return {
            "surrogate_info_type": self.surrogate_info_type.to_request(),
            "crypto_key": self.crypto_key.to_request(),
        }

    def to_transformation_config(self) -> dict[str, Any]:
        """Return an ``info_type_transformations`` block applied to every finding."""

        return {
            "info_type_transformations": {
                "transformations": [
                    {
                        "primitive_transformation": {
                            "crypto_deterministic_config": self.to_crypto_config()
                        }
                    }
                ]
            }
        }


__all__ = [
    "ContentItem",
    "DeterministicTransformSpec",
    "DlpModel",
    "DlpParent",
    "InfoTypeSpec",
    "WrappedEncryptionKey",
]
