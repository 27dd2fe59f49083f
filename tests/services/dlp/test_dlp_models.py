from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError

from services.dlp.models import (
    ContentItem,
    DeterministicTransformSpec,
    DlpParent,
    InfoTypeSpec,
    WrappedEncryptionKey,
)
from shared.errors import InvalidWrappedKeyError

KMS_KEY_NAME = "projects/p/locations/global/keyRings/ring/cryptoKeys/key"
RAW_KEY = bytes(range(32))


def test_wrapped_key_decodes_exact_bytes() -> None:
    encoded = base64.b64encode(RAW_KEY).decode("ascii")

    key = WrappedEncryptionKey.from_base64(encoded, KMS_KEY_NAME)

    assert key.wrapped_key == RAW_KEY
    assert key.crypto_key_name == KMS_KEY_NAME


@pytest.mark.parametrize("encoded", ["not base64!", "YWJj*", "YWJ", ""])
def test_wrapped_key_rejects_malformed_base64(encoded: str) -> None:
    with pytest.raises(InvalidWrappedKeyError) as exc_info:
        WrappedEncryptionKey.from_base64(encoded, KMS_KEY_NAME)

    assert exc_info.value.context["crypto_key_name"] == KMS_KEY_NAME
    assert isinstance(exc_info.value, ValueError)


def test_wrapped_key_repr_hides_key_material() -> None:
    key = WrappedEncryptionKey(wrapped_key=b"secret-bytes", crypto_key_name=KMS_KEY_NAME)

    assert "secret-bytes" not in repr(key)


def test_wrapped_key_requires_key_name() -> None:
    with pytest.raises(ValidationError):
        WrappedEncryptionKey(wrapped_key=RAW_KEY, crypto_key_name="")


@pytest.mark.parametrize(
    "factory",
    [
        lambda: ContentItem(value=""),
        lambda: InfoTypeSpec(name=""),
        lambda: DlpParent(project_id=""),
    ],
)
def test_required_strings_must_be_non_empty(factory) -> None:
    with pytest.raises(ValidationError):
        factory()


def test_parent_path_uses_location() -> None:
    assert DlpParent(project_id="proj").path == "projects/proj/locations/global"
    assert (
        DlpParent(project_id="proj", location="europe-west1").path
        == "projects/proj/locations/europe-west1"
    )


def test_transform_spec_builds_crypto_deterministic_config() -> None:
    spec = DeterministicTransformSpec(
        surrogate_info_type=InfoTypeSpec(name="SSN_TOKEN"),
        crypto_key=WrappedEncryptionKey(wrapped_key=RAW_KEY, crypto_key_name=KMS_KEY_NAME),
    )

    config = spec.to_transformation_config()

    transformations = config["info_type_transformations"]["transformations"]
    assert len(transformations) == 1
    crypto = transformations[0]["primitive_transformation"]["crypto_deterministic_config"]
    assert crypto == {
        "surrogate_info_type": {"name": "SSN_TOKEN"},
        "crypto_key": {
            "kms_wrapped": {"wrapped_key": RAW_KEY, "crypto_key_name": KMS_KEY_NAME}
        },
    }
