from __future__ import annotations

from typing import Any

import pytest

from services.healthcare import client as client_module
from services.healthcare.client import CLOUD_PLATFORM_SCOPE, create_healthcare_client
from shared.config.settings import GoogleCloudSettings, HealthcareSettings, Settings


class _StubCredentials:
    pass


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    calls: dict[str, Any] = {}

    def _fake_default(*, scopes=None):
        calls["scopes"] = scopes
        return _StubCredentials(), "adc-project"

    def _fake_build(service: str, version: str, **kwargs: Any) -> object:
        calls["service"] = service
        calls["version"] = version
        calls["kwargs"] = kwargs
        return object()

    monkeypatch.setattr(client_module.google.auth, "default", _fake_default)
    monkeypatch.setattr(client_module.discovery, "build", _fake_build)
    return calls


def test_client_uses_scoped_application_default_credentials(captured: dict[str, Any]) -> None:
    create_healthcare_client(Settings())

    assert captured["scopes"] == [CLOUD_PLATFORM_SCOPE]
    assert captured["service"] == "healthcare"
    assert captured["version"] == "v1"
    assert captured["kwargs"]["cache_discovery"] is False
    assert "discoveryServiceUrl" not in captured["kwargs"]


def test_client_applies_timeout_and_credentials(captured: dict[str, Any]) -> None:
    settings = Settings(
        healthcare=HealthcareSettings(timeout_seconds=15),
        google_cloud=GoogleCloudSettings(application_name="fhir-admin"),
    )

    create_healthcare_client(settings)

    http = captured["kwargs"]["http"]
    assert isinstance(http.credentials, _StubCredentials)
    assert http.http.timeout == 15


def test_client_honours_discovery_overrides(captured: dict[str, Any]) -> None:
    settings = Settings(
        healthcare=HealthcareSettings(
            api_version="v1beta1",
            discovery_url="https://healthcare.googleapis.com/$discovery/rest?version=v1beta1",
        )
    )

    create_healthcare_client(settings)

    assert captured["version"] == "v1beta1"
    assert captured["kwargs"]["discoveryServiceUrl"].endswith("version=v1beta1")
