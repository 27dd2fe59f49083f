from __future__ import annotations

import pytest

from shared.config.settings import (
    DlpSettings,
    HealthcareSettings,
    LoggingSettings,
    Settings,
    get_settings,
    resolve_settings,
)


def test_defaults_match_snippet_constants(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DLP_LOCATION", "DLP_INFO_TYPE", "DLP_SURROGATE_INFO_TYPE", "HEALTHCARE_POLICY_ROLE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.dlp.location == "global"
    assert settings.dlp.info_type == "US_SOCIAL_SECURITY_NUMBER"
    assert settings.dlp.surrogate_info_type == "SSN_TOKEN"
    assert settings.healthcare.api_version == "v1"
    assert settings.healthcare.timeout_seconds == 60.0
    assert settings.healthcare.policy_role == "roles/healthcare.fhirResourceReader"
    assert settings.retry.attempts == 1


def test_dlp_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DLP_LOCATION", "us-central1")
    monkeypatch.setenv("DLP_TIMEOUT_SECONDS", "12.5")

    settings = DlpSettings()

    assert settings.location == "us-central1"
    assert settings.timeout_seconds == 12.5


def test_healthcare_policy_members_parse_json_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEALTHCARE_POLICY_MEMBERS", '["domain:example.com", "user:ada@example.com"]')

    settings = HealthcareSettings()

    assert settings.policy_members == ["domain:example.com", "user:ada@example.com"]


def test_logging_settings_accept_generic_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SNIPPETS_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert LoggingSettings().level == "debug"


def test_resolve_settings_prefers_explicit_instance() -> None:
    explicit = Settings()

    assert resolve_settings(explicit) is explicit
    assert resolve_settings(None) is get_settings()
