from __future__ import annotations

from services.healthcare.models import (
    AccessBinding,
    AccessPolicy,
    default_policy,
    fhir_store_name,
)
from shared.config.settings import HealthcareSettings


def test_fhir_store_name_formats_hierarchy() -> None:
    assert (
        fhir_store_name("proj", "us-central1", "dataset", "store")
        == "projects/proj/locations/us-central1/datasets/dataset/fhirStores/store"
    )


def test_default_policy_has_single_configured_binding() -> None:
    policy = default_policy(HealthcareSettings())

    assert policy.to_api() == {
        "bindings": [
            {
                "role": "roles/healthcare.fhirResourceReader",
                "members": ["domain:google.com"],
            }
        ]
    }


def test_default_policy_copies_member_list() -> None:
    settings = HealthcareSettings(policy_members=["group:readers@example.com"])

    policy = default_policy(settings)
    policy.bindings[0].members.append("user:extra@example.com")

    assert settings.policy_members == ["group:readers@example.com"]


def test_policy_round_trips_service_response_with_extra_fields() -> None:
    response = {
        "version": 1,
        "etag": "BwYx2Z4=",
        "bindings": [{"role": "roles/healthcare.fhirResourceReader", "members": ["domain:google.com"]}],
        "auditConfigs": [{"service": "healthcare.googleapis.com"}],
    }

    policy = AccessPolicy.model_validate(response)

    assert policy.etag == "BwYx2Z4="
    assert policy.version == 1
    assert policy.bindings == [
        AccessBinding(role="roles/healthcare.fhirResourceReader", members=["domain:google.com"])
    ]
    assert policy.to_api() == response
