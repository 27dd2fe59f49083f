"""Pydantic models representing Cloud Healthcare IAM policy payloads."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.config.settings import HealthcareSettings

FHIR_STORE_NAME_TEMPLATE = (
    "projects/{project_id}/locations/{location}/datasets/{dataset_id}/fhirStores/{fhir_store_id}"
)


def _to_camel(value: str) -> str:
    """Return ``value`` converted from snake_case to camelCase."""

    components = value.split("_")
    if not components:
        return value
    first, *rest = components
    return first + "".join(token.capitalize() for token in rest)


class HealthcareModel(BaseModel):
    """Base model for Healthcare API JSON payloads using camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_api(self) -> dict[str, Any]:
        """Return the JSON body shape expected by the REST API."""

        return self.model_dump(by_alias=True, exclude_none=True)


class AccessBinding(HealthcareModel):
    """One row of an IAM policy: a role granted to a set of principals."""

    role: str = Field(description="Role name, e.g. roles/healthcare.fhirResourceReader")
    members: list[str] = Field(default_factory=list, description="Principal identifiers")
    condition: Optional[dict[str, Any]] = Field(default=None)


class AccessPolicy(HealthcareModel):
    """Full IAM policy document for a resource."""

    bindings: list[AccessBinding] = Field(default_factory=list)
    etag: Optional[str] = Field(default=None, description="Concurrency token computed by the service")
    version: Optional[int] = Field(default=None)


def fhir_store_name(
    project_id: str, location: str, dataset_id: str, fhir_store_id: str
) -> str:
    """Return the fully-qualified FHIR store resource name."""

    return FHIR_STORE_NAME_TEMPLATE.format(
        project_id=project_id,
        location=location,
        dataset_id=dataset_id,
        fhir_store_id=fhir_store_id,
    )


def default_policy(settings: HealthcareSettings) -> AccessPolicy:
    """Return the single-binding policy applied by the set-policy snippet.

    See https://cloud.google.com/iam/docs/understanding-roles for role names.
    """

    return AccessPolicy(
        bindings=[
            AccessBinding(role=settings.policy_role, members=list(settings.policy_members))
        ]
    )


__all__ = [
    "AccessBinding",
    "AccessPolicy",
    "FHIR_STORE_NAME_TEMPLATE",
    "HealthcareModel",
    "default_policy",
    "fhir_store_name",
]
