"""Cloud Healthcare FHIR store IAM snippets."""

from .client import CLOUD_PLATFORM_SCOPE, create_healthcare_client
from .fhir_iam import (
    build_set_iam_policy_body,
    get_fhir_store_iam_policy,
    set_fhir_store_iam_policy,
)
from .models import (
    FHIR_STORE_NAME_TEMPLATE,
    AccessBinding,
    AccessPolicy,
    default_policy,
    fhir_store_name,
)

__all__ = [
    "CLOUD_PLATFORM_SCOPE",
    "FHIR_STORE_NAME_TEMPLATE",
    "AccessBinding",
    "AccessPolicy",
    "build_set_iam_policy_body",
    "create_healthcare_client",
    "default_policy",
    "fhir_store_name",
    "get_fhir_store_iam_policy",
    "set_fhir_store_iam_policy",
]
