"""Discovery based Cloud Healthcare API client construction."""

from __future__ import annotations

from typing import Any

import google.auth
import google_auth_httplib2
import httplib2
from googleapiclient import discovery
from googleapiclient.http import set_user_agent

from shared.config.settings import Settings, resolve_settings
from shared.observability.logger import get_logger

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
SERVICE_NAME = "healthcare"

logger = get_logger(__name__)


def create_healthcare_client(settings: Settings | None = None) -> Any:
    """Return a Healthcare API resource authenticated with Application Default Credentials.

    Credentials are resolved from the environment (``GOOGLE_APPLICATION_CREDENTIALS``,
    gcloud user credentials or the metadata server) and scoped to
    ``cloud-platform``. Every request uses the configured connect/read timeout.
    """

    resolved = resolve_settings(settings)
    healthcare = resolved.healthcare

    credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
    http = google_auth_httplib2.AuthorizedHttp(
        credentials, http=httplib2.Http(timeout=healthcare.timeout_seconds)
    )
    http = set_user_agent(http, resolved.google_cloud.application_name)

    kwargs: dict[str, Any] = {"http": http, "cache_discovery": False}
    if healthcare.discovery_url:
        kwargs["discoveryServiceUrl"] = healthcare.discovery_url

    logger.debug(
        "healthcare.client.build",
        api_version=healthcare.api_version,
        timeout_seconds=healthcare.timeout_seconds,
    )
    return discovery.build(SERVICE_NAME, healthcare.api_version, **kwargs)


__all__ = ["CLOUD_PLATFORM_SCOPE", "SERVICE_NAME", "create_healthcare_client"]
