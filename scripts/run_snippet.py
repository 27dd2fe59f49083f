"""Command line entry point for the DLP and Healthcare snippets."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Iterable

from services.dlp.deidentify import (
    deidentify_with_deterministic_encryption,
    reidentify_with_deterministic_encryption,
)
from services.healthcare.fhir_iam import (
    get_fhir_store_iam_policy,
    set_fhir_store_iam_policy,
)
from services.healthcare.models import AccessPolicy, fhir_store_name
from shared.config.settings import get_settings
from shared.observability.logger import configure_logging


def _add_dlp_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text", help="Text to transform.")
    parser.add_argument(
        "--project-id",
        dest="project_id",
        default=None,
        help="Google Cloud project (default: GOOGLE_CLOUD_PROJECT_ID).",
    )
    parser.add_argument(
        "--wrapped-key",
        dest="wrapped_key",
        required=True,
        help="Base64 encoded AES-256 key wrapped by the Cloud KMS key.",
    )
    parser.add_argument(
        "--kms-key-name",
        dest="kms_key_name",
        required=True,
        help="projects/PROJECT/locations/REGION/keyRings/RING/cryptoKeys/KEY",
    )
    parser.add_argument(
        "--surrogate-type",
        dest="surrogate_type",
        default=None,
        help="Surrogate info type label (default: DLP_SURROGATE_INFO_TYPE or SSN_TOKEN).",
    )


def _add_fhir_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "fhir_store_name",
        nargs="?",
        default=None,
        help="Fully-qualified FHIR store name. Alternatively pass the component flags.",
    )
    parser.add_argument("--project-id", dest="project_id", default=None)
    parser.add_argument("--location", default=None)
    parser.add_argument("--dataset-id", dest="dataset_id", default=None)
    parser.add_argument("--fhir-store-id", dest="fhir_store_id", default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run Google Cloud DLP and Healthcare API snippets."
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging verbosity (default: SNIPPETS_LOG_LEVEL or info).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    deidentify = subparsers.add_parser(
        "deidentify", help="Encrypt sensitive findings with deterministic encryption."
    )
    _add_dlp_arguments(deidentify)
    deidentify.add_argument(
        "--info-type",
        dest="info_types",
        action="append",
        default=None,
        help="Info type to inspect for; repeatable (default: DLP_INFO_TYPE).",
    )

    reidentify = subparsers.add_parser(
        "reidentify", help="Restore text produced by the deidentify command."
    )
    _add_dlp_arguments(reidentify)

    set_policy = subparsers.add_parser(
        "set-fhir-iam-policy",
        help="Replace a FHIR store IAM policy with the configured single binding.",
    )
    _add_fhir_store_arguments(set_policy)
    set_policy.add_argument(
        "--role", default=None, help="Role to grant (default: HEALTHCARE_POLICY_ROLE)."
    )
    set_policy.add_argument(
        "--member",
        dest="members",
        action="append",
        default=None,
        help="Principal to grant the role to; repeatable (default: HEALTHCARE_POLICY_MEMBERS).",
    )

    get_policy = subparsers.add_parser(
        "get-fhir-iam-policy", help="Print the IAM policy of a FHIR store."
    )
    _add_fhir_store_arguments(get_policy)
    return parser


def _resolve_project(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    project_id = args.project_id or get_settings().google_cloud.project_id
    if not project_id:
        parser.error("--project-id is required when GOOGLE_CLOUD_PROJECT_ID is not set")
    return project_id


def _resolve_fhir_store(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    if args.fhir_store_name is not None:
        return args.fhir_store_name
    components = (args.location, args.dataset_id, args.fhir_store_id)
    if not all(components):
        parser.error(
            "provide a FHIR store name or --location, --dataset-id and --fhir-store-id"
        )
    return fhir_store_name(_resolve_project(args, parser), *components)


def _pretty(policy: AccessPolicy) -> str:
    return json.dumps(policy.to_api(), indent=2, sort_keys=True)


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    settings = get_settings()

    if args.command == "deidentify":
        result = deidentify_with_deterministic_encryption(
            _resolve_project(args, parser),
            args.text,
            args.wrapped_key,
            args.kms_key_name,
            info_types=args.info_types,
            surrogate_type=args.surrogate_type,
            settings=settings,
        )
        print(f"Text after format-preserving encryption: {result}")
        return 0

    if args.command == "reidentify":
        result = reidentify_with_deterministic_encryption(
            _resolve_project(args, parser),
            args.text,
            args.wrapped_key,
            args.kms_key_name,
            surrogate_type=args.surrogate_type,
            settings=settings,
        )
        print(f"Text after re-identification: {result}")
        return 0

    resource = _resolve_fhir_store(args, parser)
    if args.command == "set-fhir-iam-policy":
        policy = None
        if args.role or args.members:
            policy = AccessPolicy.model_validate(
                {
                    "bindings": [
                        {
                            "role": args.role or settings.healthcare.policy_role,
                            "members": args.members
                            or list(settings.healthcare.policy_members),
                        }
                    ]
                }
            )
        updated = set_fhir_store_iam_policy(resource, policy=policy, settings=settings)
        print(f"FHIR policy has been updated: {_pretty(updated)}")
        return 0

    current = get_fhir_store_iam_policy(resource, settings=settings)
    print(f"FHIR store IAM policy: {_pretty(current)}")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    parsed_args = parser.parse_args(None if argv is None else list(argv))
    logging_settings = get_settings().logging
    try:
        configure_logging(
            service_name=logging_settings.service_name,
            level=parsed_args.log_level or logging_settings.level,
        )
        return _run(parsed_args, parser)
    except KeyboardInterrupt:  # pragma: no cover - manual cancellation guard
        return 130
    except Exception as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
