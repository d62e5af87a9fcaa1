# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from .errors import ConfigError

# signing service names: "es" for OpenSearch Service, "aoss" for Serverless
VALID_AWS_SERVICE_NAMES = ("es", "aoss")


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def require_endpoint(kind: str, endpoint: str | None) -> None:
    if is_blank(endpoint):
        raise ConfigError(f"{kind} client requires a metadata endpoint.")


def validate_aws_params(kind: str, endpoint: str | None, region: str | None,
                        service_name: str | None) -> None:
    if is_blank(endpoint) or is_blank(region):
        raise ConfigError(f"{kind} client requires a metadata endpoint and region.")
    if service_name not in VALID_AWS_SERVICE_NAMES:
        raise ConfigError(
            f"{kind} client only supports service names {list(VALID_AWS_SERVICE_NAMES)}"
        )
