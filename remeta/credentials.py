# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List
from botocore.credentials import (
    ContainerProvider,
    CredentialProvider,
    CredentialResolver,
    DeferredRefreshableCredentials,
    EnvProvider,
    InstanceMetadataFetcher,
    InstanceMetadataProvider,
)
from .errors import AuthError
from .log import get_logger

log = get_logger("credentials")

# sources without an expiry (env vars) are looked up again after this long
REFRESH_INTERVAL = timedelta(hours=1)


def default_providers() -> List[CredentialProvider]:
    """Environment, then container-injected, then instance-profile credentials."""
    return [
        EnvProvider(),
        ContainerProvider(),
        InstanceMetadataProvider(
            iam_role_fetcher=InstanceMetadataFetcher(timeout=1, num_attempts=1)
        ),
    ]


class CredentialChain:
    """
    Ordered, lazily evaluated credential chain.

    Nothing is looked up at construction. The first caller that needs
    credentials (a signed request, or get_frozen_credentials()) walks the
    providers in order and keeps the first hit until it expires. If no
    provider yields credentials, that caller gets an AuthError.
    """
    METHOD = "remeta-chain"

    def __init__(self, providers: Iterable[CredentialProvider] | None = None):
        self._providers = list(providers) if providers is not None else default_providers()
        self._resolver = CredentialResolver(self._providers)
        self._credentials = DeferredRefreshableCredentials(
            refresh_using=self._fetch, method=self.METHOD,
        )

    @property
    def providers(self) -> List[CredentialProvider]:
        return list(self._providers)

    @property
    def credentials(self) -> DeferredRefreshableCredentials:
        """botocore credentials object; resolves on first attribute access."""
        return self._credentials

    def get_frozen_credentials(self):
        return self._credentials.get_frozen_credentials()

    def provider(self) -> CredentialProvider:
        """Adapter so a botocore session can draw credentials from this chain."""
        return _ChainProvider(self)

    def _fetch(self) -> Dict[str, Any]:
        creds = self._resolver.load_credentials()
        if creds is None:
            methods = ", ".join(getattr(p, "METHOD", type(p).__name__) for p in self._providers)
            raise AuthError(f"unable to resolve credentials from any source ({methods})")
        frozen = creds.get_frozen_credentials()
        expiry = getattr(creds, "_expiry_time", None)
        if expiry is None:
            expiry = datetime.now(timezone.utc) + REFRESH_INTERVAL
        log.debug("resolved credentials via %s", getattr(creds, "method", "unknown"))
        return {
            "access_key": frozen.access_key,
            "secret_key": frozen.secret_key,
            "token": frozen.token,
            "expiry_time": expiry.isoformat(),
        }


class _ChainProvider(CredentialProvider):
    METHOD = CredentialChain.METHOD
    CANONICAL_NAME = "RemetaChain"

    def __init__(self, chain: CredentialChain):
        super().__init__()
        self._chain = chain

    def load(self):
        return self._chain.credentials
