# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import os, ssl, logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple
from urllib.parse import urlsplit
import boto3
import botocore.session
from botocore.credentials import CredentialResolver
from opensearchpy import AWSV4SignerAuth, OpenSearch, RequestsHttpConnection, Urllib3HttpConnection
from .credentials import CredentialChain
from .errors import ConfigError
from .log import get_logger
from .privileged import do_privileged

DEFAULT_POOL_MAXSIZE = 20

USER_ENV = "REMOTE_METADATA_USER"
PASSWORD_ENV = "REMOTE_METADATA_PASSWORD"
# only used in insecure mode, for throwaway test clusters
INSECURE_DEFAULT_USER = "admin"
INSECURE_DEFAULT_PASSWORD = "admin"

_DEFAULT_PORTS = {"http": 80, "https": 443}

_log = get_logger("transport")


@dataclass
class TransportHandle:
    """An OpenSearch client plus the TLS context and pool it was built with."""
    client: OpenSearch
    endpoint: str
    ssl_context: ssl.SSLContext | None = None
    pool_maxsize: int = DEFAULT_POOL_MAXSIZE
    signed: bool = False
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def tls(self) -> bool:
        return self.ssl_context is not None or self.signed

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.client.close()


def parse_endpoint(endpoint: str) -> Tuple[str, str, int]:
    """
    Split `scheme://host[:port]` into its parts.
    A bare `host[:port]` is taken as http; the port defaults per scheme.
    """
    raw = str(endpoint).strip()
    if "://" not in raw:
        raw = "http://" + raw
    parts = urlsplit(raw)
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ConfigError(f"unsupported endpoint scheme: {parts.scheme}")
    if not parts.hostname:
        raise ConfigError(f"endpoint has no host: {endpoint}")
    try:
        port = parts.port or _DEFAULT_PORTS[scheme]
    except ValueError as e:
        raise ConfigError(f"invalid endpoint port: {endpoint}") from e
    return scheme, parts.hostname, port


def basic_auth(env: Mapping[str, str], insecure: bool = False) -> Tuple[str, str] | None:
    user = env.get(USER_ENV)
    password = env.get(PASSWORD_ENV)
    if user and password is not None:
        return user, password
    if insecure:
        return user or INSECURE_DEFAULT_USER, password or INSECURE_DEFAULT_PASSWORD
    return None


def build_tls_context(insecure: bool = False, ca_certs: str | None = None) -> ssl.SSLContext:
    ctx = ssl.create_default_context(cafile=ca_certs)
    if insecure:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_generic_transport(
        endpoint: str,
        *,
        insecure: bool = False,
        ca_certs: str | None = None,
        pool_maxsize: int = DEFAULT_POOL_MAXSIZE,
        env: Mapping[str, str] | None = None,
        log: logging.Logger = _log) -> TransportHandle:
    """
    Client for a self-managed OpenSearch cluster.

    http endpoints get no TLS at all. https endpoints get a verifying TLS
    context (optionally trusting `ca_certs`) and a pooled urllib3 connection
    using it. `insecure` turns off chain and hostname verification and
    allows the default admin credentials; it is meant for local test
    clusters with self-signed certificates.
    """
    scheme, host, port = parse_endpoint(endpoint)
    http_auth = basic_auth(os.environ if env is None else env, insecure)
    if http_auth is None:
        log.info("no basic auth credentials for %s (%s/%s unset)", endpoint, USER_ENV, PASSWORD_ENV)

    def _build() -> TransportHandle:
        kwargs: dict[str, Any] = {
            "hosts": [{"host": host, "port": port, "scheme": scheme}],
            "http_auth": http_auth,
            "connection_class": Urllib3HttpConnection,
            "pool_maxsize": pool_maxsize,
        }
        ssl_context = None
        if scheme == "https":
            if insecure:
                log.warning("TLS certificate and hostname verification disabled for %s", endpoint)
            ssl_context = build_tls_context(insecure, ca_certs)
            kwargs["use_ssl"] = True
            kwargs["ssl_context"] = ssl_context
        return TransportHandle(
            client=OpenSearch(**kwargs),
            endpoint=endpoint,
            ssl_context=ssl_context,
            pool_maxsize=pool_maxsize,
        )

    return do_privileged(_build)


def build_signing_transport(
        endpoint: str,
        region: str,
        service_name: str,
        chain: CredentialChain,
        *,
        pool_maxsize: int = DEFAULT_POOL_MAXSIZE) -> TransportHandle:
    """
    SigV4-signed client for AWS OpenSearch Service / Serverless.
    TLS is left to the requests transport defaults.
    """
    parts = urlsplit(endpoint if "://" in endpoint else "https://" + endpoint)
    host = parts.hostname
    if not host:
        raise ConfigError(f"endpoint has no host: {endpoint}")
    try:
        port = parts.port or 443
    except ValueError as e:
        raise ConfigError(f"invalid endpoint port: {endpoint}") from e

    def _build() -> TransportHandle:
        auth = AWSV4SignerAuth(chain.credentials, region, service_name)
        client = OpenSearch(
            hosts=[{"host": host, "port": port}],
            http_auth=auth,
            use_ssl=True,
            verify_certs=True,
            connection_class=RequestsHttpConnection,
            pool_maxsize=pool_maxsize,
        )
        return TransportHandle(client=client, endpoint=endpoint,
                               pool_maxsize=pool_maxsize, signed=True)

    return do_privileged(_build)


def build_keyvalue_client(region: str, chain: CredentialChain):
    """
    Regional DynamoDB client. The service endpoint is resolved by botocore
    from the region; credentials come from `chain` on first request.
    """
    def _build():
        core = botocore.session.Session()
        core.register_component("credential_provider", CredentialResolver([chain.provider()]))
        session = boto3.session.Session(botocore_session=core, region_name=region)
        return session.client("dynamodb")

    return do_privileged(_build)
