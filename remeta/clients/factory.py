# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import logging
from typing import Any, Callable, Mapping
from .base import BackendConfig, BackendKind, DelegateKind, MetadataDelegate, UnifiedClient, \
    METADATA_TYPE_KEY
from .keyvalue import KeyValueDelegate
from .local import LocalDelegate
from .remote import RemoteClusterDelegate
from ..config import CFG, Config, metadata_settings
from ..credentials import CredentialChain
from ..log import LOG
from ..transport import build_generic_transport, build_keyvalue_client, build_signing_transport
from ..validation import require_endpoint, validate_aws_params


def wrap_delegate(delegate: MetadataDelegate, multi_tenancy: bool) -> UnifiedClient:
    return UnifiedClient(delegate=delegate, multi_tenancy=bool(multi_tenancy))


def _cloud_search(conf: BackendConfig, chain: CredentialChain) -> RemoteClusterDelegate:
    transport = build_signing_transport(conf.endpoint, conf.region, conf.service_name, chain)
    return RemoteClusterDelegate(transport, conf.tenant_id_field, DelegateKind.CLOUD_SEARCH)


def create_client(
        settings: Mapping[str, str],
        default_store: Any = None,
        schema_registry: Any = None,
        *,
        log: logging.Logger = LOG,
        credential_chain: Callable[[], CredentialChain] = CredentialChain,
        env: Mapping[str, str] | None = None) -> UnifiedClient:
    """
    Build the metadata client selected by `settings["metadata-type"]`.

    Absent or unknown types use the caller's `default_store`. Remote types
    are validated first and raise ConfigError on missing or invalid
    settings. Credentials for the AWS types are only looked up when the
    returned client makes its first request.
    """
    conf = BackendConfig.from_settings(settings)
    raw_type = settings.get(METADATA_TYPE_KEY)

    match conf.kind:
        case BackendKind.REMOTE:
            require_endpoint("Remote OpenSearch", conf.endpoint)
            log.info("Using remote opensearch cluster as metadata store")
            transport = build_generic_transport(
                conf.endpoint, insecure=conf.insecure, ca_certs=conf.ca_certs, env=env, log=log,
            )
            delegate = RemoteClusterDelegate(transport, conf.tenant_id_field)
        case BackendKind.CLOUD:
            validate_aws_params(raw_type, conf.endpoint, conf.region, conf.service_name)
            log.info("Using remote AWS OpenSearch Service cluster as metadata store")
            delegate = _cloud_search(conf, credential_chain())
        case BackendKind.KEYVALUE:
            validate_aws_params(raw_type, conf.endpoint, conf.region, conf.service_name)
            log.info("Using DynamoDB as metadata store")
            chain = credential_chain()
            search = _cloud_search(conf, chain)
            try:
                dynamodb = build_keyvalue_client(conf.region, chain)
            except Exception:
                search.close()
                raise
            delegate = KeyValueDelegate(dynamodb, search, conf.tenant_id_field)
        case _:
            if raw_type and raw_type.strip() and raw_type.strip().lower() != BackendKind.LOCAL.value:
                log.warning("Unknown metadata type %r, falling back to local cluster", raw_type)
            log.info("Using local opensearch cluster as metadata store")
            delegate = LocalDelegate(default_store, schema_registry, conf.tenant_id_field)

    return wrap_delegate(delegate, conf.multi_tenancy)


def create_client_from_cfg(
        cfg: Config = CFG,
        default_store: Any = None,
        schema_registry: Any = None,
        **kwargs) -> UnifiedClient:
    return create_client(metadata_settings(cfg), default_store, schema_registry, **kwargs)
