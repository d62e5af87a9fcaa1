# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import dataclasses
import logging
import pytest
from remeta.clients import (
    DelegateKind, KeyValueDelegate, LocalDelegate, RemoteClusterDelegate, UnifiedClient,
    create_client, create_client_from_cfg, wrap_delegate,
)
from remeta.errors import AuthError, ConfigError
import remeta.clients.factory as factory
import remeta.transport as transport
from utils import FakeOpenSearch, FakeStore

CLOUD = {
    "metadata-type": "cloud",
    "endpoint": "https://search.example.com",
    "region": "us-east-1",
    "service-name": "es",
}


# ---------------- local fallback ----------------

def test_empty_settings_give_local_client():
    store, registry = FakeStore(), object()
    client = create_client({}, store, registry)
    assert isinstance(client, UnifiedClient)
    assert isinstance(client.delegate, LocalDelegate)
    assert client.kind is DelegateKind.LOCAL
    assert client.delegate.store is store
    assert client.delegate.schema_registry is registry
    assert client.multi_tenancy is False


@pytest.mark.parametrize("mtype", [None, "", "   ", "local", "cassandra", "remote_mongo"])
def test_absent_or_unknown_type_falls_back_to_local(mtype):
    settings = {"endpoint": "", "region": "", "service-name": "nope",
                "tenant-id-field": "tid", "multi-tenancy": "True"}
    if mtype is not None:
        settings["metadata-type"] = mtype
    client = create_client(settings, FakeStore())
    assert client.kind is DelegateKind.LOCAL
    assert client.multi_tenancy is True
    assert client.tenant_id_field == "tid"


@pytest.mark.parametrize("value,expected", [
    ("true", True), ("True", True), ("TRUE", True),
    ("", False), ("false", False), (None, False), ("yes", False),
    (" true", False), ("true ", False),
])
def test_multi_tenancy_parsing(value, expected):
    settings = {} if value is None else {"multi-tenancy": value}
    assert create_client(settings).multi_tenancy is expected


def test_unknown_type_logs_warning():
    class Recorder(logging.Logger):
        def __init__(self):
            super().__init__("recorder")
            self.records = []

        def handle(self, record):
            self.records.append(record)

    log = Recorder()
    create_client({"metadata-type": "cassandra"}, log=log)
    levels = [r.levelno for r in log.records]
    assert logging.WARNING in levels
    assert any("local" in r.getMessage() for r in log.records)


# ---------------- remote generic ----------------

@pytest.mark.parametrize("endpoint", [None, "", "   "])
def test_remote_requires_endpoint(endpoint):
    settings = {"metadata-type": "remote"}
    if endpoint is not None:
        settings["endpoint"] = endpoint
    with pytest.raises(ConfigError, match="requires a metadata endpoint"):
        create_client(settings)


def test_remote_generic_client():
    client = create_client(
        {"metadata-type": "RemoteOpenSearch", "endpoint": "http://localhost:9200",
         "tenant-id-field": "tenant_id"},
        env={},
    )
    delegate = client.delegate
    assert isinstance(delegate, RemoteClusterDelegate)
    assert delegate.kind is DelegateKind.REMOTE_CLUSTER
    assert delegate.tenant_id_field == "tenant_id"
    assert not delegate.transport.tls
    client.close()
    assert delegate.transport.closed


def test_remote_https_verifies_unless_insecure():
    secure = create_client({"metadata-type": "remote", "endpoint": "https://127.0.0.1:9200"}, env={})
    insecure = create_client({"metadata-type": "remote", "endpoint": "https://127.0.0.1:9200",
                              "insecure": "true"}, env={})
    assert secure.delegate.transport.ssl_context.check_hostname is True
    assert insecure.delegate.transport.ssl_context.check_hostname is False
    secure.close()
    insecure.close()


# ---------------- AWS-backed kinds ----------------

@pytest.mark.parametrize("mtype", ["cloud", "keyvalue", "AWSOpenSearchService", "AWSDynamoDB"])
@pytest.mark.parametrize("override", [
    {"endpoint": ""}, {"endpoint": " "}, {"region": ""}, {"region": None},
    {"service-name": "s3"}, {"service-name": None}, {"service-name": ""},
])
def test_aws_kinds_validate(mtype, override, empty_chain):
    settings = {**CLOUD, "metadata-type": mtype}
    for k, v in override.items():
        if v is None:
            settings.pop(k)
        else:
            settings[k] = v
    with pytest.raises(ConfigError):
        create_client(settings, credential_chain=empty_chain)


@pytest.mark.parametrize("service", ["es", "aoss"])
def test_cloud_client_uses_signing_transport(service, static_chain):
    client = create_client({**CLOUD, "service-name": service}, credential_chain=static_chain)
    delegate = client.delegate
    assert isinstance(delegate, RemoteClusterDelegate)
    assert delegate.kind is DelegateKind.CLOUD_SEARCH
    assert delegate.transport.signed
    assert client.multi_tenancy is False
    client.close()


def test_factory_never_resolves_credentials(empty_providers, empty_chain):
    client = create_client({**CLOUD, "metadata-type": "keyvalue"}, credential_chain=empty_chain)
    assert [p.loads for p in empty_providers] == [0, 0, 0]
    client.close()


def test_first_signed_request_without_credentials_fails_with_auth_error(empty_chain):
    client = create_client(CLOUD, credential_chain=empty_chain)
    with pytest.raises(AuthError):
        client.get_document("workflows", "1")
    client.close()


def test_keyvalue_client_composition(static_chain):
    client = create_client(
        {**CLOUD, "metadata-type": "keyvalue", "endpoint": "https://x",
         "multi-tenancy": "true", "tenant-id-field": "tenant"},
        credential_chain=static_chain,
    )
    delegate = client.delegate
    assert isinstance(delegate, KeyValueDelegate)
    assert client.kind is DelegateKind.KEY_VALUE
    assert client.multi_tenancy is True
    assert delegate.dynamodb.meta.region_name == "us-east-1"
    assert isinstance(delegate.search, RemoteClusterDelegate)
    assert delegate.search.kind is DelegateKind.CLOUD_SEARCH
    assert delegate.search.tenant_id_field == delegate.tenant_id_field == "tenant"
    client.close()
    assert delegate.search.transport.closed


def test_first_keyvalue_request_without_credentials_fails_with_auth_error(empty_chain):
    client = create_client({**CLOUD, "metadata-type": "keyvalue"}, credential_chain=empty_chain)
    with pytest.raises(AuthError):
        client.get_document("workflows", "1")
    client.close()


@pytest.mark.parametrize("mtype", ["cloud", "keyvalue"])
@pytest.mark.parametrize("endpoint", ["https://x:abc", "https://x:99999", "https://"])
def test_aws_kinds_reject_malformed_endpoint(mtype, endpoint, empty_chain):
    with pytest.raises(ConfigError):
        create_client({**CLOUD, "metadata-type": mtype, "endpoint": endpoint}, credential_chain=empty_chain)


def test_keyvalue_bad_endpoint_builds_no_dynamodb_client(monkeypatch, empty_chain):
    built = []
    monkeypatch.setattr(factory, "build_keyvalue_client", lambda *a: built.append(a))
    with pytest.raises(ConfigError):
        create_client({**CLOUD, "metadata-type": "keyvalue", "endpoint": "https://"}, credential_chain=empty_chain)
    assert built == []


def test_keyvalue_search_transport_closed_when_dynamodb_build_fails(monkeypatch, static_chain):
    def fail(*a):
        raise RuntimeError("no endpoint for region")
    monkeypatch.setattr(factory, "build_keyvalue_client", fail)
    monkeypatch.setattr(transport, "OpenSearch", FakeOpenSearch)
    with pytest.raises(RuntimeError):
        create_client({**CLOUD, "metadata-type": "keyvalue"}, credential_chain=static_chain)
    assert [c.closed for c in FakeOpenSearch.instances] == [1]


# ---------------- independence ----------------

def test_repeated_calls_build_independent_clients(static_chain):
    settings = {**CLOUD, "metadata-type": "keyvalue", "tenant-id-field": "t"}
    a = create_client(dict(settings), credential_chain=static_chain)
    b = create_client(dict(settings), credential_chain=static_chain)
    assert a is not b
    assert a.delegate is not b.delegate
    assert a.delegate.dynamodb is not b.delegate.dynamodb
    assert a.delegate.search.transport is not b.delegate.search.transport
    assert a.delegate.search.transport.endpoint == b.delegate.search.transport.endpoint
    assert a.multi_tenancy == b.multi_tenancy
    a.close()
    assert not b.delegate.search.transport.closed
    b.close()


def test_unified_client_is_immutable():
    client = create_client({})
    with pytest.raises(dataclasses.FrozenInstanceError):
        client.multi_tenancy = True


def test_wrap_delegate():
    delegate = LocalDelegate(FakeStore())
    client = wrap_delegate(delegate, True)
    assert client.delegate is delegate
    assert client.multi_tenancy is True


def test_create_client_from_cfg(cfg):
    cfg.set("metadata.type", "remote")
    cfg.set("metadata.endpoint", "http://localhost:9200")
    cfg.set("metadata.multi_tenancy", True)
    client = create_client_from_cfg(cfg, env={})
    assert client.kind is DelegateKind.REMOTE_CLUSTER
    assert client.multi_tenancy is True
    client.close()
