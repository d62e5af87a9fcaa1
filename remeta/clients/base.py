# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Protocol, Tuple

# settings keys
METADATA_TYPE_KEY = "metadata-type"
ENDPOINT_KEY = "endpoint"
REGION_KEY = "region"
SERVICE_NAME_KEY = "service-name"
TENANT_ID_FIELD_KEY = "tenant-id-field"
MULTI_TENANCY_KEY = "multi-tenancy"
INSECURE_KEY = "insecure"
CA_CERTS_KEY = "ca-certs"

Document = Dict[str, Any]


def parse_bool(value: str | None) -> bool:
    return str(value).lower() == "true" if value is not None else False


class BackendKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    CLOUD = "cloud"
    KEYVALUE = "keyvalue"

    @classmethod
    def parse(cls, value: str | None) -> "BackendKind":
        """Absent, blank and unknown values all mean LOCAL."""
        key = re.sub(r"[\s_-]+", "", value or "").lower()
        return _KIND_ALIASES.get(key, cls.LOCAL)


_KIND_ALIASES = {
    "local": BackendKind.LOCAL,
    "remote": BackendKind.REMOTE,
    "remoteopensearch": BackendKind.REMOTE,
    "cloud": BackendKind.CLOUD,
    "awsopensearchservice": BackendKind.CLOUD,
    "keyvalue": BackendKind.KEYVALUE,
    "awsdynamodb": BackendKind.KEYVALUE,
}


@dataclass(frozen=True)
class BackendConfig:
    kind: BackendKind
    endpoint: str | None = None
    region: str | None = None
    service_name: str | None = None
    tenant_id_field: str | None = None
    multi_tenancy: bool = False
    insecure: bool = False
    ca_certs: str | None = None

    @classmethod
    def from_settings(cls, settings: Mapping[str, str]) -> "BackendConfig":
        return cls(
            kind=BackendKind.parse(settings.get(METADATA_TYPE_KEY)),
            endpoint=settings.get(ENDPOINT_KEY),
            region=settings.get(REGION_KEY),
            service_name=settings.get(SERVICE_NAME_KEY),
            tenant_id_field=settings.get(TENANT_ID_FIELD_KEY),
            multi_tenancy=parse_bool(settings.get(MULTI_TENANCY_KEY)),
            insecure=parse_bool(settings.get(INSECURE_KEY)),
            ca_certs=settings.get(CA_CERTS_KEY) or None,
        )


class DelegateKind(str, Enum):
    LOCAL = "local"
    REMOTE_CLUSTER = "remote_cluster"
    CLOUD_SEARCH = "cloud_search"
    KEY_VALUE = "key_value"


class MetadataDelegate(Protocol):
    """Operations every backend-specific client offers."""
    kind: DelegateKind
    tenant_id_field: str | None

    def put_document(self, index: str, doc_id: str, document: Document,
                     tenant_id: str | None = None) -> Any: ...

    def get_document(self, index: str, doc_id: str,
                     tenant_id: str | None = None) -> Document | None: ...

    def search_documents(self, index: str, query: Document,
                         tenant_id: str | None = None) -> Any: ...

    def bulk_index(self, index: str, documents: Iterable[Tuple[str, Document]],
                   tenant_id: str | None = None) -> Any: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class UnifiedClient:
    """
    The handle callers get back from create_client(). Wraps exactly one
    delegate; tenant ids are passed through only when multi-tenancy is on.
    """
    delegate: MetadataDelegate
    multi_tenancy: bool = False

    @property
    def kind(self) -> DelegateKind:
        return self.delegate.kind

    @property
    def tenant_id_field(self) -> str | None:
        return self.delegate.tenant_id_field

    def _tenant(self, tenant_id: str | None) -> str | None:
        return tenant_id if self.multi_tenancy else None

    def put_document(self, index: str, doc_id: str, document: Document, tenant_id: str | None = None):
        return self.delegate.put_document(index, doc_id, document, self._tenant(tenant_id))

    def get_document(self, index: str, doc_id: str, tenant_id: str | None = None):
        return self.delegate.get_document(index, doc_id, self._tenant(tenant_id))

    def search_documents(self, index: str, query: Document, tenant_id: str | None = None):
        return self.delegate.search_documents(index, query, self._tenant(tenant_id))

    def bulk_index(self, index: str, documents: Iterable[Tuple[str, Document]], tenant_id: str | None = None):
        return self.delegate.bulk_index(index, documents, self._tenant(tenant_id))

    def close(self) -> None:
        self.delegate.close()

    def __enter__(self) -> "UnifiedClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
