# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple
from opensearchpy import OpenSearch
from . import documents as docs
from .base import DelegateKind, Document
from ..errors import surface_auth_errors
from ..transport import TransportHandle


@dataclass(frozen=True)
class RemoteClusterDelegate:
    """
    Metadata in a remote OpenSearch cluster. `kind` is REMOTE_CLUSTER on the
    basic-auth transport and CLOUD_SEARCH on the SigV4 signing transport.
    """
    transport: TransportHandle
    tenant_id_field: str | None = None
    kind: DelegateKind = DelegateKind.REMOTE_CLUSTER

    @property
    def client(self) -> OpenSearch:
        return self.transport.client

    def put_document(self, index: str, doc_id: str, document: Document, tenant_id: str | None = None):
        with surface_auth_errors():
            return docs.put_document(self.client, index, doc_id, document, self.tenant_id_field, tenant_id)

    def get_document(self, index: str, doc_id: str, tenant_id: str | None = None):
        with surface_auth_errors():
            return docs.get_document(self.client, index, doc_id, self.tenant_id_field, tenant_id)

    def search_documents(self, index: str, query: Document, tenant_id: str | None = None):
        with surface_auth_errors():
            return docs.search_documents(self.client, index, query, self.tenant_id_field, tenant_id)

    def bulk_index(self, index: str, documents: Iterable[Tuple[str, Document]], tenant_id: str | None = None):
        with surface_auth_errors():
            return docs.bulk_index(self.client, index, documents, self.tenant_id_field, tenant_id)

    def close(self) -> None:
        self.transport.close()
