# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Tuple
from . import documents as docs
from .base import DelegateKind, Document


@dataclass(frozen=True)
class LocalDelegate:
    """
    Metadata kept in the caller's own cluster. `store` is the caller's
    OpenSearch-style client and `schema_registry` whatever document schema
    registry goes with it; both are owned by the caller.
    """
    kind: ClassVar[DelegateKind] = DelegateKind.LOCAL

    store: Any
    schema_registry: Any = None
    tenant_id_field: str | None = None

    def put_document(self, index: str, doc_id: str, document: Document, tenant_id: str | None = None):
        return docs.put_document(self.store, index, doc_id, document, self.tenant_id_field, tenant_id)

    def get_document(self, index: str, doc_id: str, tenant_id: str | None = None):
        return docs.get_document(self.store, index, doc_id, self.tenant_id_field, tenant_id)

    def search_documents(self, index: str, query: Document, tenant_id: str | None = None):
        return docs.search_documents(self.store, index, query, self.tenant_id_field, tenant_id)

    def bulk_index(self, index: str, documents: Iterable[Tuple[str, Document]], tenant_id: str | None = None):
        return docs.bulk_index(self.store, index, documents, self.tenant_id_field, tenant_id)

    def close(self) -> None:
        # the default store outlives this client
        pass
