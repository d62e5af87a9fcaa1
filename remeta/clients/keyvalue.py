# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, Tuple
from .base import DelegateKind, Document
from .remote import RemoteClusterDelegate
from ..errors import surface_auth_errors

DEFAULT_TENANT = "DEFAULT_TENANT"
DEFAULT_HASH_KEY = "tenant_id"
RANGE_KEY = "id"
SOURCE_ATTR = "source"


@dataclass(frozen=True)
class KeyValueDelegate:
    """
    Metadata items in DynamoDB, one table per index. Items are keyed by
    (tenant, id) and keep the document as a JSON string. Searches go to
    the `search` cluster, which shares this delegate's tenant-id field.
    """
    kind: ClassVar[DelegateKind] = DelegateKind.KEY_VALUE

    dynamodb: Any
    search: RemoteClusterDelegate
    tenant_id_field: str | None = None

    @property
    def hash_key(self) -> str:
        return self.tenant_id_field or DEFAULT_HASH_KEY

    def _key(self, doc_id: str, tenant_id: str | None) -> Dict[str, Dict[str, str]]:
        return {
            self.hash_key: {"S": tenant_id or DEFAULT_TENANT},
            RANGE_KEY: {"S": doc_id},
        }

    def put_document(self, index: str, doc_id: str, document: Document, tenant_id: str | None = None):
        item = self._key(doc_id, tenant_id)
        item[SOURCE_ATTR] = {"S": json.dumps(document, sort_keys=True)}
        with surface_auth_errors():
            return self.dynamodb.put_item(TableName=index, Item=item)

    def get_document(self, index: str, doc_id: str, tenant_id: str | None = None):
        with surface_auth_errors():
            resp = self.dynamodb.get_item(TableName=index, Key=self._key(doc_id, tenant_id))
        item = resp.get("Item")
        if not item:
            return None
        return json.loads(item[SOURCE_ATTR]["S"])

    def search_documents(self, index: str, query: Document, tenant_id: str | None = None):
        return self.search.search_documents(index, query, tenant_id)

    def bulk_index(self, index: str, documents: Iterable[Tuple[str, Document]], tenant_id: str | None = None):
        items = [self.put_document(index, doc_id, doc, tenant_id) for doc_id, doc in documents]
        return {"errors": False, "items": items}

    def close(self) -> None:
        try:
            self.dynamodb.close()
        finally:
            self.search.close()
