# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

# Document operations against an OpenSearch-style client
# (index/get/search/bulk). Shared by the local and remote cluster delegates.

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Tuple
from opensearchpy.exceptions import NotFoundError
from .base import Document


def with_tenant(document: Document, tenant_field: str | None, tenant_id: str | None) -> Document:
    if not tenant_field or tenant_id is None:
        return dict(document)
    return {**document, tenant_field: tenant_id}


def tenant_query(query: Document, tenant_field: str | None, tenant_id: str | None) -> Document:
    """Add a term filter on the tenant field to a search body."""
    body = dict(query or {})
    if not tenant_field or tenant_id is None:
        return body
    inner = body.pop("query", {"match_all": {}})
    body["query"] = {
        "bool": {
            "must": [inner],
            "filter": [{"term": {tenant_field: tenant_id}}],
        }
    }
    return body


def put_document(client, index: str, doc_id: str, document: Document,
                 tenant_field: str | None, tenant_id: str | None) -> Any:
    return client.index(index=index, id=doc_id, body=with_tenant(document, tenant_field, tenant_id))


def get_document(client, index: str, doc_id: str,
                 tenant_field: str | None, tenant_id: str | None) -> Document | None:
    try:
        resp = client.get(index=index, id=doc_id)
    except NotFoundError:
        return None
    if not resp.get("found", True):
        return None
    source = resp.get("_source") or {}
    # a document owned by another tenant is reported as missing
    if tenant_field and tenant_id is not None and source.get(tenant_field) != tenant_id:
        return None
    return source


def search_documents(client, index: str, query: Document,
                     tenant_field: str | None, tenant_id: str | None) -> Any:
    return client.search(index=index, body=tenant_query(query, tenant_field, tenant_id))


def bulk_index(client, index: str, documents: Iterable[Tuple[str, Document]],
               tenant_field: str | None, tenant_id: str | None) -> Any:
    lines: List[Dict[str, Any]] = []
    for doc_id, document in documents:
        lines.append({"index": {"_index": index, "_id": doc_id}})
        lines.append(with_tenant(document, tenant_field, tenant_id))
    if not lines:
        return {"errors": False, "items": []}
    return client.bulk(body=lines)
