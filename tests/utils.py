# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Any, Dict, List
from botocore.credentials import CredentialProvider, Credentials
from remeta.privileged import is_elevated


class FakeStore:
    """OpenSearch-style client kept in memory; records every call."""
    def __init__(self):
        self.docs: Dict[tuple, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.closed = False

    def index(self, index, id, body):
        self.calls.append(("index", index, id))
        self.docs[(index, id)] = dict(body)
        return {"_index": index, "_id": id, "result": "created"}

    def get(self, index, id):
        self.calls.append(("get", index, id))
        if (index, id) not in self.docs:
            return {"_index": index, "_id": id, "found": False}
        return {"_index": index, "_id": id, "found": True, "_source": dict(self.docs[(index, id)])}

    def search(self, index, body):
        self.calls.append(("search", index, body))
        return {"hits": {"hits": []}}

    def bulk(self, body):
        self.calls.append(("bulk", body))
        return {"errors": False, "items": body[::2]}

    def close(self):
        self.closed = True


class FakeOpenSearch:
    """Stands in for opensearchpy.OpenSearch; captures constructor kwargs."""
    instances: List["FakeOpenSearch"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.built_elevated = is_elevated()
        self.closed = 0
        FakeOpenSearch.instances.append(self)

    def close(self):
        self.closed += 1


class FakeDynamo:
    def __init__(self):
        self.items: Dict[tuple, Dict[str, Any]] = {}
        self.closed = False

    @staticmethod
    def _key(table, key):
        return (table,) + tuple(sorted((k, v["S"]) for k, v in key.items()))

    def put_item(self, TableName, Item):
        key = {k: v for k, v in Item.items() if k != "source"}
        self.items[self._key(TableName, key)] = Item
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}

    def get_item(self, TableName, Key):
        item = self.items.get(self._key(TableName, Key))
        return {"Item": item} if item else {}

    def close(self):
        self.closed = True


class StaticProvider(CredentialProvider):
    """Credential source returning fixed credentials, or nothing."""
    METHOD = "static"

    def __init__(self, access_key=None, secret_key="secret", token=None):
        super().__init__()
        self.access_key = access_key
        self.secret_key = secret_key
        self.token = token
        self.loads = 0

    def load(self):
        self.loads += 1
        if self.access_key is None:
            return None
        return Credentials(self.access_key, self.secret_key, self.token, method=self.METHOD)
