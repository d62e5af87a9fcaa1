# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from .base import BackendConfig, BackendKind, DelegateKind, UnifiedClient
from .factory import create_client, create_client_from_cfg, wrap_delegate
from .keyvalue import KeyValueDelegate
from .local import LocalDelegate
from .remote import RemoteClusterDelegate

__all__ = [
    "BackendConfig", "BackendKind", "DelegateKind", "UnifiedClient",
    "create_client", "create_client_from_cfg", "wrap_delegate",
    "KeyValueDelegate", "LocalDelegate", "RemoteClusterDelegate",
]
