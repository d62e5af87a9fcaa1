# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import os
import pytest
from remeta.config import get_cfg, reload_cfg
from remeta.credentials import CredentialChain
from utils import FakeOpenSearch, StaticProvider


@pytest.fixture(autouse=True)
def _reset_env_and_cfg(monkeypatch, tmp_path):
    for k in list(os.environ):
        if k.startswith(("REMETA_", "AWS_", "REMOTE_METADATA_")):
            monkeypatch.delenv(k, raising=False)
    # no config.yml from the working directory
    reload_cfg(str(tmp_path / "absent.yml"))
    FakeOpenSearch.instances.clear()
    yield
    reload_cfg(str(tmp_path / "absent.yml"))


@pytest.fixture()
def cfg():
    return get_cfg()


@pytest.fixture()
def empty_providers():
    return [StaticProvider(), StaticProvider(), StaticProvider()]


@pytest.fixture()
def empty_chain(empty_providers):
    """Chain whose every source comes back empty; never touches the network."""
    return lambda: CredentialChain(empty_providers)


@pytest.fixture()
def static_chain():
    return lambda: CredentialChain([StaticProvider("AKIDEXAMPLE")])
