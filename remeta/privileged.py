# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from contextvars import ContextVar
from typing import Callable, TypeVar

T = TypeVar("T")

_ELEVATED: ContextVar[bool] = ContextVar("remeta_elevated", default=False)


def is_elevated() -> bool:
    return _ELEVATED.get()


def do_privileged(action: Callable[[], T]) -> T:
    """
    Run `action` in an elevated-trust region and return its result.
    The ambient level is restored on every exit path, errors included.
    Socket, TLS and credential setup go through here.
    """
    token = _ELEVATED.set(True)
    try:
        return action()
    finally:
        _ELEVATED.reset(token)
