# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from contextlib import contextmanager


class RemetaError(RuntimeError):
    """Base class for errors raised by this package."""


class ConfigError(RemetaError):
    """Required metadata settings are missing or invalid. Raised at construction."""


class AuthError(RemetaError):
    """No credential source could be resolved. Raised on first use, never at construction."""


def find_auth_error(exc: BaseException | None) -> AuthError | None:
    """
    Walk an exception's cause chain looking for an AuthError.
    Transport clients wrap errors raised while signing (opensearch-py puts the
    original in `.info`, most others chain it as __cause__/__context__).
    """
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, AuthError):
            return exc
        seen.add(id(exc))
        info = getattr(exc, "info", None)
        if isinstance(info, AuthError):
            return info
        exc = exc.__cause__ or exc.__context__
    return None


@contextmanager
def surface_auth_errors():
    """Re-raise an AuthError buried inside a transport error as itself."""
    try:
        yield
    except AuthError:
        raise
    except Exception as e:
        auth = find_auth_error(e)
        if auth is None:
            raise
        raise auth from None
