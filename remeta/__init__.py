# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later
__all__ = [
    "config", "log", "errors", "privileged", "validation", "credentials",
    "transport", "clients", "cli",
]
