# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import argparse, json, sys
from remeta.clients.factory import create_client
from remeta.config import get_cfg, reload_cfg, metadata_settings
from remeta.errors import RemetaError


def _settings(args) -> dict[str, str]:
    if args.config:
        reload_cfg(args.config)
    settings = metadata_settings(get_cfg())
    for pair in args.set or []:
        key, sep, value = pair.partition("=")
        if not sep:
            raise SystemExit(f"--set expects key=value, got {pair!r}")
        settings[key.strip()] = value
    return settings

def cmd_show_config(args):
    print(json.dumps(_settings(args), ensure_ascii=False, sort_keys=True))

def cmd_check(args):
    settings = _settings(args)
    try:
        client = create_client(settings)
    except RemetaError as e:
        print(json.dumps({"ok": False, "error": str(e)}, ensure_ascii=False))
        return 2
    with client:
        out = {
            "ok": True,
            "kind": client.kind.value,
            "multi_tenancy": client.multi_tenancy,
            "tenant_id_field": client.tenant_id_field,
        }
    print(json.dumps(out, ensure_ascii=False))
    return 0

def main_cli(argv=None):
    p = argparse.ArgumentParser(prog="remetacli")
    p.add_argument("--config", help="Path to config.yml (default: $REMETA_CONFIG or ./config.yml)")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_set(sp):
        sp.add_argument("--set", action="append", metavar="KEY=VALUE",
                        help="Override a metadata setting, e.g. metadata-type=remote")

    p_check = sub.add_parser("check", help="Build the configured metadata client and report it")
    add_set(p_check)
    p_check.set_defaults(func=cmd_check)

    p_show = sub.add_parser("show-config", help="Print the effective metadata settings")
    add_set(p_show)
    p_show.set_defaults(func=cmd_show_config)

    args = p.parse_args(argv)
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main_cli())
