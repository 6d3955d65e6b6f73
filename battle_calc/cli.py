from __future__ import annotations
import argparse, json, sys
from typing import Any, Dict, List, Optional, TextIO

from .catalog import CatalogLoadFailure, UnknownUnitId, UnitCatalog, load_catalog
from .combat import AttackOutcome, resolve_sequence
from .config import ConfigError, load_settings
from .log import configure_logging
from .optimizer import NoAttackersError, TooManyAttackersError, optimise_battle
from .state_assembler import BattleInput, build_state, optimisation_to_dict, state_to_dict

EXIT_OK = 0
EXIT_BAD_REQUEST = 1
EXIT_STARTUP = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m battle_calc.cli",
        description="Battle calculator CLI"
    )
    sub = p.add_subparsers(dest="cmd")

    # units
    un = sub.add_parser("units", help="Print the unit catalog as JSON")
    _add_common_args(un)
    un.add_argument("--all", action="store_true", help="Include hidden unit types")

    # battle
    bt = sub.add_parser("battle", help="Attack a defender with attackers in the given order")
    _add_common_args(bt)
    bt.add_argument("request", type=str, help="Battle request JSON file ('-' for stdin)")
    bt.add_argument("--trace", action="store_true", help="Include each exchange in the output")

    # optimise
    op = sub.add_parser("optimise", help="Find the best order of attack")
    _add_common_args(op)
    op.add_argument("request", type=str, help="Battle request JSON file ('-' for stdin)")
    op.add_argument("--max-attackers", dest="max_attackers", type=int, default=None,
                    help="Refuse searches over more attackers than this")

    # serve
    sv = sub.add_parser("serve", help="Run the HTTP API")
    _add_common_args(sv)
    sv.add_argument("--host", type=str, default=None)
    sv.add_argument("--port", type=int, default=None)

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(EXIT_STARTUP)
    return args


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    ap.add_argument("--env-prefix", type=str, default="BATTLE_CALC__", help="Env prefix for overrides")
    ap.add_argument("--catalog", type=str, default=None, help="Unit catalog JSON file")
    ap.add_argument("--log-level", dest="log_level", type=str, default=None)


def _settings(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.catalog:
        overrides.setdefault("catalog", {})["path"] = args.catalog
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if getattr(args, "max_attackers", None) is not None:
        overrides.setdefault("optimiser", {})["max_attackers"] = args.max_attackers
    if getattr(args, "host", None):
        overrides.setdefault("server", {})["host"] = args.host
    if getattr(args, "port", None):
        overrides.setdefault("server", {})["port"] = args.port
    return load_settings(args.config, env_prefix=args.env_prefix, overrides=overrides)


def _read_request(path: str, stdin: TextIO) -> BattleInput:
    if path == "-":
        payload = json.load(stdin)
    else:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    return BattleInput(**payload)


def _exchange_to_dict(index: int, outcome: Optional[AttackOutcome]) -> Dict[str, Any]:
    if outcome is None:
        return {"attacker": index, "attacked": False}
    return {
        "attacker": index,
        "attacked": True,
        "damage": outcome.damage,
        "retaliation": outcome.retaliation,
        "degenerate": outcome.degenerate,
    }


def _units(catalog: UnitCatalog, include_hidden: bool) -> List[Dict[str, Any]]:
    return [t.to_dict() for t in catalog if include_hidden or not t.hidden]


def _battle(args: argparse.Namespace, catalog: UnitCatalog, stdin: TextIO) -> Dict[str, Any]:
    state = build_state(_read_request(args.request, stdin), catalog)
    outcomes = resolve_sequence(state)
    out = state_to_dict(state)
    if args.trace:
        out["exchanges"] = [_exchange_to_dict(i, o) for i, o in enumerate(outcomes)]
    return out


def _optimise(args: argparse.Namespace, catalog: UnitCatalog, settings: Dict[str, Any],
              stdin: TextIO) -> Dict[str, Any]:
    state = build_state(_read_request(args.request, stdin), catalog)
    limit = settings.get("optimiser", {}).get("max_attackers")
    order, best = optimise_battle(state, max_attackers=limit)
    return optimisation_to_dict(order, best)


def main(argv: list[str] | None = None, stdout: TextIO | None = None,
         stdin: TextIO | None = None) -> int:
    stdout = stdout or sys.stdout
    stdin = stdin or sys.stdin
    args = _parse_args(argv)
    try:
        settings = _settings(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_STARTUP
    configure_logging(settings.get("logging", {}).get("level", "INFO"))

    if args.cmd == "serve":
        from .api.run import main as serve
        try:
            serve(settings)
        except CatalogLoadFailure as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_STARTUP
        return EXIT_OK

    try:
        catalog = load_catalog(settings.get("catalog", {}).get("path"))
    except CatalogLoadFailure as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_STARTUP

    try:
        if args.cmd == "units":
            out: Any = _units(catalog, args.all)
        elif args.cmd == "battle":
            out = _battle(args, catalog, stdin)
        elif args.cmd == "optimise":
            out = _optimise(args, catalog, settings, stdin)
        else:
            return EXIT_BAD_REQUEST
    except UnknownUnitId as exc:
        print(f"error: unit not found: {exc.unit_id}", file=sys.stderr)
        return EXIT_BAD_REQUEST
    except (NoAttackersError, TooManyAttackersError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_BAD_REQUEST
    except (OSError, TypeError, ValueError) as exc:
        # unreadable request file, invalid JSON or failed request validation
        print(f"error: bad request: {exc}", file=sys.stderr)
        return EXIT_BAD_REQUEST

    json.dump(out, stdout, indent=2)
    stdout.write("\n")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
