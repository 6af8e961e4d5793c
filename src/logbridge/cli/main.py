"""
Command-line entry point for logbridge.

``logbridge providers`` runs backend selection the same way the first
``get_logger()`` call would and reports every candidate and the winner.
``logbridge plugins`` lists the registered component types.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

import orjson

from ..core.errors import LogbridgeError
from ..plugins import list_plugins
from ..providers import ContextFactorySelector


def _factory_name(factory: Any) -> str:
    cls = type(factory)
    return f"{cls.__module__}.{cls.__qualname__}"


def _providers_report() -> dict[str, Any]:
    selector = ContextFactorySelector()
    factory = selector.resolve()
    return {
        "state": selector.state.value,
        "selected": _factory_name(factory),
        "candidates": [
            {
                "factory": d.factory_name,
                "priority": d.priority,
                "api_version": d.api_version,
                "source": d.source,
            }
            for d in selector.candidates
        ],
    }


def _print_providers(report: dict[str, Any], *, output_format: str) -> None:
    if output_format == "json":
        print(orjson.dumps(report, option=orjson.OPT_INDENT_2).decode())
        return
    print(f"selected: {report['selected']} ({report['state']})")
    for candidate in report["candidates"]:
        print(
            f"- {candidate['factory']} priority={candidate['priority']} "
            f"source={candidate['source']}"
        )


def _print_plugins(category: str | None, *, output_format: str) -> None:
    names = list_plugins(category)
    if output_format == "json":
        print(orjson.dumps(names).decode())
        return
    for name in names:
        print(name)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="logbridge")
    sub = parser.add_subparsers(dest="command")
    p = sub.add_parser("providers", help="Show discovered logging backends")
    p.add_argument(
        "--format", dest="output_format", choices=["text", "json"], default="text"
    )
    g = sub.add_parser("plugins", help="List registered component plugins")
    g.add_argument("--category")
    g.add_argument(
        "--format", dest="output_format", choices=["text", "json"], default="text"
    )

    args = parser.parse_args(argv)
    try:
        if args.command == "providers":
            _print_providers(_providers_report(), output_format=args.output_format)
            return 0
        if args.command == "plugins":
            _print_plugins(args.category, output_format=args.output_format)
            return 0
    except LogbridgeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2


def cli_main() -> int:
    return main()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli_main())
