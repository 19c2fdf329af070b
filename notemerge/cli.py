"""Command line entry point: ``integrate``, ``lookup`` and ``check``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import run
from .collection import Collection
from .config import Settings, load_settings
from .errors import DocumentDecodeError, InvalidNoteError, PersistenceError, PromptError, SourceReadError
from .prompt import TerminalPrompter, format_symbol
from .source import load_source
from .store import load_collection

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2
EXIT_LOAD = 3
EXIT_SOURCE = 4
EXIT_SAVE = 5
EXIT_INPUT = 6

DEFAULT_FORMAT = "%(levelname)s - %(message)s"
VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else level)


def describe_term(collection: Collection, term: str, index_base: int = 1) -> List[str]:
    lines = []
    for number, stored in enumerate(collection.meanings(term), start=index_base):
        title = collection.title(stored.source) or "?"
        lines.append(f"{number}. {stored.text}{format_symbol(stored.symbol)} ({title})")
    return lines


def handle_integrate(args: argparse.Namespace, settings: Settings) -> int:
    prompter = TerminalPrompter(index_base=settings.index_base)
    report = run(args.collection, args.history, args.sources, prompter, settings)
    print(
        f"sources:{report.sources} entries:{report.entries} inserted:{report.inserted} "
        f"skipped:{report.skipped} added:{report.added} replaced:{report.replaced} "
        f"updated:{report.updated} rejected:{report.rejected}"
    )
    return EXIT_OK


def handle_lookup(args: argparse.Namespace, settings: Settings) -> int:
    collection = load_collection(args.collection)
    lines = describe_term(collection, args.term, settings.index_base)
    if not lines:
        print(f"No meanings stored for '{args.term}'", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(args.term)
    for line in lines:
        print(f"  {line}")
    return EXIT_OK


def handle_check(args: argparse.Namespace, settings: Settings) -> int:
    failed = 0
    for path in args.sources:
        try:
            source = load_source(path, warn_unknown_directives=settings.warn_unknown_directives)
        except (SourceReadError, InvalidNoteError) as exc:
            print(f"FAIL {exc}", file=sys.stderr)
            failed += 1
            continue
        print(f"ok   {path}: {len(source.entries)} entries, title {source.title!r}")
    return EXIT_SOURCE if failed else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notemerge", description="Merge vocabulary notes into a collection.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging with source locations")
    parser.add_argument("--config", default=None, help="JSON settings file (default: $NOTEMERGE_CONFIG)")
    subparsers = parser.add_subparsers(dest="command")

    integrate_parser = subparsers.add_parser("integrate", help="Merge note files into a collection")
    integrate_parser.add_argument("collection", help="Collection JSON path")
    integrate_parser.add_argument("history", help="History JSON path")
    integrate_parser.add_argument("sources", nargs="+", help="Note files, merged in the given order")
    integrate_parser.set_defaults(func=handle_integrate)

    lookup_parser = subparsers.add_parser("lookup", help="Show the stored meanings of a term")
    lookup_parser.add_argument("collection", help="Collection JSON path")
    lookup_parser.add_argument("term", help="Term to look up")
    lookup_parser.set_defaults(func=handle_lookup)

    check_parser = subparsers.add_parser("check", help="Parse note files without merging them")
    check_parser.add_argument("sources", nargs="+", help="Note files to parse")
    check_parser.set_defaults(func=handle_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_USAGE
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE
    setup_logging(settings.log_level, verbose=args.verbose)

    try:
        return args.func(args, settings)
    except DocumentDecodeError as exc:
        print(f"Unable to load: {exc}", file=sys.stderr)
        return EXIT_LOAD
    except (SourceReadError, InvalidNoteError) as exc:
        print(f"Unable to read source: {exc}", file=sys.stderr)
        return EXIT_SOURCE
    except PersistenceError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_SAVE
    except PromptError as exc:
        print(f"Aborted: {exc}", file=sys.stderr)
        return EXIT_INPUT


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
