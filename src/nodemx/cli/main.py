"""
Command-line interface for nodemx.

This module provides the ``nodemx`` entry point for inspecting a node from
a shell: the resolved cgroup topology, the result of any query by name, and
the parse of an arbitrary virtual file in a chosen format.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

import polars as pl

from .. import __version__
from ..config import get_config, set_config_path
from ..context import NodeContext, build_context
from ..models import TypedTable, signatures
from ..parsing import FormatKind, create_parser, detect_format
from ..queries import QUERIES, QuerySpec
from ..system.vfs import read_nlsv
from ..validation import (
    NodemxError,
    ValidationError,
    handle_cli_error,
    validate_enum_choice,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

# Formats whose column type the caller picks; the CLI reads them as text
_TEXT_SIGNATURES = {
    FormatKind.SCALAR: signatures.TEXT_SIG,
    FormatKind.SETOF: signatures.TEXT_SIG,
    FormatKind.ARRAY: signatures.TEXT_ARRAY_SIG,
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodemx",
        description="Read node metrics from cgroup, procfs and Downward API virtual files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a config.toml with a [nodemx] section.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log context resolution and file reads.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("mode", help="Show the cgroup mode and containerization.")
    subparsers.add_parser("paths", help="Show the controller to directory table.")

    query = subparsers.add_parser("query", help="Run a query function by name.")
    query.add_argument("function", help=f"One of: {', '.join(sorted(QUERIES))}")
    query.add_argument("arguments", nargs="*", help="Filename, name, pathname, page count or pids.")

    cat = subparsers.add_parser("cat", help="Parse any virtual file and print its rows.")
    cat.add_argument("path", help="Absolute path of the file to parse.")
    cat.add_argument(
        "-f",
        "--format",
        dest="format_kind",
        help="Format kind; guessed from the file name when omitted. "
        f"Available: {[kind.value for kind in FormatKind]}",
    )
    cat.add_argument("--pid", type=int, default=0, help="pid reported by the pid_io format.")
    return parser


def print_result(value: Any) -> None:
    """Print a table with every row shown, or a scalar as-is."""
    if isinstance(value, TypedTable):
        with pl.Config(tbl_rows=-1, tbl_cols=-1, fmt_str_lengths=120):
            print(value.frame)
    elif value is None:
        print("(null)")
    else:
        print(value)


def _query_arguments(spec: QuerySpec, arguments: Sequence[str]) -> List[Any]:
    """Convert the command-line arguments of ``query`` into call arguments."""
    if spec.argument is None:
        if arguments:
            raise ValidationError(f"takes no arguments, got {len(arguments)}")
        return []
    if spec.argument == "pids":
        if not arguments:
            return []
        return [[validate_positive_integer(a, field_name="pid") for a in arguments]]
    if len(arguments) != 1:
        raise ValidationError(
            f"expects exactly one {spec.argument}, got {len(arguments)}",
            field_name=spec.argument,
        )
    return [arguments[0]]


def run_query(ctx: NodeContext, name: str, arguments: Sequence[str]) -> Any:
    """Look up ``name`` in the query registry and call it."""
    spec = QUERIES.get(name)
    if spec is None:
        raise ValidationError(f"unknown query function: {name}", field_name="function", value=name)
    args = _query_arguments(spec, arguments)
    if spec.uses_context:
        args.insert(0, ctx)
    return spec.function(*args)


def cat_file(path: str, format_kind: Optional[str] = None, pid: int = 0) -> TypedTable:
    """Parse the file at ``path`` with the named or guessed format."""
    if format_kind is None:
        kind = detect_format(path)
    else:
        kind = FormatKind(validate_enum_choice(
            format_kind, [k.value for k in FormatKind], field_name="--format"
        ))
    logger.info(f"Parsing {path} as {kind.value}")

    if kind in _TEXT_SIGNATURES:
        parser = create_parser(kind, signature=_TEXT_SIGNATURES[kind])
    elif kind == FormatKind.PID_IO:
        parser = create_parser(kind, pid=pid)
    else:
        parser = create_parser(kind)
    return parser.parse(read_nlsv(path), path, allow_empty=True)


def show_mode(ctx: NodeContext) -> None:
    print(f"cgroup mode:   {ctx.cgroup_mode.value}")
    print(f"detected mode: {ctx.detected_mode.value}")
    print(f"containerized: {ctx.containerized}")
    print(f"cgroup root:   {ctx.config.cgroup_root}")
    print(f"procfs:        {'enabled' if ctx.procfs_enabled else 'disabled'}")
    print(f"kdapi:         {'enabled' if ctx.kdapi_enabled else 'disabled'}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main command-line interface for nodemx.

    Loads the configuration, builds the node context and dispatches the
    subcommand. Query failures are reported with their kind and exit with
    status 1.

    Raises:
        SystemExit: On configuration errors or query failures.
    """
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.config is not None:
        set_config_path(args.config)

    try:
        config = get_config()
    except Exception as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=2, logger=logger)

    if args.command == "cat":
        try:
            print_result(cat_file(args.path, args.format_kind, args.pid))
        except (NodemxError, ValidationError) as e:
            handle_cli_error(error=e, context=f"parsing {args.path}", logger=logger)
        return 0

    ctx = build_context(config)
    if args.command == "mode":
        show_mode(ctx)
    elif args.command == "paths":
        print_result(QUERIES["cgroup_path"].function(ctx))
    elif args.command == "query":
        try:
            print_result(run_query(ctx, args.function, args.arguments))
        except NodemxError as e:
            handle_cli_error(
                error=e, context=f"query {args.function} ({e.kind.value})", logger=logger
            )
        except ValidationError as e:
            handle_cli_error(error=e, context=f"query {args.function} arguments", logger=logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
