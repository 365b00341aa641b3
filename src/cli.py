"""Command-line interface for srclens."""

from __future__ import annotations

import argparse
import inspect
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from codebuffer.buffer import CodeBuffer
from codebuffer.render import RenderOptions, style_text
from docs.markup import process_comment_markup
from errors import NotFound, SourceLensError
from locate.locator import SourceLocator
from locate.methods import MethodRecord
from locate.models import SourceSpan
from locate.modules import ModuleRecord
from locate.sources import code_from_method
from logging_setup import setup_logging
from scan.files import FileContentProvider, SessionBuffer
from settings.config import ConfigError, SrcLensConfig, load_config
from utils import lookup_target

logger = logging.getLogger(__name__)


def _add_target(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "target",
        help="Dotted name of a module, class or method (pkg.mod:Class.method)",
    )


def _add_display_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-l",
        "--line-numbers",
        action="store_true",
        help="Show line numbers.",
    )
    parser.add_argument(
        "-b",
        "--base-one",
        action="store_true",
        help="Show line numbers but start numbering at 1.",
    )
    parser.add_argument(
        "-f",
        "--flood",
        action="store_true",
        help="Do not use a pager to view text longer than one screen.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="srclens")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable syntax coloring",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    source_parser = subparsers.add_parser(
        "show-source", help="Show the source of a method, class or module"
    )
    _add_target(source_parser)
    _add_display_flags(source_parser)
    source_parser.add_argument(
        "-a",
        "--candidate",
        type=int,
        default=0,
        metavar="RANK",
        help="Show the class declaration at candidate RANK (default: 0)",
    )

    doc_parser = subparsers.add_parser(
        "show-doc", help="Show the comments above a method, class or module"
    )
    _add_target(doc_parser)
    _add_display_flags(doc_parser)

    stat_parser = subparsers.add_parser("stat", help="Show method information")
    _add_target(stat_parser)

    return parser


class _Session:
    """Collaborators and display settings shared by one command invocation."""

    def __init__(self, config: SrcLensConfig, *, color: bool) -> None:
        self.config = config
        self.files = FileContentProvider(
            SessionBuffer(config.session_path), kind_overrides=config.code_kinds
        )
        self.locator = SourceLocator(files=self.files)
        self.options: RenderOptions = config.render_options(color=color)

    def bold(self, text: str) -> str:
        return style_text(text, "bold") if self.options.color else text

    def record_for(self, target: Any) -> ModuleRecord:
        if inspect.isclass(target) or inspect.ismodule(target):
            return ModuleRecord(target, locator=self.locator)
        return ModuleRecord.for_instance(target, locator=self.locator)

    def method_for(self, target: Any) -> MethodRecord:
        return MethodRecord(
            target,
            files=self.files,
            expressions=self.locator.expressions,
            docs=self.locator.docs,
        )

    def header(self, file: str | None, line: int | None) -> str:
        if file is None:
            return f"\n{self.bold('From:')} (native code)\n\n"
        return f"\n{self.bold('From:')} {file} @ line {line}:\n\n"

    def emit(self, text: str, *, flood: bool) -> None:
        if flood or self.config.flood or not sys.stdout.isatty():
            sys.stdout.write(text)
            return
        console = Console()
        with console.pager(styles=self.options.color):
            console.print(Text.from_ansi(text), end="", soft_wrap=True)


def _is_method(target: Any) -> bool:
    return inspect.isroutine(target) or isinstance(
        target, (classmethod, staticmethod, property)
    )


def _handle_show_source(session: _Session, args: argparse.Namespace) -> int:
    target = lookup_target(args.target)
    numbered = args.line_numbers or args.base_one or session.config.line_numbers

    if _is_method(target):
        method = session.method_for(target)
        code = code_from_method(method, 1 if args.base_one else None)
        owner = method.owner
        text = session.header(method.source_file, method.source_line)
        text += f"{session.bold('Owner:')} {owner.__qualname__ if owner else 'N/A'}\n"
        text += f"{session.bold('Visibility:')} {method.visibility}\n\n"
    else:
        record = session.record_for(target)
        candidate = record.candidate(args.candidate)
        start = 1 if args.base_one else candidate.line
        code = CodeBuffer(candidate.source(), start, candidate.code_kind)
        text = session.header(candidate.file, candidate.line)

    code = code.with_line_numbers(numbered).colorize(session.options.color)
    session.emit(text + code.render(session.options), flood=args.flood)
    return 0


def _doc_buffer(doc: str, start_line: int, numbered: bool) -> str:
    if not numbered:
        return doc
    return CodeBuffer(doc, start_line, "text").with_line_numbers(True).render()


def _handle_show_doc(session: _Session, args: argparse.Namespace) -> int:
    target = lookup_target(args.target)
    numbered = args.line_numbers or args.base_one or session.config.line_numbers

    if _is_method(target):
        method = session.method_for(target)
        doc = method.doc
        if not doc:
            sys.stderr.write("error: No documentation found.\n")
            return 1
        doc = process_comment_markup(
            doc, method.code_kind, color=session.options.color, theme=session.options.theme
        )
        owner = method.owner
        text = session.header(method.source_file, method.source_line)
        text += f"{session.bold('Owner:')} {owner.__qualname__ if owner else 'N/A'}\n"
        text += f"{session.bold('Visibility:')} {method.visibility}\n"
        text += f"{session.bold('Signature:')} {method.signature}\n\n"
        start = 1 if args.base_one else max((method.source_line or 1) - doc.count("\n"), 1)
        session.emit(text + _doc_buffer(doc, start, numbered), flood=args.flood)
        return 0

    record = session.record_for(target)
    span: SourceSpan | None = None
    try:
        span = record.resolved_span
        doc = record.doc
    except NotFound as exc:
        logger.debug("No declaration for %s: %s", record.nonblank_name, exc)
        doc = ""
    if not doc:
        docstring = inspect.getdoc(record.resolution_target)
        doc = f"{docstring}\n" if docstring else ""
    if not doc:
        sys.stderr.write("error: No documentation found.\n")
        return 1

    code_kind = session.files.code_kind_for(span.file) if span else "python"
    doc = process_comment_markup(
        doc, code_kind, color=session.options.color, theme=session.options.theme
    )
    if span is None:
        session.emit(_doc_buffer(doc, 1, numbered), flood=args.flood)
        return 0
    start = 1 if args.base_one else max(span.start_line - doc.count("\n"), 1)
    text = session.header(span.file, span.start_line)
    session.emit(text + _doc_buffer(doc, start, numbered), flood=args.flood)
    return 0


def _handle_stat(session: _Session, args: argparse.Namespace) -> int:
    target = lookup_target(args.target)
    if not _is_method(target):
        sys.stderr.write(f"error: {args.target} is not a method\n")
        return 1

    method = session.method_for(target)
    owner = method.owner
    location = f"{method.source_file}:{method.source_line}" if method.span else "Not found."
    lines = [
        "Method Information:",
        "--",
        f"Name: {method.name}",
        f"Owner: {owner.__qualname__ if owner else 'Unknown'}",
        f"Visibility: {method.visibility}",
        f"Type: {'Bound' if method.is_bound else 'Unbound'}",
        f"Arity: {method.arity}",
        f"Method Signature: {method.signature}",
        f"Source Location: {location}",
    ]
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


_HANDLERS = {
    "show-source": _handle_show_source,
    "show-doc": _handle_show_doc,
    "stat": _handle_stat,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(Path.cwd())
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    color = config.color and not args.no_color and sys.stdout.isatty()
    session = _Session(config, color=color)

    handler = _HANDLERS.get(args.command)
    if handler is None:
        raise AssertionError

    try:
        return handler(session, args)
    except SourceLensError as exc:
        logger.debug("%s failed for %s", args.command, args.target, exc_info=True)
        sys.stderr.write(f"error: {exc}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
