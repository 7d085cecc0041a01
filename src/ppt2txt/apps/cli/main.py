from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence, TextIO

from ppt2txt import __version__
from ppt2txt.core.errors import DocumentOpenError, OutputError, ReportValidationError, UsageError
from ppt2txt.core.extract import PRESENTATION_SUFFIXES, open_presentation
from ppt2txt.core.report import build_json_report, ensure_valid_report, write_json_report, write_text_report
from ppt2txt.core.utils.logging import get_logger, resolve_log_level, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_DOCUMENT = 2
EXIT_OUTPUT = 3

STDOUT_TARGET = "-"

_EXT_BY_FORMAT = {"text": "txt", "json": "json"}


@dataclass(frozen=True)
class RunOptions:
    input_path: Path
    # None means standard output.
    output_path: Optional[Path]
    title_prefix: bool = True
    output_format: str = "text"
    log_level: int = logging.WARNING


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with status 2 on bad input; report it as a UsageError instead."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="ppt2txt",
        description="PowerPoint slide deck text extractor: one plain-text block per slide "
        "(title, subtitle, body, speaker notes).",
        epilog="-f textfilename writes textfilename.txt next to the input; -f- writes to stdout.",
    )
    p.add_argument(
        "-t",
        dest="title_toggle",
        action="count",
        default=0,
        help="skip adding prefix 'Title: ' to each slide title (repeat to toggle back)",
    )
    p.add_argument(
        "-f",
        dest="output",
        metavar="textfilename",
        help="write output to textfilename.txt (default: pptfilename.txt; '-' for stdout)",
    )
    p.add_argument("--json", action="store_true", help="write a JSON report instead of plain text")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("input", metavar="pptfilename", help="presentation file; .ppt/.pptx may be omitted")
    return p


def resolve_input(name: str) -> Path:
    """Return the existing input file for `name`, trying the known suffixes."""
    candidates = [Path(name)] + [Path(name + suf) for suf in PRESENTATION_SUFFIXES]
    for c in candidates:
        if c.is_file():
            return c.resolve()
    raise UsageError(f"unable to open input file '{name}'")


def derive_output_path(input_path: Path, output: Optional[str], ext: str) -> Optional[Path]:
    if not output:
        return input_path.with_suffix(f".{ext}")
    if output == STDOUT_TARGET:
        return None
    return input_path.parent / f"{output}.{ext}"


def validate_args(argv: Optional[Sequence[str]] = None) -> RunOptions:
    """Parse and check the command line; raise UsageError on any problem."""
    args = build_parser().parse_args(argv)

    input_path = resolve_input(args.input)
    output_format = "json" if args.json else "text"

    return RunOptions(
        input_path=input_path,
        output_path=derive_output_path(input_path, args.output, _EXT_BY_FORMAT[output_format]),
        title_prefix=args.title_toggle % 2 == 0,
        output_format=output_format,
        log_level=resolve_log_level(args.verbose),
    )


@contextmanager
def open_sink(target: Optional[Path]) -> Iterator[TextIO]:
    """Yield a text stream for `target`; None is stdout, which is left open."""
    if target is None:
        # Same encoding as the file sink, whatever the console uses.
        reconfigure = getattr(sys.stdout, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8")
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return

    try:
        f = target.open("w", encoding="utf-8")
    except OSError as e:
        raise OutputError(f"unable to write to output file '{target}': {e.strerror or e}") from e
    with f:
        yield f


def run(opts: RunOptions) -> int:
    try:
        prs = open_presentation(opts.input_path)
    except DocumentOpenError as e:
        print(f"[NG] {e}", file=sys.stderr)
        return EXIT_DOCUMENT

    # Validate before the sink is opened so a bad report leaves no file behind.
    report = None
    if opts.output_format == "json":
        report = build_json_report(prs, title_prefix=opts.title_prefix)
        try:
            ensure_valid_report(report)
        except ReportValidationError as e:
            print(f"[NG] {e}", file=sys.stderr)
            for m in e.errors[:30]:
                print(f"  - {m}", file=sys.stderr)
            return EXIT_OUTPUT

    try:
        with open_sink(opts.output_path) as sink:
            if report is not None:
                n = write_json_report(report, sink)
            else:
                n = write_text_report(prs, sink, title_prefix=opts.title_prefix)
    except OutputError as e:
        print(f"[NG] {e}", file=sys.stderr)
        return EXIT_OUTPUT
    except (OSError, UnicodeEncodeError) as e:
        print(f"[NG] write failed: {opts.output_path or 'stdout'}", file=sys.stderr)
        print(f"      detail: {e}", file=sys.stderr)
        return EXIT_OUTPUT

    logger.info(
        "wrote %d of %d slides: %s",
        n,
        prs.slide_count,
        opts.output_path or "stdout",
    )
    return EXIT_OK


def cli(argv: Optional[Sequence[str]] = None) -> int:
    try:
        opts = validate_args(argv)
    except UsageError as e:
        print(f"[NG] {e}", file=sys.stderr)
        print(build_parser().format_help(), file=sys.stderr, end="")
        return EXIT_USAGE

    setup_logging(opts.log_level)
    logger.debug("options: %s", opts)
    return run(opts)


def main() -> None:
    raise SystemExit(cli())


if __name__ == "__main__":
    main()
