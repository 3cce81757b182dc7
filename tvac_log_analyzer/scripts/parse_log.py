from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from tvac_log_analyzer.errors import HeaderUnreadable, context_summary
from tvac_log_analyzer.export.table import write_table
from tvac_log_analyzer.ingest.session import parse_log_file
from tvac_log_analyzer.models.profile import ParserProfile, load_profile

logger = logging.getLogger("tvac_log_analyzer.scripts.parse_log")

EXIT_OK = 0
EXIT_HEADER_UNREADABLE = 1
EXIT_USAGE = 2
EXIT_IO = 3


def _discard_output(path: Path, created: bool) -> None:
    # Only remove the empty placeholder this run created.
    if created:
        path.unlink(missing_ok=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="tvac-parse-log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Parse a TVAC functional-test log into a CSV table of sample records.

            Blocks that fail to parse are written, one file each, to the
            failed-block directory (chunk0.txt, chunk1.txt, ...) and do not
            affect the exit status.
            """
        ),
    )
    p.add_argument("log", help="TVAC diagnostic log file")
    p.add_argument("--out", default=None, help="Output CSV path (default: out.csv)")
    p.add_argument("--failed-dir", default=None, help="Directory for failed blocks (default: failed_chunks)")
    p.add_argument("--preamble-lines", type=int, default=None, help="Self-test preamble length (default: 221)")
    p.add_argument("--profile", default=None, help="JSON file with ParserProfile fields")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    ns = p.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        profile = load_profile(ns.profile) if ns.profile else ParserProfile()
    except (OSError, ValueError) as e:
        logger.error("Cannot load profile %s: %s", ns.profile, e)
        return EXIT_USAGE

    overrides = {}
    if ns.out is not None:
        overrides["output_path"] = ns.out
    if ns.failed_dir is not None:
        overrides["failed_block_dir"] = ns.failed_dir
    if ns.preamble_lines is not None:
        overrides["preamble_lines"] = ns.preamble_lines
    try:
        profile = dataclasses.replace(profile, **overrides)
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_USAGE

    # Open the destination first so an unwritable path fails before parsing.
    out_path = Path(profile.output_path).expanduser()
    created = not out_path.exists()
    try:
        out_path.open("a", encoding="utf-8").close()
    except OSError as e:
        logger.error("Cannot open output %s: %s", out_path, e)
        return EXIT_IO

    try:
        result = parse_log_file(ns.log, profile=profile)
    except HeaderUnreadable as e:
        logger.error("%s %s", e.message, context_summary(e.context))
        _discard_output(out_path, created)
        return EXIT_HEADER_UNREADABLE
    except OSError as e:
        logger.error("Cannot read %s: %s", ns.log, e)
        _discard_output(out_path, created)
        return EXIT_IO

    try:
        write_table(result.records, out_path)
    except OSError as e:
        logger.error("Cannot write output %s: %s", out_path, e)
        return EXIT_IO

    print(f"[info] {result.n_records} records, {result.n_failed} failed blocks. Written to {out_path}")
    if result.n_failed:
        print(f"[warn] failed blocks written to {Path(profile.failed_block_dir)}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
