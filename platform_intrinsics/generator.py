# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: load platform JSON, expand it, write the table.

    python -m platform_intrinsics arm.json
    python -m platform_intrinsics --format extern-block -i x86/info.json sse41.json sse42.json
    python -m platform_intrinsics --wrap -o generated.rs x86/

Any failure (bad JSON shape, bad spec token, bad width) stops the run; the
error is printed as one diagnostic and the exit status is 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from platform_intrinsics.codegen import FORMATS, generate
from platform_intrinsics.config import load_platform
from platform_intrinsics.core.diagnostics import Diagnostic
from platform_intrinsics.core.errors import ConfigError, IntrinsicGenError

logger = logging.getLogger(__name__)


def _report(diag: Diagnostic, *, as_json: bool) -> None:
	if as_json:
		print(json.dumps({"exit_code": 1, "diagnostics": [diag.to_json()]}))
	else:
		print(diag.format(), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(description="Render intrinsic definition JSON into signature tables.")
	parser.add_argument("inputs", type=Path, nargs="+", help="Platform JSON file(s) or directories")
	parser.add_argument(
		"-i",
		"--info",
		type=Path,
		help="Platform header JSON merged into every input (for one-file-per-instruction-set platforms)",
	)
	parser.add_argument("--format", dest="fmt", choices=FORMATS, default="compiler-defs", help="Output format")
	parser.add_argument("-o", "--output", type=Path, help="Write output here instead of stdout")
	parser.add_argument(
		"--wrap",
		action="store_true",
		help="Wrap compiler-defs records in a complete `find` lookup function",
	)
	parser.add_argument("-j", "--jobs", type=int, default=1, help="Expand templates on this many threads")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/token/context)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log loading and expansion progress")
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	try:
		platform = load_platform(args.inputs, info_path=args.info)
		platform.validate()
	except IntrinsicGenError as err:
		_report(Diagnostic.from_error(err, phase="config"), as_json=args.json)
		return 1
	except OSError as err:
		_report(Diagnostic(message=str(err), code=ConfigError.code, phase="config"), as_json=args.json)
		return 1

	try:
		text = generate(platform, fmt=args.fmt, wrap=args.wrap, jobs=args.jobs)
	except IntrinsicGenError as err:
		_report(Diagnostic.from_error(err, phase="expand"), as_json=args.json)
		return 1

	if args.output is not None:
		args.output.write_text(text, encoding="utf-8")
		logger.info("wrote %s", args.output)
	else:
		sys.stdout.write(text)
	return 0


__all__ = ["main"]
