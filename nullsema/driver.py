#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-17
"""
Driver: one compilation session from source text to diagnostics.

Library entry point is `compile_source`; `main` is the CLI:

	nullsema [-I DIR]... [--header FILE]... [--verify] [--json] SOURCE
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from nullsema.core.diagnostics import Diagnostic, read_error_reason
from nullsema.checker.context import CheckOptions, CompilationContext
from nullsema.checker.expr_checker import FunctionCheckResult, check_source_file
from nullsema.frontend import parse_source_to_ast
from nullsema.importer import import_header_file
from nullsema.verify import VerifyResult, verify_source

log = logging.getLogger(__name__)


@dataclass
class CompileOutcome:
	ctx: CompilationContext
	functions: List[FunctionCheckResult] = field(default_factory=list)
	verify: Optional[VerifyResult] = None

	@property
	def diagnostics(self) -> List[Diagnostic]:
		return self.ctx.sink.as_list()

	@property
	def exit_code(self) -> int:
		if self.verify is not None:
			return 0 if self.verify.ok else 1
		return 1 if self.ctx.sink.has_errors() else 0


def compile_source(
	source: str,
	*,
	file: str | None = None,
	options: Optional[CheckOptions] = None,
	header_sources: Optional[Mapping[str, str]] = None,
) -> CompileOutcome:
	"""
	Check `source` in a fresh compilation session.

	`header_sources` maps module names to in-memory header text (handy for
	tests); `options.headers` are imported up front, and `import M` otherwise
	resolves `M.h` on `options.search_paths`.
	"""
	opts = options or CheckOptions()
	if header_sources:
		merged = dict(opts.header_sources)
		merged.update(header_sources)
		opts = CheckOptions(
			search_paths=opts.search_paths,
			headers=opts.headers,
			header_sources=merged,
			verify=opts.verify,
			json=opts.json,
		)
	ctx = CompilationContext(opts)
	outcome = CompileOutcome(ctx=ctx)
	for header in opts.headers:
		module = import_header_file(header, sink=ctx.sink)
		if module is not None:
			ctx.add_module(module)
	ast = parse_source_to_ast(source, sink=ctx.sink, file=file)
	if ast is not None:
		outcome.functions = check_source_file(ctx, ast)
	log.debug("checked %s: %d diagnostics", file or "<input>", len(ctx.sink))
	if opts.verify:
		outcome.verify = verify_source(source, ctx.sink.as_list(), file=file)
	return outcome


def _diag_to_json(diag: Diagnostic, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file or str(source),
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _print_human(diags: List[Diagnostic], source: Path) -> None:
	for d in diags:
		print(f"{d.span.file or source}:{d.span.render()}: {d.severity}: {d.message}", file=sys.stderr)
		for note in d.notes:
			print(f"{d.span.file or source}:{d.span.render()}: note: {note}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
	"""
	Parse a source file, import its modules, check optionality.

	With --json, prints structured diagnostics and an exit_code; otherwise prints
	human-readable messages to stderr. With --verify, diagnostics are matched
	against `expected-*` comments and only mismatches are reported.
	"""
	parser = argparse.ArgumentParser(prog="nullsema", description="nullability-aware optional checking")
	parser.add_argument("source", type=Path, help="Path to the source file")
	parser.add_argument(
		"-I",
		"--include",
		dest="search_paths",
		action="append",
		type=Path,
		default=[],
		help="Header search directory for `import M` (repeatable)",
	)
	parser.add_argument(
		"--header",
		dest="headers",
		action="append",
		type=Path,
		default=[],
		help="Header to import before checking (repeatable)",
	)
	parser.add_argument("--verify", action="store_true", help="Match diagnostics against expected-* comments")
	parser.add_argument("--json", action="store_true", help="Emit structured diagnostics as JSON")
	parser.add_argument(
		"--log-level",
		default="WARNING",
		choices=["DEBUG", "INFO", "WARNING", "ERROR"],
		help="Logging level for compiler internals",
	)
	args = parser.parse_args(argv)
	logging.basicConfig(level=getattr(logging, args.log_level), format="%(name)s: %(message)s")

	source_path: Path = args.source
	try:
		text = source_path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as err:
		msg = f"cannot read source file: {read_error_reason(err)}"
		if args.json:
			print(json.dumps({"exit_code": 1, "diagnostics": [{"phase": "driver", "message": msg, "severity": "error", "file": str(source_path), "line": None, "column": None}]}))
		else:
			print(f"{source_path}:?:?: error: {msg}", file=sys.stderr)
		return 1

	search_paths = list(args.search_paths) or [source_path.parent]
	options = CheckOptions(
		search_paths=tuple(search_paths),
		headers=tuple(args.headers),
		verify=args.verify,
		json=args.json,
	)
	outcome = compile_source(text, file=str(source_path), options=options)

	if outcome.verify is not None:
		reported = outcome.verify.problems(file=str(source_path))
	else:
		reported = outcome.diagnostics
	exit_code = outcome.exit_code
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d, source_path) for d in reported],
		}
		print(json.dumps(payload))
	else:
		_print_human(reported, source_path)
	return exit_code


if __name__ == "__main__":
	sys.exit(main())
