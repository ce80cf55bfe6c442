# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-14
"""
Source front end: parses the checked source dialect and reports syntax errors
as parser-phase diagnostics.
"""

from __future__ import annotations

from typing import Optional

from lark.exceptions import UnexpectedInput

from nullsema.core.diagnostics import Diagnostic, DiagnosticSink
from nullsema.core.span import Span
from nullsema.frontend.ast import SourceFile
from nullsema.frontend.parser import parse_source


def parse_source_to_ast(source: str, *, sink: DiagnosticSink, file: str | None = None) -> Optional[SourceFile]:
	"""Parse `source`; on a syntax error append a diagnostic and return None."""
	try:
		return parse_source(source, file=file)
	except UnexpectedInput as err:
		sink.append(
			Diagnostic(
				message=f"expected expression or declaration: {err.__class__.__name__}",
				phase="parser",
				severity="error",
				span=Span(file=file, line=getattr(err, "line", None), column=getattr(err, "column", None), raw=err),
			)
		)
		return None


__all__ = ["parse_source_to_ast", "parse_source"]
