# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-15
"""
Diagnostic emitter: verdict -> Diagnostic appended to the sink.

One error per non-Ok verdict, located at the offending expression. The emitter
only renders and appends; it never touches the type model.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from nullsema.core.diagnostics import Diagnostic, DiagnosticSink
from nullsema.core.span import Span
from nullsema.core.types_core import TypeTable
from nullsema.checker.optionality import (
	CannotInvoke,
	IncomparableTypes,
	NilNotCompatible,
	Ok,
	RequiresUnwrap,
	Verdict,
)

CODE_UNWRAP = "E-UNWRAP"
CODE_NIL_CMP = "E-NIL-CMP"
CODE_INVOKE = "E-INVOKE"
CODE_NIL_COMPAT = "E-NIL-COMPAT"


def _article(word: str) -> str:
	return "an" if word[:1].lower() in "aeiou" else "a"


class DiagnosticEmitter:
	def __init__(self, type_table: TypeTable, sink: DiagnosticSink) -> None:
		self.type_table = type_table
		self.sink = sink

	def render(self, verdict: Verdict) -> Tuple[str, str]:
		"""(code, message) for a non-Ok verdict."""
		pretty = self.type_table.pretty
		if isinstance(verdict, RequiresUnwrap):
			return (
				CODE_UNWRAP,
				f"value of optional type '{pretty(verdict.actual_type)}' not unwrapped; did you mean to use '!' or '?'?",
			)
		if isinstance(verdict, IncomparableTypes):
			lhs = pretty(verdict.lhs_type)
			return (
				CODE_NIL_CMP,
				f"binary operator '{verdict.op}' cannot be applied to {_article(lhs)} {lhs} operand and a {verdict.rhs_kind} operand",
			)
		if isinstance(verdict, CannotInvoke):
			return (
				CODE_INVOKE,
				f"cannot invoke '{verdict.op}' with an argument list of type '({pretty(verdict.lhs_type)}, {verdict.rhs_kind})'",
			)
		if isinstance(verdict, NilNotCompatible):
			expected = pretty(verdict.expected_type)
			if verdict.context == "binding":
				return CODE_NIL_COMPAT, f"nil cannot initialize specified type '{expected}'"
			return CODE_NIL_COMPAT, f"nil is not compatible with expected argument type '{expected}'"
		raise TypeError(f"no diagnostic for verdict {type(verdict).__name__}")

	def emit(self, verdict: Verdict, span: Span) -> Diagnostic | None:
		if isinstance(verdict, Ok):
			return None
		code, message = self.render(verdict)
		diag = Diagnostic(message=message, code=code, phase="typecheck", severity="error", span=span)
		self.sink.append(diag)
		return diag

	def emit_all(self, results: Iterable[Tuple[Verdict, Span]]) -> int:
		"""Emit every non-Ok verdict in the given order; returns how many were emitted."""
		count = 0
		for verdict, span in results:
			if self.emit(verdict, span) is not None:
				count += 1
		return count


__all__ = [
	"CODE_UNWRAP",
	"CODE_NIL_CMP",
	"CODE_INVOKE",
	"CODE_NIL_COMPAT",
	"DiagnosticEmitter",
]
