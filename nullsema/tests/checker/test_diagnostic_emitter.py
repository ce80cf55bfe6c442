#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
from __future__ import annotations

import pytest

from nullsema.core.diagnostics import DiagnosticSink
from nullsema.core.span import Span
from nullsema.core.types_core import TypeTable
from nullsema.checker.emitter import (
	CODE_INVOKE,
	CODE_NIL_CMP,
	CODE_NIL_COMPAT,
	CODE_UNWRAP,
	DiagnosticEmitter,
)
from nullsema.checker.optionality import (
	OK,
	CannotInvoke,
	IncomparableTypes,
	NilNotCompatible,
	RequiresUnwrap,
)


def _emitter():
	tt = TypeTable()
	sink = DiagnosticSink()
	return tt, sink, DiagnosticEmitter(tt, sink)


def test_requires_unwrap_message():
	tt, sink, emitter = _emitter()
	opt = tt.ensure_optional(tt.ensure_class("SomeClass"))

	diag = emitter.emit(RequiresUnwrap("optional argument into non-optional parameter", opt), Span(line=19, column=14))

	assert diag is not None
	assert diag.message == "value of optional type 'SomeClass?' not unwrapped; did you mean to use '!' or '?'?"
	assert diag.code == CODE_UNWRAP
	assert diag.phase == "typecheck"
	assert diag.severity == "error"
	assert diag.span.line == 19
	assert sink.as_list() == [diag]


def test_comparison_messages():
	tt, _, emitter = _emitter()
	any_ty = tt.ensure_any_object()
	cls = tt.ensure_class("SomeClass")

	assert emitter.render(IncomparableTypes(any_ty, "==")) == (
		CODE_NIL_CMP,
		"binary operator '==' cannot be applied to an AnyObject operand and a nil operand",
	)
	assert emitter.render(IncomparableTypes(cls, "!="))[1] == (
		"binary operator '!=' cannot be applied to a SomeClass operand and a nil operand"
	)
	assert emitter.render(CannotInvoke("==", any_ty)) == (
		CODE_INVOKE,
		"cannot invoke '==' with an argument list of type '(AnyObject, nil)'",
	)


def test_nil_compatibility_messages():
	tt, _, emitter = _emitter()
	cls = tt.ensure_class("SomeClass")

	assert emitter.render(NilNotCompatible(cls, "argument")) == (
		CODE_NIL_COMPAT,
		"nil is not compatible with expected argument type 'SomeClass'",
	)
	assert emitter.render(NilNotCompatible(cls, "binding"))[1] == "nil cannot initialize specified type 'SomeClass'"


def test_ok_emits_nothing_and_emit_all_keeps_order():
	tt, sink, emitter = _emitter()
	opt = tt.ensure_optional(tt.ensure_any_object())

	assert emitter.emit(OK, Span(line=1)) is None
	count = emitter.emit_all(
		[
			(RequiresUnwrap("r", opt), Span(line=3)),
			(OK, Span(line=4)),
			(CannotInvoke("==", tt.ensure_any_object()), Span(line=5)),
		]
	)

	assert count == 2
	assert [d.span.line for d in sink] == [3, 5]


def test_render_rejects_ok():
	_, _, emitter = _emitter()

	with pytest.raises(TypeError):
		emitter.render(OK)
