#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
from __future__ import annotations

import pytest
from lark.exceptions import UnexpectedInput

from nullsema.core.diagnostics import DiagnosticSink
from nullsema.frontend import ast as A
from nullsema.frontend import parse_source, parse_source_to_ast


def _body(src: str):
	sf = parse_source(src, file="t.ns")
	assert len(sf.functions) == 1
	return sf.functions[0].body.statements


def test_imports_and_function_signature():
	sf = parse_source(
		"import nullability;\nimport other\n\nfunc testSomeClass(sc: SomeClass, osc: SomeClass?) {\n}\n",
		file="t.ns",
	)

	assert [imp.module for imp in sf.imports] == ["nullability", "other"]
	fn = sf.functions[0]
	assert fn.name == "testSomeClass"
	assert [(p.name, p.type_ref.render()) for p in fn.params] == [("sc", "SomeClass"), ("osc", "SomeClass?")]
	assert fn.body.statements == []
	assert sf.imports[0].loc.line == 1
	assert sf.imports[0].loc.file == "t.ns"


def test_var_decl_with_call_and_labels():
	[stmt] = _body("func f() {\n  var ao: AnyObject = sc.methodG(sc, second: osc)\n}\n")

	assert isinstance(stmt, A.VarDecl)
	assert stmt.mutable
	assert stmt.type_ref is not None and stmt.type_ref.name == "AnyObject"
	call = stmt.value
	assert isinstance(call, A.Call)
	assert isinstance(call.callee, A.Member)
	assert call.callee.member == "methodG"
	assert isinstance(call.callee.base, A.Name) and call.callee.base.ident == "sc"
	assert [a.label for a in call.args] == [None, "second"]
	assert [a.value.ident for a in call.args] == ["sc", "osc"]
	# Argument spans point at the argument expression itself.
	assert call.args[1].value.loc.line == 2
	assert call.args[1].value.loc.column == 46


def test_let_without_type_and_optional_binding_type():
	stmts = _body("func f() {\n  let a = sc.methodC()\n  var b: AnyObject? = nil;\n}\n")

	assert isinstance(stmts[0], A.VarDecl) and not stmts[0].mutable and stmts[0].type_ref is None
	assert stmts[1].type_ref.optional
	assert isinstance(stmts[1].value, A.NilLiteral)


def test_if_compare_with_nil_and_else_chain():
	[stmt] = _body(
		"func f() {\n"
		"  if sc.methodD() == nil { } else if osc != nil { sc.methodE(osc!) } else { }\n"
		"}\n"
	)

	assert isinstance(stmt, A.IfStmt)
	cond = stmt.cond
	assert isinstance(cond, A.Compare)
	assert cond.op == "=="
	assert isinstance(cond.left, A.Call)
	assert isinstance(cond.right, A.NilLiteral)
	# The comparison is located at its operator.
	assert (cond.loc.line, cond.loc.column) == (2, 19)
	nested = stmt.else_block.statements[0]
	assert isinstance(nested, A.IfStmt)
	assert nested.cond.op == "!="
	inner = nested.then_block.statements[0]
	assert isinstance(inner, A.ExprStmt)
	assert isinstance(inner.expr.args[0].value, A.ForceUnwrap)
	assert nested.else_block is not None and nested.else_block.statements == []


def test_optional_chaining_and_parentheses():
	[stmt] = _body("func f() {\n  (osc?.peer)?.methodC()\n}\n")

	call = stmt.expr
	assert isinstance(call, A.Call)
	member = call.callee
	assert isinstance(member, A.Member) and member.optional_chain
	paren = member.base
	assert isinstance(paren, A.Paren)
	assert (paren.loc.line, paren.loc.column) == (2, 3)
	inner = paren.expr
	assert isinstance(inner, A.Member)
	assert inner.member == "peer" and inner.optional_chain


def test_comments_are_ignored():
	stmts = _body("// leading\nfunc f() {\n  sc.methodE(sc) // expected-error{{nothing}}\n  /* block */\n}\n")

	assert len(stmts) == 1


def test_syntax_error_raises_and_is_reported():
	with pytest.raises(UnexpectedInput):
		parse_source("func f( {\n}\n")

	sink = DiagnosticSink()
	assert parse_source_to_ast("func f() {\n  var = 1\n}\n", sink=sink, file="bad.ns") is None
	[diag] = sink.as_list()
	assert diag.phase == "parser"
	assert diag.span.file == "bad.ns"
	assert diag.span.line == 2
