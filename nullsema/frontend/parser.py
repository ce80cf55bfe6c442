# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-14
"""Source parser: lark tree -> nullsema.frontend.ast."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from nullsema.core.span import Span
from nullsema.frontend.ast import (
	Arg,
	Block,
	Call,
	Compare,
	Expr,
	ExprStmt,
	ForceUnwrap,
	FuncDecl,
	IfStmt,
	ImportDecl,
	Member,
	Name,
	NilLiteral,
	Param,
	Paren,
	SourceFile,
	Stmt,
	TypeRef,
	VarDecl,
)

_GRAMMAR_PATH = Path(__file__).with_name("source.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def _name(node: object) -> str | None:
	return node.data if isinstance(node, Tree) else None


def _first_token(node: Tree, kind: str) -> Token:
	tok = next((c for c in node.children if isinstance(c, Token) and c.type == kind), None)
	if tok is None:
		raise TypeError(f"{node.data} node missing {kind} token")
	return tok


class _SourceBuilder:
	def __init__(self, file: str | None) -> None:
		self.file = file

	def span(self, node: object) -> Span:
		loc = node.meta if isinstance(node, Tree) else node
		return Span.from_loc(loc, file=self.file)

	def build(self, tree: Tree) -> SourceFile:
		out = SourceFile(file=self.file)
		for item in tree.children:
			kind = _name(item)
			if kind == "import_decl":
				out.imports.append(ImportDecl(module=_first_token(item, "NAME").value, loc=self.span(item)))
			elif kind == "func_decl":
				out.functions.append(self.func(item))
			else:
				raise TypeError(f"unexpected top-level node {kind!r}")
		return out

	def func(self, node: Tree) -> FuncDecl:
		params = [
			Param(
				name=_first_token(p, "NAME").value,
				type_ref=self.type_ref(next(c for c in p.children if _name(c) == "type_ref")),
				loc=self.span(p),
			)
			for p in node.children
			if _name(p) == "param"
		]
		body = next(c for c in node.children if _name(c) == "block")
		return FuncDecl(name=_first_token(node, "NAME").value, params=params, body=self.block(body), loc=self.span(node))

	def type_ref(self, node: Tree) -> TypeRef:
		optional = any(isinstance(c, Token) and c.type == "OPT_MARK" for c in node.children)
		return TypeRef(name=_first_token(node, "NAME").value, optional=optional, loc=self.span(node))

	def block(self, node: Tree) -> Block:
		return Block(statements=[self.stmt(s) for s in node.children if isinstance(s, Tree)])

	def stmt(self, node: Tree) -> Stmt:
		kind = _name(node)
		if kind == "var_decl":
			binder = node.children[0]
			type_node = next((c for c in node.children if _name(c) == "type_ref"), None)
			value = next(c for c in node.children[2:] if isinstance(c, Tree) and _name(c) != "type_ref")
			return VarDecl(
				name=node.children[1].value,
				value=self.expr(value),
				type_ref=self.type_ref(type_node) if type_node is not None else None,
				mutable=binder.type == "VAR",
				loc=self.span(node),
			)
		if kind == "if_stmt":
			cond, then_node, *rest = [c for c in node.children if isinstance(c, Tree)]
			else_block: Optional[Block] = None
			if rest:
				tail = rest[0]
				else_block = self.block(tail) if _name(tail) == "block" else Block(statements=[self.stmt(tail)])
			return IfStmt(cond=self.expr(cond), then_block=self.block(then_node), else_block=else_block, loc=self.span(node))
		if kind == "expr_stmt":
			return ExprStmt(expr=self.expr(node.children[0]), loc=self.span(node))
		raise TypeError(f"unexpected statement node {kind!r}")

	def expr(self, node: object) -> Expr:
		kind = _name(node)
		if kind == "name":
			tok = node.children[0]  # type: ignore[union-attr]
			return Name(ident=tok.value, loc=self.span(tok))
		if kind == "nil":
			return NilLiteral(loc=self.span(node.children[0]))  # type: ignore[union-attr]
		if kind in ("member", "opt_member"):
			base, name_tok = node.children[0], node.children[-1]  # type: ignore[union-attr]
			return Member(
				base=self.expr(base),
				member=name_tok.value,
				optional_chain=kind == "opt_member",
				loc=self.span(name_tok),
			)
		if kind == "call":
			callee, *arg_nodes = node.children  # type: ignore[union-attr]
			args: List[Arg] = []
			for arg in arg_nodes:
				label_tok = arg.children[0] if isinstance(arg.children[0], Token) else None
				args.append(Arg(value=self.expr(arg.children[-1]), label=label_tok.value if label_tok else None, loc=self.span(arg)))
			return Call(callee=self.expr(callee), args=args, loc=self.span(node))
		if kind == "paren":
			return Paren(expr=self.expr(node.children[0]), loc=self.span(node))  # type: ignore[union-attr]
		if kind == "force_unwrap":
			return ForceUnwrap(expr=self.expr(node.children[0]), loc=self.span(node.children[-1]))  # type: ignore[union-attr]
		if kind == "compare":
			left, op_tok, right = node.children  # type: ignore[union-attr]
			return Compare(op=op_tok.value, left=self.expr(left), right=self.expr(right), loc=self.span(op_tok))
		raise TypeError(f"unexpected expression node {kind!r}")


def parse_source(source: str, *, file: str | None = None) -> SourceFile:
	"""Parse a source file; raises lark `UnexpectedInput` on syntax errors."""
	tree = _PARSER.parse(source)
	return _SourceBuilder(file).build(tree)


__all__ = ["parse_source"]
