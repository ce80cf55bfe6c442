# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-14
"""
AST for the checked source dialect.

Nodes are purely syntactic; names, members and calls are resolved later by the
checker. Every node carries a Span so diagnostics can point at the offending
expression.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from nullsema.core.span import Span


@dataclass
class TypeRef:
	name: str
	optional: bool = False
	loc: Span = field(default_factory=Span)

	def render(self) -> str:
		return f"{self.name}?" if self.optional else self.name


class Expr:
	"""Base class for expressions."""

	loc: Span


@dataclass
class Name(Expr):
	ident: str
	loc: Span = field(default_factory=Span)


@dataclass
class NilLiteral(Expr):
	loc: Span = field(default_factory=Span)


@dataclass
class Member(Expr):
	"""`base.member`, or `base?.member` when `optional_chain` is set."""

	base: Expr
	member: str
	optional_chain: bool = False
	loc: Span = field(default_factory=Span)


@dataclass
class Arg:
	value: Expr
	label: Optional[str] = None
	loc: Span = field(default_factory=Span)


@dataclass
class Call(Expr):
	callee: Expr
	args: List[Arg] = field(default_factory=list)
	loc: Span = field(default_factory=Span)


@dataclass
class Paren(Expr):
	"""A parenthesized expression; ends any optional chain inside it."""

	expr: Expr
	loc: Span = field(default_factory=Span)


@dataclass
class ForceUnwrap(Expr):
	expr: Expr
	loc: Span = field(default_factory=Span)


@dataclass
class Compare(Expr):
	"""`left == right` / `left != right`; `loc` is the operator."""

	op: str
	left: Expr
	right: Expr
	loc: Span = field(default_factory=Span)


class Stmt:
	"""Base class for statements."""

	loc: Span


@dataclass
class Block:
	statements: List[Stmt] = field(default_factory=list)


@dataclass
class VarDecl(Stmt):
	name: str
	value: Expr
	type_ref: Optional[TypeRef] = None
	mutable: bool = True
	loc: Span = field(default_factory=Span)


@dataclass
class IfStmt(Stmt):
	cond: Expr
	then_block: Block
	else_block: Optional[Block] = None
	loc: Span = field(default_factory=Span)


@dataclass
class ExprStmt(Stmt):
	expr: Expr
	loc: Span = field(default_factory=Span)


@dataclass
class Param:
	name: str
	type_ref: TypeRef
	loc: Span = field(default_factory=Span)


@dataclass
class FuncDecl:
	name: str
	params: List[Param]
	body: Block
	loc: Span = field(default_factory=Span)


@dataclass
class ImportDecl:
	module: str
	loc: Span = field(default_factory=Span)


@dataclass
class SourceFile:
	imports: List[ImportDecl] = field(default_factory=list)
	functions: List[FuncDecl] = field(default_factory=list)
	file: Optional[str] = None


__all__ = [
	"TypeRef",
	"Expr",
	"Name",
	"NilLiteral",
	"Member",
	"Arg",
	"Call",
	"Paren",
	"ForceUnwrap",
	"Compare",
	"Stmt",
	"Block",
	"VarDecl",
	"IfStmt",
	"ExprStmt",
	"Param",
	"FuncDecl",
	"ImportDecl",
	"SourceFile",
]
