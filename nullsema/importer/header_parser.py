# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-13
"""
Header parser: Objective-C header subset -> ForeignModule.

The grammar (`header.lark`) only recognizes shapes; everything that depends on
context is settled here while walking the tree in declaration order:
- nonnull-audited regions (`NS_ASSUME_NONNULL_BEGIN/END`, `#pragma clang
  assume_nonnull begin/end`) turn unannotated object pointers into NONNULL,
- `instancetype` becomes a pointer to the enclosing class,
- selectors become imported base names plus argument labels.

Syntax errors surface as lark `UnexpectedInput`; semantic problems with the
annotations are returned as diagnostics next to the module.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree

from nullsema.core.diagnostics import Diagnostic
from nullsema.core.nullability import Nullability
from nullsema.core.span import Span
from nullsema.importer.decls import (
	ForeignClass,
	ForeignFunction,
	ForeignMethod,
	ForeignModule,
	ForeignParam,
	ForeignProperty,
	ForeignTypeRef,
)

_GRAMMAR_PATH = Path(__file__).with_name("header.lark")
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


def _tokens(node: Tree, kind: str) -> List[Token]:
	return [c for c in node.children if isinstance(c, Token) and c.type == kind]


def _subtrees(node: Tree, name: str) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree) and c.data == name]


class _HeaderBuilder:
	"""Walks a parsed header tree once, in order, tracking audit state."""

	def __init__(self, module_name: str, file: str | None) -> None:
		self.module = ForeignModule(name=module_name)
		self.file = file
		self.diagnostics: List[Diagnostic] = []
		self._audited = False
		self._audit_loc: Span | None = None

	def build(self, tree: Tree) -> ForeignModule:
		for item in tree.children:
			kind = _name(item)
			if kind == "interface":
				self._interface(item)
			elif kind == "forward_class":
				for tok in _tokens(item, "NAME"):
					if tok.value not in self.module.forward_classes:
						self.module.forward_classes.append(tok.value)
			elif kind == "function_decl":
				self._function(item)
			elif kind in ("audit_begin", "audit_end"):
				self._audit(item)
		if self._audited:
			self._error("'#pragma clang assume_nonnull' was not ended within this file", self._audit_loc)
		return self.module

	def _span(self, node: object) -> Span:
		loc = node.meta if isinstance(node, Tree) else node
		return Span.from_loc(loc, file=self.file)

	def _error(self, message: str, span: Span | None, *, severity: str = "error") -> None:
		self.diagnostics.append(
			Diagnostic(message=message, phase="importer", severity=severity, span=span or Span(file=self.file))
		)

	def _audit(self, node: Tree) -> None:
		begin = _name(node) == "audit_begin"
		if begin and self._audited:
			self._error("already inside '#pragma clang assume_nonnull'", self._span(node))
			return
		if not begin and not self._audited:
			self._error("not currently inside '#pragma clang assume_nonnull'", self._span(node))
			return
		self._audited = begin
		self._audit_loc = self._span(node) if begin else None

	def _type_spec(self, node: Tree, *, enclosing_class: str | None, fallback: Nullability | None = None) -> ForeignTypeRef:
		"""
		Build a ForeignTypeRef from a `type_spec` subtree.

		`fallback` is an annotation supplied from outside the type (a property
		attribute); it applies only when the type spelling carries none.
		"""
		leading: Token | None = None
		trailing: Token | None = None
		spelling: str | None = None
		depth = 0
		for child in node.children:
			if _name(child) == "nullability":
				tok = child.children[0]
				if spelling is None:
					leading = tok
				else:
					trailing = tok
			elif isinstance(child, Token) and child.type == "NAME":
				spelling = child.value
			elif isinstance(child, Token) and child.type == "STAR":
				depth += 1
		if spelling is None:
			raise ValueError("type_spec without a type name (grammar bug)")
		if spelling == "instancetype" and enclosing_class is not None:
			spelling, depth = enclosing_class, 1

		explicit: Nullability | None = None
		if leading is not None and trailing is not None:
			if Nullability.parse(leading.value) is not Nullability.parse(trailing.value):
				self._error(
					f"nullability specifier '{trailing.value}' conflicts with existing specifier '{leading.value}'",
					self._span(trailing),
				)
			explicit = Nullability.parse(trailing.value)
		elif leading is not None or trailing is not None:
			explicit = Nullability.parse((leading or trailing).value)  # type: ignore[union-attr]
		elif fallback is not None:
			explicit = fallback

		ref = ForeignTypeRef(spelling=spelling, pointer_depth=depth)
		if explicit is not None and not ref.is_object:
			tok = leading or trailing
			self._error(
				f"nullability specifier '{tok.value if tok is not None else explicit.spelling()}' cannot be applied to non-pointer type '{spelling}'",
				self._span(tok if tok is not None else node),
			)
			explicit = None
		if explicit is None:
			explicit = Nullability.NONNULL if (self._audited and ref.is_object) else Nullability.UNSPECIFIED
		return ForeignTypeRef(spelling=spelling, pointer_depth=depth, nullability=explicit)

	def _interface(self, node: Tree) -> None:
		name_tok = next(c for c in node.children if isinstance(c, Token) and c.type == "NAME")
		cls = self.module.classes.get(name_tok.value)
		if cls is None:
			cls = ForeignClass(name=name_tok.value, loc=self._span(node))
			self.module.classes[cls.name] = cls
		for sup in _subtrees(node, "superclass"):
			sup_name = _tokens(sup, "NAME")[0].value
			if cls.superclass is not None and cls.superclass != sup_name:
				self._error(f"conflicting superclass for '{cls.name}'", self._span(sup))
			else:
				cls.superclass = sup_name
		for member in node.children:
			kind = _name(member)
			if kind == "method_decl":
				self._method(cls, member)
			elif kind == "property_decl":
				self._property(cls, member)
			elif kind in ("audit_begin", "audit_end"):
				self._audit(member)

	def _method(self, cls: ForeignClass, node: Tree) -> None:
		kind_tok = _tokens(node, "METHOD_KIND")[0]
		result = self._type_spec(_subtrees(node, "type_spec")[0], enclosing_class=cls.name)
		sel = next(c for c in node.children if _name(c) in ("unary_selector", "keyword_selector"))
		params: List[ForeignParam] = []
		if _name(sel) == "unary_selector":
			selector = _tokens(sel, "NAME")[0].value
		else:
			pieces: List[str] = []
			for idx, piece in enumerate(_subtrees(sel, "keyword_piece")):
				piece_tok, param_tok = _tokens(piece, "NAME")
				pieces.append(piece_tok.value)
				ty = self._type_spec(_subtrees(piece, "type_spec")[0], enclosing_class=cls.name)
				params.append(ForeignParam(name=param_tok.value, label=None if idx == 0 else piece_tok.value, type=ty))
			selector = "".join(f"{p}:" for p in pieces)
		method = ForeignMethod(
			class_name=cls.name,
			selector=selector,
			params=tuple(params),
			result=result,
			is_class_method=kind_tok.value == "+",
			audited=self._audited,
			loc=self._span(node),
		)
		if any(m.key == method.key for m in cls.methods):
			self._error(f"duplicate declaration of method '{kind_tok.value}{selector}'", method.loc, severity="warning")
			return
		cls.methods.append(method)

	def _property(self, cls: ForeignClass, node: Tree) -> None:
		attrs: List[str] = []
		attr_nullability: Nullability | None = None
		for attrs_node in _subtrees(node, "prop_attrs"):
			for attr in _subtrees(attrs_node, "prop_attr"):
				child = attr.children[0]
				if _name(child) == "nullability":
					attr_nullability = Nullability.parse(child.children[0].value)
				elif isinstance(child, Token):
					attrs.append(child.value)
		name_tok = [c for c in node.children if isinstance(c, Token) and c.type == "NAME"][-1]
		ty = self._type_spec(_subtrees(node, "type_spec")[0], enclosing_class=cls.name, fallback=attr_nullability)
		prop = ForeignProperty(
			class_name=cls.name,
			name=name_tok.value,
			type=ty,
			readonly="readonly" in attrs,
			is_class_property="class" in attrs,
			audited=self._audited,
			loc=self._span(node),
		)
		if any(p.key == prop.key for p in cls.properties):
			self._error(f"duplicate declaration of property '{prop.name}'", prop.loc, severity="warning")
			return
		cls.properties.append(prop)

	def _function(self, node: Tree) -> None:
		result = self._type_spec(_subtrees(node, "type_spec")[0], enclosing_class=None)
		name_tok = _tokens(node, "NAME")[0]
		params: List[ForeignParam] = []
		for c_param in _subtrees(node, "c_param"):
			ty = self._type_spec(_subtrees(c_param, "type_spec")[0], enclosing_class=None)
			names = _tokens(c_param, "NAME")
			params.append(ForeignParam(name=names[0].value if names else None, label=None, type=ty))
		if len(params) == 1 and params[0].type.is_void and params[0].name is None:
			params = []
		fn = ForeignFunction(
			name=name_tok.value,
			params=tuple(params),
			result=result,
			audited=self._audited,
			loc=self._span(node),
		)
		if fn.name in self.module.functions:
			self._error(f"redeclaration of function '{fn.name}'", fn.loc, severity="warning")
			return
		self.module.functions[fn.name] = fn


def parse_header(source: str, *, module_name: str, file: str | None = None) -> Tuple[ForeignModule, List[Diagnostic]]:
	"""
	Parse header text into a ForeignModule.

	Raises lark `UnexpectedInput` on syntax errors; annotation problems are
	returned as importer-phase diagnostics alongside the module.
	"""
	tree = _PARSER.parse(source)
	builder = _HeaderBuilder(module_name, file)
	module = builder.build(tree)
	return module, builder.diagnostics


__all__ = ["parse_header"]
