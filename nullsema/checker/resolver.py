# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-16
"""
Member and call resolution over imported declarations.

Rules:
- Members are looked up on the receiver's class, then its superclasses; a
  subclass declaration of the same selector hides the superclass one.
- A call picks the single method/function whose base name and argument labels
  match exactly. There is no overloading on types and no inference-driven
  selection; optionality plays no part in resolution.

Failures raise ResolutionError carrying a user-facing message; the expression
checker turns those into resolve-phase diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from nullsema.core.types_core import TypeId, TypeKind, TypeTable
from nullsema.importer.decls import ForeignFunction, ForeignMethod, ForeignProperty
from nullsema.checker.context import CompilationContext

Labels = Sequence[Optional[str]]


class ResolutionError(ValueError):
	"""Raised when no viable declaration is found; `notes` list the candidates."""

	def __init__(self, message: str, notes: Sequence[str] = ()) -> None:
		super().__init__(message)
		self.notes = list(notes)


def _render_labels(labels: Labels) -> str:
	return "".join(f"{lbl or '_'}:" for lbl in labels)


def _candidate_notes(candidates: Sequence[ForeignMethod | ForeignFunction]) -> List[str]:
	return [f"found candidate '{c.display_name()}'" for c in candidates]


@dataclass(frozen=True)
class CallResolution:
	decl: ForeignMethod | ForeignFunction
	class_side: bool = False


class Resolver:
	def __init__(self, ctx: CompilationContext) -> None:
		self.ctx = ctx

	@property
	def type_table(self) -> TypeTable:
		return self.ctx.type_table

	def _class_names(self, receiver: TypeId) -> List[str]:
		tt = self.type_table
		if tt.get(receiver).kind is not TypeKind.CLASS:
			return []
		return [tt.get(t).name for t in tt.superclass_chain(receiver)]

	def resolve_property(self, receiver: TypeId, name: str, *, class_side: bool = False) -> ForeignProperty:
		for cls_name in self._class_names(receiver):
			for part in self.ctx.classes.get(cls_name, []):
				prop = part.find_property(name, class_side=class_side)
				if prop is not None:
					return prop
		raise ResolutionError(self._no_member(receiver, name, class_side=class_side))

	def resolve_method(self, receiver: TypeId, base_name: str, labels: Labels, *, class_side: bool = False) -> CallResolution:
		candidates: List[ForeignMethod] = []
		seen: set[str] = set()
		for cls_name in self._class_names(receiver):
			for part in self.ctx.classes.get(cls_name, []):
				for method in part.methods_named(base_name, class_side=class_side):
					if method.selector not in seen:
						seen.add(method.selector)
						candidates.append(method)
		if not candidates:
			raise ResolutionError(self._no_member(receiver, base_name, class_side=class_side))
		chosen = self._select(candidates, labels, kind="class method" if class_side else "instance method", name=base_name)
		return CallResolution(decl=chosen, class_side=class_side)

	def resolve_function(self, name: str, labels: Labels) -> CallResolution:
		fn = self.ctx.functions.get(name)
		if fn is None:
			raise ResolutionError(f"cannot find '{name}' in scope")
		return CallResolution(decl=self._select([fn], labels, kind="global function", name=name))

	def _select(self, candidates: List, labels: Labels, *, kind: str, name: str):
		exact = [c for c in candidates if tuple(c.labels) == tuple(labels)]
		if len(exact) == 1:
			return exact[0]
		if len(exact) > 1:
			raise ResolutionError(f"ambiguous use of '{name}'", _candidate_notes(exact))
		if len(candidates) > 1:
			raise ResolutionError(f"no exact matches in call to {kind} '{name}'", _candidate_notes(candidates))
		only = candidates[0]
		expected = tuple(only.labels)
		if len(labels) < len(expected):
			missing = only.params[len(labels)]
			param = f"'{missing.label}'" if missing.label else f"#{len(labels) + 1}"
			raise ResolutionError(f"missing argument for parameter {param} in call")
		if len(labels) > len(expected):
			raise ResolutionError("extra argument in call")
		raise ResolutionError(
			f"incorrect argument labels in call (have '{_render_labels(labels)}', expected '{_render_labels(expected)}')"
		)

	def _no_member(self, receiver: TypeId, name: str, *, class_side: bool) -> str:
		shown = self.type_table.pretty(receiver)
		if class_side:
			shown = f"{shown}.Type"
		return f"value of type '{shown}' has no member '{name}'"


__all__ = ["ResolutionError", "CallResolution", "Resolver"]
