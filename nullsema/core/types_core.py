# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Minimal type core shared by the lifter, resolver and optionality checker.

TypeIds are opaque ints indexing into a TypeTable. TypeKind keeps the universe
small: imported classes, AnyObject, value scalars, Void, Optional<T>, the type
of the `nil` literal, and an error type used to stop diagnostic cascades.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple


TypeId = int  # opaque handle into the TypeTable


class TypeKind(Enum):
	"""Kinds of types understood by the type core."""

	CLASS = auto()
	ANY_OBJECT = auto()
	SCALAR = auto()
	VOID = auto()
	OPTIONAL = auto()
	NIL = auto()
	METATYPE = auto()
	ERROR = auto()


@dataclass(frozen=True)
class TypeDef:
	"""Definition of a type stored in the TypeTable."""

	kind: TypeKind
	name: str
	param_types: Tuple[TypeId, ...] = ()
	superclass: TypeId | None = None  # only meaningful for TypeKind.CLASS


class TypeTable:
	"""
	Type table that owns TypeIds.

	Well-known types are created lazily and cached so every caller sees the same
	TypeId for AnyObject, Void, nil, a given class name, or Optional<T>.
	"""

	def __init__(self) -> None:
		self._defs: Dict[TypeId, TypeDef] = {}
		self._next_id: TypeId = 1  # reserve 0 for "invalid"
		self._by_name: Dict[str, TypeId] = {}
		self._optional_cache: Dict[TypeId, TypeId] = {}
		self._any_object: TypeId | None = None
		self._void: TypeId | None = None
		self._nil: TypeId | None = None
		self._error: TypeId | None = None
		self._metatype_cache: Dict[TypeId, TypeId] = {}

	def get(self, ty: TypeId) -> TypeDef:
		try:
			return self._defs[ty]
		except KeyError:
			raise ValueError(f"unknown TypeId {ty}") from None

	def lookup(self, name: str) -> TypeId | None:
		"""Find a nominal (non-optional) type by its source name."""
		return self._by_name.get(name)

	def ensure_any_object(self) -> TypeId:
		"""Return a stable AnyObject TypeId, creating it once."""
		if self._any_object is None:
			self._any_object = self._add_named(TypeKind.ANY_OBJECT, "AnyObject")
		return self._any_object

	def ensure_void(self) -> TypeId:
		"""Return a stable Void TypeId, creating it once."""
		if self._void is None:
			self._void = self._add_named(TypeKind.VOID, "Void")
		return self._void

	def ensure_nil(self) -> TypeId:
		"""Type of the `nil` literal before it is converted to some Optional<T>."""
		if self._nil is None:
			self._nil = self._add(TypeKind.NIL, "nil")
		return self._nil

	def ensure_error(self) -> TypeId:
		"""Type assigned to expressions that failed resolution."""
		if self._error is None:
			self._error = self._add(TypeKind.ERROR, "<error>")
		return self._error

	def ensure_scalar(self, name: str) -> TypeId:
		"""Register (once) a value type such as Int32 or Bool."""
		existing = self._by_name.get(name)
		if existing is not None:
			return existing
		return self._add_named(TypeKind.SCALAR, name)

	def ensure_class(self, name: str, superclass: TypeId | None = None) -> TypeId:
		"""
		Register (once) an imported class type.

		A later declaration may supply the superclass of a class first seen via a
		forward reference; any other redefinition keeps the first definition.
		"""
		existing = self._by_name.get(name)
		if existing is not None:
			td = self._defs[existing]
			if td.kind is not TypeKind.CLASS:
				raise ValueError(f"type '{name}' is already defined as {td.kind.name}")
			if superclass is not None and td.superclass is None:
				self._defs[existing] = TypeDef(kind=TypeKind.CLASS, name=name, superclass=superclass)
			return existing
		return self._add_named(TypeKind.CLASS, name, superclass=superclass)

	def ensure_optional(self, inner: TypeId) -> TypeId:
		"""Return a stable Optional<inner> TypeId, creating it once."""
		cached = self._optional_cache.get(inner)
		if cached is not None:
			return cached
		ty = self._add(TypeKind.OPTIONAL, "Optional", (inner,))
		self._optional_cache[inner] = ty
		return ty

	def ensure_metatype(self, cls: TypeId) -> TypeId:
		"""Type of a bare class reference (`SomeClass` used as an expression)."""
		cached = self._metatype_cache.get(cls)
		if cached is not None:
			return cached
		ty = self._add(TypeKind.METATYPE, f"{self.get(cls).name}.Type", (cls,))
		self._metatype_cache[cls] = ty
		return ty

	def instance_of_metatype(self, ty: TypeId) -> TypeId | None:
		td = self.get(ty)
		return td.param_types[0] if td.kind is TypeKind.METATYPE else None

	def is_optional(self, ty: TypeId) -> bool:
		return self.get(ty).kind is TypeKind.OPTIONAL

	def is_nil(self, ty: TypeId) -> bool:
		return self.get(ty).kind is TypeKind.NIL

	def is_error(self, ty: TypeId) -> bool:
		return self.get(ty).kind is TypeKind.ERROR

	def is_object(self, ty: TypeId) -> bool:
		"""True for reference types that may be wrapped by foreign nullability."""
		return self.get(ty).kind in (TypeKind.CLASS, TypeKind.ANY_OBJECT)

	def unwrap_optional(self, ty: TypeId) -> TypeId:
		"""Strip one level of Optional; non-optional types are returned as-is."""
		td = self.get(ty)
		if td.kind is TypeKind.OPTIONAL:
			return td.param_types[0]
		return ty

	def superclass_chain(self, ty: TypeId) -> List[TypeId]:
		"""`ty` followed by its superclasses, nearest first."""
		chain: List[TypeId] = []
		cur: Optional[TypeId] = ty
		while cur is not None and cur not in chain:
			chain.append(cur)
			cur = self._defs[cur].superclass if self._defs[cur].kind is TypeKind.CLASS else None
		return chain

	def pretty(self, ty: TypeId) -> str:
		"""User-facing spelling: `SomeClass`, `AnyObject?`, `nil`."""
		td = self.get(ty)
		if td.kind is TypeKind.OPTIONAL:
			return f"{self.pretty(td.param_types[0])}?"
		return td.name

	def _add_named(self, kind: TypeKind, name: str, *, superclass: TypeId | None = None) -> TypeId:
		ty = self._add(kind, name, superclass=superclass)
		self._by_name[name] = ty
		return ty

	def _add(self, kind: TypeKind, name: str, params: Tuple[TypeId, ...] = (), *, superclass: TypeId | None = None) -> TypeId:
		ty_id = self._next_id
		self._next_id += 1
		self._defs[ty_id] = TypeDef(kind=kind, name=name, param_types=tuple(params), superclass=superclass)
		return ty_id


__all__ = ["TypeId", "TypeKind", "TypeDef", "TypeTable"]
