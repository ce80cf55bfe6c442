# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-15
"""
Signature lifter: foreign nullability -> internal optional/non-optional types.

Each imported declaration is lifted once, on first reference, into a
ForeignSignature and cached by declaration identity for the rest of the
compilation session. Whether an element becomes Optional<T> is decided by one
explicit table keyed by (context, annotation); the table is the only place the
property-vs-call asymmetry lives:

  - an UNSPECIFIED call result or parameter lifts to non-optional,
  - an UNSPECIFIED property lifts to optional (unaudited fields are untrusted).

Non-object foreign types (int, BOOL, void, ...) never lift to optional.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from nullsema.core.nullability import Nullability, combine
from nullsema.core.types_core import TypeId, TypeKind, TypeTable
from nullsema.importer.decls import (
	DeclKey,
	ForeignDecl,
	ForeignFunction,
	ForeignMethod,
	ForeignProperty,
	ForeignTypeRef,
)

log = logging.getLogger(__name__)


class LiftContext(Enum):
	"""Where a lifted type sits in its declaration."""

	PARAMETER = auto()
	RESULT = auto()
	PROPERTY = auto()
	RECEIVER = auto()


LIFT_POLICY: Mapping[Tuple[LiftContext, Nullability], bool] = MappingProxyType(
	{
		(LiftContext.PARAMETER, Nullability.NONNULL): False,
		(LiftContext.PARAMETER, Nullability.NULLABLE): True,
		(LiftContext.PARAMETER, Nullability.UNSPECIFIED): False,
		(LiftContext.RESULT, Nullability.NONNULL): False,
		(LiftContext.RESULT, Nullability.NULLABLE): True,
		(LiftContext.RESULT, Nullability.UNSPECIFIED): False,
		(LiftContext.PROPERTY, Nullability.NONNULL): False,
		(LiftContext.PROPERTY, Nullability.NULLABLE): True,
		(LiftContext.PROPERTY, Nullability.UNSPECIFIED): True,
		(LiftContext.RECEIVER, Nullability.NONNULL): False,
		(LiftContext.RECEIVER, Nullability.NULLABLE): True,
		(LiftContext.RECEIVER, Nullability.UNSPECIFIED): False,
	}
)


def lifts_to_optional(context: LiftContext, annotation: Nullability) -> bool:
	"""Table lookup; every (context, annotation) pair is present."""
	return LIFT_POLICY[(context, annotation)]


# Value types that a foreign scalar spelling imports as.
_SCALAR_SPELLINGS: Mapping[str, str] = MappingProxyType(
	{
		"int": "Int32",
		"unsigned": "UInt32",
		"short": "Int16",
		"long": "Int",
		"char": "CChar",
		"float": "Float",
		"double": "Double",
		"bool": "Bool",
		"BOOL": "Bool",
		"NSInteger": "Int",
		"NSUInteger": "UInt",
		"CGFloat": "CGFloat",
	}
)


@dataclass(frozen=True)
class LiftedType:
	"""
	A type reference plus its optional-ness.

	`base` is the unwrapped type, `type` is what expressions of this element
	have (Optional<base> when `is_optional`). `context` is None for types that
	did not come from a foreign declaration (locals, parameters of the checked
	function).
	"""

	base: TypeId
	type: TypeId
	is_optional: bool
	annotation: Nullability
	context: Optional[LiftContext] = None

	@classmethod
	def of_type(cls, type_table: TypeTable, ty: TypeId) -> "LiftedType":
		"""Describe an already-internal type (no foreign annotation involved)."""
		optional = type_table.is_optional(ty)
		return cls(
			base=type_table.unwrap_optional(ty),
			type=ty,
			is_optional=optional,
			annotation=Nullability.NULLABLE if optional else Nullability.NONNULL,
		)


@dataclass(frozen=True)
class LiftedParam:
	label: Optional[str]
	name: Optional[str]
	lifted: LiftedType


@dataclass(frozen=True)
class ForeignSignature:
	"""
	Lifted view of one declaration.

	Callables have `params` and `result`; instance methods also have `receiver`.
	Properties carry their value type in `result` with no params.
	"""

	key: DeclKey
	params: Tuple[LiftedParam, ...]
	result: LiftedType
	receiver: Optional[LiftedType] = None
	is_property: bool = False

	@property
	def value(self) -> LiftedType:
		return self.result


class SignatureCache:
	"""
	Lifted signatures for one compilation session.

	Owned by the CompilationContext and passed to the lifter; nothing is shared
	between sessions. Writes take a lock and never replace an existing entry, so
	racing lifters of the same declaration both end up with the first stored
	signature.
	"""

	def __init__(self) -> None:
		self._entries: Dict[DeclKey, ForeignSignature] = {}
		self._lock = threading.Lock()
		self.hits = 0
		self.misses = 0

	def get(self, key: DeclKey) -> ForeignSignature | None:
		sig = self._entries.get(key)
		if sig is None:
			self.misses += 1
		else:
			self.hits += 1
		return sig

	def put_if_absent(self, key: DeclKey, sig: ForeignSignature) -> ForeignSignature:
		with self._lock:
			existing = self._entries.get(key)
			if existing is not None:
				return existing
			self._entries[key] = sig
			return sig

	def __contains__(self, key: object) -> bool:
		return key in self._entries

	def __len__(self) -> int:
		return len(self._entries)


class SignatureLifter:
	"""Lifts foreign declarations into ForeignSignatures through a SignatureCache."""

	def __init__(self, type_table: TypeTable, cache: SignatureCache) -> None:
		self.type_table = type_table
		self.cache = cache

	def lift(self, decl: ForeignDecl) -> ForeignSignature:
		"""Return the cached signature for `decl`, lifting it on first reference."""
		cached = self.cache.get(decl.key)
		if cached is not None:
			return cached
		sig = self._lift_uncached(decl)
		log.debug("lifted %s", "/".join(decl.key))
		return self.cache.put_if_absent(decl.key, sig)

	def lift_type(self, ref: ForeignTypeRef, context: LiftContext) -> LiftedType:
		base = self.map_type(ref)
		optional = ref.is_object and lifts_to_optional(context, ref.nullability)
		ty = self.type_table.ensure_optional(base) if optional else base
		return LiftedType(base=base, type=ty, is_optional=optional, annotation=ref.nullability, context=context)

	def lift_through(self, member: LiftedType, via: Nullability) -> LiftedType:
		"""
		Re-lift a member reached through a receiver of nullability `via`.

		Reaching a member through an optional chain (`via` NULLABLE) makes the
		result optional whatever the member's own type is.
		"""
		annotation = combine(via, member.annotation)
		if annotation is member.annotation:
			return member
		if member.context is None:
			optional = member.is_optional or via is Nullability.NULLABLE
		elif self.type_table.is_object(member.base) or member.is_optional:
			optional = lifts_to_optional(member.context, annotation)
		else:
			optional = via is Nullability.NULLABLE
		ty = self.type_table.ensure_optional(member.base) if optional else member.base
		return LiftedType(base=member.base, type=ty, is_optional=optional, annotation=annotation, context=member.context)

	def map_type(self, ref: ForeignTypeRef) -> TypeId:
		"""Internal (unwrapped) type for a foreign type spelling."""
		tt = self.type_table
		if ref.pointer_depth == 0:
			if ref.spelling == "id":
				return tt.ensure_any_object()
			if ref.spelling == "void":
				return tt.ensure_void()
			return tt.ensure_scalar(_SCALAR_SPELLINGS.get(ref.spelling, ref.spelling))
		if ref.pointer_depth == 1:
			if ref.spelling == "void":
				return tt.ensure_scalar("UnsafeMutableRawPointer")
			if ref.spelling in _SCALAR_SPELLINGS:
				return tt.ensure_scalar(f"UnsafeMutablePointer<{_SCALAR_SPELLINGS[ref.spelling]}>")
			if ref.spelling == "id":
				return tt.ensure_scalar("AutoreleasingUnsafeMutablePointer<AnyObject?>")
			existing = tt.lookup(ref.spelling)
			if existing is not None and tt.get(existing).kind is not TypeKind.CLASS:
				# Struct or typedef already seen by value.
				return tt.ensure_scalar(f"UnsafeMutablePointer<{tt.pretty(existing)}>")
			return tt.ensure_class(ref.spelling)
		inner = ForeignTypeRef(spelling=ref.spelling, pointer_depth=ref.pointer_depth - 1)
		return tt.ensure_scalar(f"AutoreleasingUnsafeMutablePointer<{tt.pretty(self.map_type(inner))}?>")

	def _lift_uncached(self, decl: ForeignDecl) -> ForeignSignature:
		if isinstance(decl, ForeignProperty):
			return ForeignSignature(
				key=decl.key,
				params=(),
				result=self.lift_type(decl.type, LiftContext.PROPERTY),
				receiver=None if decl.is_class_property else self._receiver(decl.class_name),
				is_property=True,
			)
		if isinstance(decl, (ForeignMethod, ForeignFunction)):
			params = tuple(
				LiftedParam(label=p.label, name=p.name, lifted=self.lift_type(p.type, LiftContext.PARAMETER))
				for p in decl.params
			)
			receiver: LiftedType | None = None
			if isinstance(decl, ForeignMethod) and not decl.is_class_method:
				receiver = self._receiver(decl.class_name)
			return ForeignSignature(
				key=decl.key,
				params=params,
				result=self.lift_type(decl.result, LiftContext.RESULT),
				receiver=receiver,
			)
		raise TypeError(f"cannot lift {type(decl).__name__}")

	def _receiver(self, class_name: str) -> LiftedType:
		# `self` of an instance member is never nil.
		self_ref = ForeignTypeRef(spelling=class_name, pointer_depth=1, nullability=Nullability.NONNULL)
		return self.lift_type(self_ref, LiftContext.RECEIVER)


__all__ = [
	"LiftContext",
	"LIFT_POLICY",
	"lifts_to_optional",
	"LiftedType",
	"LiftedParam",
	"ForeignSignature",
	"SignatureCache",
	"SignatureLifter",
]
