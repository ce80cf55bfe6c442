# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-13
"""
Foreign declarations produced by the header importer.

These records are what the signature lifter consumes: every parameter, result
and property carries the nullability tag the importer settled on (explicit
annotation, audited-region default, or UNSPECIFIED). They are immutable once
built and are keyed by `key`, the declaration identity used by the lifted
signature cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from nullsema.core.nullability import Nullability
from nullsema.core.span import Span

# Foreign spellings that denote an object reference without a `*`.
OBJECT_SPELLINGS = frozenset({"id", "instancetype"})

DeclKey = Tuple[str, ...]


@dataclass(frozen=True)
class ForeignTypeRef:
	"""A foreign type as written in the header, plus its nullability tag."""

	spelling: str
	pointer_depth: int = 0
	nullability: Nullability = Nullability.UNSPECIFIED

	@property
	def is_object(self) -> bool:
		"""Only object references can be nil; nullability is ignored elsewhere."""
		return self.pointer_depth > 0 or self.spelling in OBJECT_SPELLINGS

	@property
	def is_void(self) -> bool:
		return self.spelling == "void" and self.pointer_depth == 0

	def render(self) -> str:
		stars = " " + "*" * self.pointer_depth if self.pointer_depth else ""
		return f"{self.nullability.spelling()} {self.spelling}{stars}"


@dataclass(frozen=True)
class ForeignParam:
	"""One parameter: `label` is the imported argument label (None = unlabeled)."""

	name: Optional[str]
	label: Optional[str]
	type: ForeignTypeRef


@dataclass(frozen=True)
class ForeignMethod:
	"""An Objective-C method; `selector` is the full `a:b:` spelling."""

	class_name: str
	selector: str
	params: Tuple[ForeignParam, ...]
	result: ForeignTypeRef
	is_class_method: bool = False
	audited: bool = False
	loc: Span = field(default_factory=Span, compare=False)

	@property
	def key(self) -> DeclKey:
		return ("method", self.class_name, "+" if self.is_class_method else "-", self.selector)

	@property
	def base_name(self) -> str:
		return self.selector.split(":", 1)[0]

	@property
	def labels(self) -> Tuple[Optional[str], ...]:
		return tuple(p.label for p in self.params)

	def display_name(self) -> str:
		"""Imported spelling, e.g. `methodF(_:second:)`."""
		if not self.params:
			return f"{self.base_name}()"
		return f"{self.base_name}(" + "".join(f"{lbl or '_'}:" for lbl in self.labels) + ")"


@dataclass(frozen=True)
class ForeignProperty:
	"""An `@property`; the nullability on `type` is the property's own tag."""

	class_name: str
	name: str
	type: ForeignTypeRef
	readonly: bool = False
	is_class_property: bool = False
	audited: bool = False
	loc: Span = field(default_factory=Span, compare=False)

	@property
	def key(self) -> DeclKey:
		return ("property", self.class_name, "+" if self.is_class_property else "-", self.name)


@dataclass(frozen=True)
class ForeignFunction:
	"""A C function declared at file scope."""

	name: str
	params: Tuple[ForeignParam, ...]
	result: ForeignTypeRef
	audited: bool = False
	loc: Span = field(default_factory=Span, compare=False)

	@property
	def key(self) -> DeclKey:
		return ("function", self.name)

	@property
	def base_name(self) -> str:
		return self.name

	@property
	def labels(self) -> Tuple[Optional[str], ...]:
		return tuple(p.label for p in self.params)

	def display_name(self) -> str:
		return f"{self.name}(" + "".join(f"{lbl or '_'}:" for lbl in self.labels) + ")"


ForeignDecl = Union[ForeignMethod, ForeignProperty, ForeignFunction]
ForeignCallable = Union[ForeignMethod, ForeignFunction]


@dataclass
class ForeignClass:
	"""An `@interface` (categories are merged into their class)."""

	name: str
	superclass: Optional[str] = None
	methods: List[ForeignMethod] = field(default_factory=list)
	properties: List[ForeignProperty] = field(default_factory=list)
	loc: Span = field(default_factory=Span)

	def find_property(self, name: str, *, class_side: bool = False) -> ForeignProperty | None:
		for prop in self.properties:
			if prop.name == name and prop.is_class_property == class_side:
				return prop
		return None

	def methods_named(self, base_name: str, *, class_side: bool = False) -> List[ForeignMethod]:
		return [m for m in self.methods if m.base_name == base_name and m.is_class_method == class_side]


@dataclass
class ForeignModule:
	"""Everything one header contributed, in declaration order."""

	name: str
	classes: Dict[str, ForeignClass] = field(default_factory=dict)
	functions: Dict[str, ForeignFunction] = field(default_factory=dict)
	forward_classes: List[str] = field(default_factory=list)


__all__ = [
	"OBJECT_SPELLINGS",
	"DeclKey",
	"ForeignTypeRef",
	"ForeignParam",
	"ForeignMethod",
	"ForeignProperty",
	"ForeignFunction",
	"ForeignDecl",
	"ForeignCallable",
	"ForeignClass",
	"ForeignModule",
]
