# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-15
"""
Optionality checker.

Runs once per use site, after the call or member access has been resolved to a
single declaration. Each check returns a Verdict value instead of raising, so a
caller checking a whole call gathers one verdict per position and reports every
failing one; a failure never stops the checks of sibling positions.

Use-site classification is syntactic and done by the caller before any check:
call argument, `== nil` comparison, or variable initializer. Each expression
has exactly one classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple, Union

from nullsema.core.types_core import TypeId, TypeTable
from nullsema.checker.lifter import LiftedType

# Argument position of the receiver of a member call.
SELF_POSITION = -1


class ResultContext(Enum):
	"""How a call result is consumed."""

	NIL_COMPARISON = auto()  # `f() == nil`
	BINDING = auto()  # `var x: T = f()`
	DISCARDED = auto()  # expression statement


# Use sites

@dataclass(frozen=True)
class CallArgument:
	position: int  # 0-based; SELF_POSITION for the receiver
	expected: LiftedType
	label: Optional[str] = None


@dataclass(frozen=True)
class CallResult:
	expected: LiftedType
	context: ResultContext
	op: str = "=="
	binding_type: Optional[TypeId] = None


@dataclass(frozen=True)
class PropertyRead:
	expected: LiftedType
	binding_type: Optional[TypeId] = None  # None: binding type is inferred


@dataclass(frozen=True)
class EqualityComparison:
	lhs: LiftedType
	rhs_is_nil: bool
	op: str = "=="


@dataclass(frozen=True)
class ValueBinding:
	"""Initializer whose value is neither a call nor a property read."""

	binding_type: TypeId


UseSite = Union[CallArgument, CallResult, PropertyRead, EqualityComparison, ValueBinding]


# Verdicts

@dataclass(frozen=True)
class Ok:
	pass


OK = Ok()


@dataclass(frozen=True)
class RequiresUnwrap:
	reason: str
	actual_type: TypeId  # the optional type that needs unwrapping


@dataclass(frozen=True)
class IncomparableTypes:
	lhs_type: TypeId
	op: str = "=="
	rhs_kind: str = "nil"


@dataclass(frozen=True)
class CannotInvoke:
	op: str
	lhs_type: TypeId
	rhs_kind: str = "nil"


@dataclass(frozen=True)
class NilNotCompatible:
	expected_type: TypeId
	context: str  # "argument" or "binding"


Verdict = Union[Ok, RequiresUnwrap, IncomparableTypes, CannotInvoke, NilNotCompatible]


def is_ok(verdict: Verdict) -> bool:
	return isinstance(verdict, Ok)


class OptionalityChecker:
	"""Pure checks over lifted types; holds no state besides the type table."""

	def __init__(self, type_table: TypeTable) -> None:
		self.type_table = type_table

	def _skip(self, ty: TypeId | None) -> bool:
		# Expressions that already failed resolution are not re-diagnosed.
		return ty is None or self.type_table.is_error(ty)

	def check_argument(self, position: int, expected: LiftedType, actual: TypeId) -> Verdict:
		"""An argument (or receiver, at SELF_POSITION) flowing into `expected`."""
		tt = self.type_table
		if self._skip(actual):
			return OK
		if tt.is_nil(actual):
			return OK if expected.is_optional else NilNotCompatible(expected.type, "argument")
		if not expected.is_optional and tt.is_optional(actual):
			reason = "optional receiver of member access" if position == SELF_POSITION else "optional argument into non-optional parameter"
			return RequiresUnwrap(reason, actual)
		return OK

	def check_arguments(self, args: Sequence[Tuple[CallArgument, TypeId]]) -> List[Verdict]:
		"""Check every position independently; one verdict per position, in order."""
		return [self.check_argument(site.position, site.expected, actual) for site, actual in args]

	def check_result(
		self,
		expected: LiftedType,
		context: ResultContext,
		*,
		op: str = "==",
		binding_type: TypeId | None = None,
	) -> Verdict:
		"""A call result consumed by a nil comparison, a binding, or discarded."""
		if context is ResultContext.NIL_COMPARISON:
			if expected.is_optional or self._skip(expected.type):
				return OK
			return CannotInvoke(op, expected.type)
		if context is ResultContext.BINDING:
			if binding_type is None or self._skip(binding_type):
				return OK
			if expected.is_optional and not self.type_table.is_optional(binding_type):
				return RequiresUnwrap("optional call result bound to non-optional variable", expected.type)
			return OK
		return OK

	def check_property_read(self, expected: LiftedType, binding_type: TypeId | None) -> Verdict:
		"""A property value initializing a binding of `binding_type` (None: inferred)."""
		if binding_type is None or self._skip(binding_type):
			return OK
		if expected.is_optional and not self.type_table.is_optional(binding_type):
			return RequiresUnwrap("optional property value bound to non-optional variable", expected.type)
		return OK

	def check_equality_comparison(self, lhs: LiftedType, rhs_is_nil: bool, op: str = "==") -> Verdict:
		"""
		`lhs == nil` is valid iff lhs is optional.

		Comparisons against anything other than a nil literal are not an
		optionality question and are always Ok here.
		"""
		if not rhs_is_nil or self._skip(lhs.type):
			return OK
		if lhs.is_optional:
			return OK
		return IncomparableTypes(lhs.type, op)

	def check_value_binding(self, actual: TypeId, binding_type: TypeId) -> Verdict:
		tt = self.type_table
		if self._skip(actual) or self._skip(binding_type):
			return OK
		binding_optional = tt.is_optional(binding_type)
		if tt.is_nil(actual):
			return OK if binding_optional else NilNotCompatible(binding_type, "binding")
		if tt.is_optional(actual) and not binding_optional:
			return RequiresUnwrap("optional value bound to non-optional variable", actual)
		return OK

	def check(self, site: UseSite, actual: TypeId | None = None) -> Verdict:
		"""Dispatch on the use-site variant; `actual` is needed for argument and value sites."""
		if isinstance(site, CallArgument):
			if actual is None:
				raise ValueError("argument check needs the actual argument type")
			return self.check_argument(site.position, site.expected, actual)
		if isinstance(site, CallResult):
			return self.check_result(site.expected, site.context, op=site.op, binding_type=site.binding_type)
		if isinstance(site, PropertyRead):
			return self.check_property_read(site.expected, site.binding_type)
		if isinstance(site, EqualityComparison):
			return self.check_equality_comparison(site.lhs, site.rhs_is_nil, site.op)
		if isinstance(site, ValueBinding):
			if actual is None:
				raise ValueError("value binding check needs the actual value type")
			return self.check_value_binding(actual, site.binding_type)
		raise TypeError(f"unknown use site {type(site).__name__}")


__all__ = [
	"SELF_POSITION",
	"ResultContext",
	"CallArgument",
	"CallResult",
	"PropertyRead",
	"EqualityComparison",
	"ValueBinding",
	"UseSite",
	"Ok",
	"OK",
	"RequiresUnwrap",
	"IncomparableTypes",
	"CannotInvoke",
	"NilNotCompatible",
	"Verdict",
	"is_ok",
	"OptionalityChecker",
]
