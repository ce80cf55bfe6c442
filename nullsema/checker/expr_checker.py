# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-16
"""
Expression walker that drives optionality checking over a source file.

This is the small general type checker the optionality pass sits behind:
- types names, nil, member reads, calls, force unwraps and comparisons,
- resolves members/calls through the Resolver,
- classifies each use site (call argument, nil comparison, initializer),
- asks the OptionalityChecker for a verdict and hands it to the emitter.

Walking is in source order. A call's argument verdicts are collected and
emitted together, in argument order, after anything reported inside the
arguments themselves. An expression that
fails resolution gets the error type, and checks on enclosing expressions treat
that type as already diagnosed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from nullsema.core.diagnostics import Diagnostic
from nullsema.core.nullability import Nullability
from nullsema.core.span import Span
from nullsema.core.types_core import TypeId, TypeKind
from nullsema.frontend import ast as A
from nullsema.checker.context import CompilationContext
from nullsema.checker.lifter import ForeignSignature, LiftedType
from nullsema.checker.optionality import (
	SELF_POSITION,
	CallArgument,
	CallResult,
	EqualityComparison,
	PropertyRead,
	ResultContext,
	UseSite,
	ValueBinding,
	Verdict,
	is_ok,
)
from nullsema.checker.resolver import CallResolution, ResolutionError, Resolver

# Source-level spellings of value types the checked dialect can name directly.
_BUILTIN_VALUE_TYPES = ("Bool", "Int", "Int32", "UInt", "Double", "Float", "String")


class ExprKind(Enum):
	VALUE = auto()
	CALL = auto()
	PROPERTY = auto()
	NIL = auto()
	CLASS_REF = auto()
	ERROR = auto()


@dataclass
class ExprInfo:
	"""Static facts about one typed expression."""

	type: TypeId
	kind: ExprKind = ExprKind.VALUE
	# Lifted element for CALL/PROPERTY results (after optional-chain lifting).
	lifted: Optional[LiftedType] = None
	# For results of an optional chain: the member's own type, before the chain
	# made it optional. A following `.member` continues the chain from here.
	chain_inner: Optional[TypeId] = None


@dataclass
class CheckedSite:
	site: UseSite
	verdict: Verdict
	span: Span


@dataclass
class FunctionCheckResult:
	"""Result of checking one function body."""

	name: str
	expr_types: Dict[int, TypeId] = field(default_factory=dict)  # keyed by id(expr)
	sites: List[CheckedSite] = field(default_factory=list)

	@property
	def verdicts(self) -> List[Verdict]:
		return [s.verdict for s in self.sites]

	@property
	def failures(self) -> List[CheckedSite]:
		return [s for s in self.sites if not is_ok(s.verdict)]


@dataclass
class _Receiver:
	type: TypeId  # unwrapped receiver type used for lookup
	via: Nullability
	class_side: bool
	actual: TypeId  # receiver expression type as written
	span: Span


class FunctionChecker:
	"""Checks function bodies against the declarations visible in a context."""

	def __init__(self, ctx: CompilationContext, resolver: Optional[Resolver] = None) -> None:
		self.ctx = ctx
		self.resolver = resolver or Resolver(ctx)
		tt = ctx.type_table
		self._error = tt.ensure_error()
		self._nil = tt.ensure_nil()
		self._bool = tt.ensure_scalar("Bool")

	def resolve_type_ref(self, ref: A.TypeRef) -> TypeId:
		"""Map a source type spelling to a TypeId (error type if unknown)."""
		tt = self.ctx.type_table
		ty = tt.lookup(ref.name)
		if ty is None:
			if ref.name == "AnyObject":
				ty = tt.ensure_any_object()
			elif ref.name == "Void":
				ty = tt.ensure_void()
			elif ref.name in _BUILTIN_VALUE_TYPES:
				ty = tt.ensure_scalar(ref.name)
			else:
				self._diag(f"cannot find type '{ref.name}' in scope", ref.loc, phase="resolve")
				return self._error
		return tt.ensure_optional(ty) if ref.optional else ty

	def _diag(self, message: str, span: Span, *, phase: str, code: str | None = None, notes: List[str] | None = None) -> None:
		self.ctx.sink.append(
			Diagnostic(message=message, code=code, phase=phase, severity="error", span=span, notes=list(notes or []))
		)

	def check_function(self, fn: A.FuncDecl) -> FunctionCheckResult:
		ctx = self.ctx
		tt = ctx.type_table
		result = FunctionCheckResult(name=fn.name)
		scopes: List[Dict[str, TypeId]] = [{}]

		def record_expr(expr: A.Expr, info: ExprInfo) -> ExprInfo:
			result.expr_types[id(expr)] = info.type
			return info

		def error_info(expr: A.Expr) -> ExprInfo:
			return record_expr(expr, ExprInfo(type=self._error, kind=ExprKind.ERROR))

		def lookup(name: str) -> TypeId | None:
			for scope in reversed(scopes):
				if name in scope:
					return scope[name]
			return None

		def declare(name: str, ty: TypeId, span: Span) -> None:
			if name in scopes[-1]:
				self._diag(f"invalid redeclaration of '{name}'", span, phase="resolve")
			scopes[-1][name] = ty

		def run(site: UseSite, actual: TypeId | None, span: Span) -> Verdict:
			verdict = ctx.checker.check(site, actual)
			result.sites.append(CheckedSite(site=site, verdict=verdict, span=span))
			ctx.emitter.emit(verdict, span)
			return verdict

		def receiver_of(base_expr: A.Expr, optional_chain: bool) -> _Receiver | None:
			base = type_expr(base_expr)
			if base.kind is ExprKind.ERROR:
				return None
			if base.kind is ExprKind.CLASS_REF:
				cls = tt.instance_of_metatype(base.type)
				if optional_chain:
					self._diag(
						f"cannot use optional chaining on non-optional value of type '{tt.pretty(base.type)}'",
						base_expr.loc,
						phase="typecheck",
					)
				return _Receiver(type=cls, via=Nullability.NONNULL, class_side=True, actual=cls, span=base_expr.loc)
			if base.chain_inner is not None:
				# Continuing an optional chain: look through the chain's wrapping.
				inner = base.chain_inner
				if optional_chain:
					if not tt.is_optional(inner):
						self._diag(
							f"cannot use optional chaining on non-optional value of type '{tt.pretty(inner)}'",
							base_expr.loc,
							phase="typecheck",
						)
					return _Receiver(type=tt.unwrap_optional(inner), via=Nullability.NULLABLE, class_side=False, actual=tt.unwrap_optional(inner), span=base_expr.loc)
				return _Receiver(type=tt.unwrap_optional(inner), via=Nullability.NULLABLE, class_side=False, actual=inner, span=base_expr.loc)
			if optional_chain:
				if not tt.is_optional(base.type):
					self._diag(
						f"cannot use optional chaining on non-optional value of type '{tt.pretty(base.type)}'",
						base_expr.loc,
						phase="typecheck",
					)
					return _Receiver(type=base.type, via=Nullability.NONNULL, class_side=False, actual=base.type, span=base_expr.loc)
				return _Receiver(type=tt.unwrap_optional(base.type), via=Nullability.NULLABLE, class_side=False, actual=tt.unwrap_optional(base.type), span=base_expr.loc)
			return _Receiver(type=tt.unwrap_optional(base.type), via=Nullability.NONNULL, class_side=False, actual=base.type, span=base_expr.loc)

		def check_receiver(recv: _Receiver, sig: ForeignSignature) -> None:
			if sig.receiver is None:
				return
			if tt.is_optional(recv.actual) or tt.is_nil(recv.actual):
				run(CallArgument(position=SELF_POSITION, expected=sig.receiver), recv.actual, recv.span)

		def member_result(sig: ForeignSignature, via: Nullability) -> tuple[LiftedType, TypeId | None]:
			lifted = ctx.lifter.lift_through(sig.result, via)
			inner = sig.result.type if via is Nullability.NULLABLE else None
			return lifted, inner

		def type_args(args: List[A.Arg]) -> None:
			for arg in args:
				type_expr(arg.value)

		def type_call(expr: A.Call) -> ExprInfo:
			labels = [a.label for a in expr.args]
			callee = expr.callee
			recv: _Receiver | None = None
			res: CallResolution
			if isinstance(callee, A.Member):
				recv = receiver_of(callee.base, callee.optional_chain)
				if recv is None:
					type_args(expr.args)
					return error_info(expr)
				try:
					res = self.resolver.resolve_method(recv.type, callee.member, labels, class_side=recv.class_side)
				except ResolutionError as err:
					self._diag(str(err), callee.loc, phase="resolve", notes=err.notes)
					type_args(expr.args)
					return error_info(expr)
			elif isinstance(callee, A.Name) and lookup(callee.ident) is None:
				try:
					res = self.resolver.resolve_function(callee.ident, labels)
				except ResolutionError as err:
					self._diag(str(err), callee.loc, phase="resolve", notes=err.notes)
					type_args(expr.args)
					return error_info(expr)
			else:
				callee_info = type_expr(callee)
				if callee_info.kind is not ExprKind.ERROR:
					self._diag(
						f"cannot call value of non-function type '{tt.pretty(callee_info.type)}'",
						callee.loc,
						phase="resolve",
					)
				type_args(expr.args)
				return error_info(expr)

			sig = ctx.lifter.lift(res.decl)
			if recv is not None:
				check_receiver(recv, sig)
			# Every position is checked, then the verdicts are emitted together in
			# argument order.
			pairs = [
				(CallArgument(position=position, expected=param.lifted, label=param.label), type_expr(arg.value).type)
				for position, (arg, param) in enumerate(zip(expr.args, sig.params))
			]
			verdicts = ctx.checker.check_arguments(pairs)
			spans = [arg.value.loc for arg in expr.args]
			for (site, _), verdict, span in zip(pairs, verdicts, spans):
				result.sites.append(CheckedSite(site=site, verdict=verdict, span=span))
			ctx.emitter.emit_all(zip(verdicts, spans))
			via = recv.via if recv is not None else Nullability.NONNULL
			lifted, inner = member_result(sig, via)
			return record_expr(expr, ExprInfo(type=lifted.type, kind=ExprKind.CALL, lifted=lifted, chain_inner=inner))

		def type_member(expr: A.Member) -> ExprInfo:
			recv = receiver_of(expr.base, expr.optional_chain)
			if recv is None:
				return error_info(expr)
			try:
				prop = self.resolver.resolve_property(recv.type, expr.member, class_side=recv.class_side)
			except ResolutionError as err:
				self._diag(str(err), expr.loc, phase="resolve")
				return error_info(expr)
			sig = ctx.lifter.lift(prop)
			check_receiver(recv, sig)
			lifted, inner = member_result(sig, recv.via)
			return record_expr(expr, ExprInfo(type=lifted.type, kind=ExprKind.PROPERTY, lifted=lifted, chain_inner=inner))

		def type_compare(expr: A.Compare) -> ExprInfo:
			left = type_expr(expr.left)
			right = type_expr(expr.right)
			left_nil = left.kind is ExprKind.NIL
			right_nil = right.kind is ExprKind.NIL
			if left_nil != right_nil:
				subject = right if left_nil else left
				if subject.kind is ExprKind.CALL and subject.lifted is not None:
					run(CallResult(expected=subject.lifted, context=ResultContext.NIL_COMPARISON, op=expr.op), None, expr.loc)
				elif subject.kind is not ExprKind.ERROR:
					lhs = subject.lifted or LiftedType.of_type(tt, subject.type)
					run(EqualityComparison(lhs=lhs, rhs_is_nil=True, op=expr.op), None, expr.loc)
			return record_expr(expr, ExprInfo(type=self._bool))

		def type_expr(expr: A.Expr) -> ExprInfo:
			if isinstance(expr, A.Name):
				ty = lookup(expr.ident)
				if ty is not None:
					return record_expr(expr, ExprInfo(type=ty))
				cls = tt.lookup(expr.ident)
				if cls is not None and tt.get(cls).kind is TypeKind.CLASS:
					return record_expr(expr, ExprInfo(type=tt.ensure_metatype(cls), kind=ExprKind.CLASS_REF))
				self._diag(f"cannot find '{expr.ident}' in scope", expr.loc, phase="resolve")
				return error_info(expr)
			if isinstance(expr, A.NilLiteral):
				return record_expr(expr, ExprInfo(type=self._nil, kind=ExprKind.NIL))
			if isinstance(expr, A.Member):
				return type_member(expr)
			if isinstance(expr, A.Call):
				return type_call(expr)
			if isinstance(expr, A.Paren):
				inner = type_expr(expr.expr)
				# Parentheses end an optional chain; a member read off the result
				# sees the optional type and must unwrap it.
				return record_expr(expr, ExprInfo(type=inner.type, kind=inner.kind, lifted=inner.lifted))
			if isinstance(expr, A.ForceUnwrap):
				inner = type_expr(expr.expr)
				if inner.kind is ExprKind.ERROR:
					return error_info(expr)
				if inner.kind is ExprKind.NIL:
					self._diag("'nil' literal cannot be force unwrapped", expr.loc, phase="typecheck", code="E-FORCE-UNWRAP")
					return error_info(expr)
				if not tt.is_optional(inner.type):
					self._diag(
						f"cannot force unwrap value of non-optional type '{tt.pretty(inner.type)}'",
						expr.loc,
						phase="typecheck",
						code="E-FORCE-UNWRAP",
					)
					return record_expr(expr, ExprInfo(type=inner.type))
				return record_expr(expr, ExprInfo(type=tt.unwrap_optional(inner.type)))
			if isinstance(expr, A.Compare):
				return type_compare(expr)
			raise TypeError(f"unexpected expression {type(expr).__name__}")

		def type_var_decl(stmt: A.VarDecl) -> None:
			declared = self.resolve_type_ref(stmt.type_ref) if stmt.type_ref is not None else None
			info = type_expr(stmt.value)
			span = stmt.value.loc
			if declared is None:
				if info.kind is ExprKind.NIL:
					self._diag("'nil' requires a contextual type", span, phase="typecheck")
					declare(stmt.name, self._error, stmt.loc)
				else:
					declare(stmt.name, info.type, stmt.loc)
				return
			if info.kind is ExprKind.CALL and info.lifted is not None:
				run(CallResult(expected=info.lifted, context=ResultContext.BINDING, binding_type=declared), info.type, span)
			elif info.kind is ExprKind.PROPERTY and info.lifted is not None:
				run(PropertyRead(expected=info.lifted, binding_type=declared), info.type, span)
			elif info.kind is not ExprKind.ERROR:
				run(ValueBinding(binding_type=declared), info.type, span)
			declare(stmt.name, declared, stmt.loc)

		def type_block(block: A.Block) -> None:
			scopes.append({})
			try:
				for stmt in block.statements:
					type_stmt(stmt)
			finally:
				scopes.pop()

		def type_stmt(stmt: A.Stmt) -> None:
			if isinstance(stmt, A.VarDecl):
				type_var_decl(stmt)
			elif isinstance(stmt, A.IfStmt):
				type_expr(stmt.cond)
				type_block(stmt.then_block)
				if stmt.else_block is not None:
					type_block(stmt.else_block)
			elif isinstance(stmt, A.ExprStmt):
				info = type_expr(stmt.expr)
				if info.kind is ExprKind.CALL and info.lifted is not None:
					run(CallResult(expected=info.lifted, context=ResultContext.DISCARDED), info.type, stmt.expr.loc)
			else:
				raise TypeError(f"unexpected statement {type(stmt).__name__}")

		for param in fn.params:
			declare(param.name, self.resolve_type_ref(param.type_ref), param.loc)
		type_block(fn.body)
		return result


def check_source_file(ctx: CompilationContext, source: A.SourceFile) -> List[FunctionCheckResult]:
	"""Load the file's imports into `ctx`, then check every function in order."""
	for imp in source.imports:
		ctx.load_module(imp.module, span=imp.loc)
	checker = FunctionChecker(ctx)
	return [checker.check_function(fn) for fn in source.functions]


__all__ = [
	"ExprKind",
	"ExprInfo",
	"CheckedSite",
	"FunctionCheckResult",
	"FunctionChecker",
	"check_source_file",
]
