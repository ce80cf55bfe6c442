# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-15
"""
nullsema.checker: lifting, optionality checking and diagnostic emission.

Modules, leaves first:
  - lifter: foreign nullability -> LiftedType, ForeignSignature cache
  - optionality: use sites, verdicts and the OptionalityChecker
  - emitter: verdict -> Diagnostic
  - context: per-session CompilationContext and CheckOptions
  - resolver: member/call resolution over imported declarations
  - expr_checker: source walker that classifies use sites and drives the rest
"""

from nullsema.checker.context import CheckOptions, CompilationContext
from nullsema.checker.emitter import DiagnosticEmitter
from nullsema.checker.lifter import (
	ForeignSignature,
	LiftContext,
	LiftedType,
	SignatureCache,
	SignatureLifter,
)
from nullsema.checker.optionality import OptionalityChecker

__all__ = [
	"CheckOptions",
	"CompilationContext",
	"DiagnosticEmitter",
	"ForeignSignature",
	"LiftContext",
	"LiftedType",
	"SignatureCache",
	"SignatureLifter",
	"OptionalityChecker",
]
