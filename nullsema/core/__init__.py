"""
nullsema.core: shared core types/diagnostics used across stages.

Modules:
  - span: source locations
  - diagnostics: Diagnostic record and the ordered DiagnosticSink
  - nullability: three-valued nullability tags and `combine`
  - types_core: TypeId/TypeTable primitives (classes, Optional<T>, nil)
"""

__all__ = [
	"span",
	"diagnostics",
	"nullability",
	"types_core",
]
