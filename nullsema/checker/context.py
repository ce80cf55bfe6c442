# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-16
"""
Compilation context: everything one compilation session owns.

The type table, the lifted-signature cache, the diagnostic sink and the
imported modules all live here and die with the session. The lifter, checker
and emitter receive them from the context instead of reaching for globals, so
two sessions (or two tests) never observe each other's state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from nullsema.core.diagnostics import Diagnostic, DiagnosticSink
from nullsema.core.span import Span
from nullsema.core.types_core import TypeId, TypeKind, TypeTable
from nullsema.importer import import_header_text, import_module
from nullsema.importer.decls import ForeignClass, ForeignFunction, ForeignModule
from nullsema.checker.emitter import DiagnosticEmitter
from nullsema.checker.lifter import SignatureCache, SignatureLifter
from nullsema.checker.optionality import OptionalityChecker

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOptions:
	"""Session configuration (built by the CLI from argparse, or directly by tests)."""

	search_paths: Tuple[Path, ...] = ()
	headers: Tuple[Path, ...] = ()
	# In-memory headers by module name; consulted before the search paths.
	header_sources: Mapping[str, str] = field(default_factory=dict)
	verify: bool = False
	json: bool = False


class CompilationContext:
	def __init__(self, options: Optional[CheckOptions] = None) -> None:
		self.options = options or CheckOptions()
		self.type_table = TypeTable()
		self.sink = DiagnosticSink()
		self.signature_cache = SignatureCache()
		self.lifter = SignatureLifter(self.type_table, self.signature_cache)
		self.checker = OptionalityChecker(self.type_table)
		self.emitter = DiagnosticEmitter(self.type_table, self.sink)
		self.modules: Dict[str, ForeignModule] = {}
		# Classes may be extended by several modules (categories); keep every part.
		self.classes: Dict[str, List[ForeignClass]] = {}
		self.functions: Dict[str, ForeignFunction] = {}

	def add_module(self, module: ForeignModule) -> None:
		"""Make a module's declarations visible and register its class types."""
		if module.name in self.modules:
			return
		self.modules[module.name] = module
		for name in module.forward_classes:
			self._register_class(name, None, Span())
		for cls in module.classes.values():
			sup = self._register_class(cls.superclass, None, cls.loc) if cls.superclass else None
			if self._register_class(cls.name, sup, cls.loc) is None:
				continue
			self.classes.setdefault(cls.name, []).append(cls)
		for fn in module.functions.values():
			self.functions.setdefault(fn.name, fn)
		log.debug("module %s visible (%d classes)", module.name, len(module.classes))

	def _register_class(self, name: str, superclass: Optional[TypeId], span: Span) -> Optional[TypeId]:
		existing = self.type_table.lookup(name)
		if existing is not None and self.type_table.get(existing).kind is not TypeKind.CLASS:
			self.sink.append(
				Diagnostic(
					message=f"'{name}' is declared as a class but is already a value type",
					phase="importer",
					span=span,
				)
			)
			return None
		return self.type_table.ensure_class(name, superclass=superclass)

	def load_module(self, name: str, *, span: Span | None = None) -> Optional[ForeignModule]:
		"""Resolve `import name`: in-memory headers first, then the search paths."""
		existing = self.modules.get(name)
		if existing is not None:
			return existing
		text = self.options.header_sources.get(name)
		if text is not None:
			module = import_header_text(text, module_name=name, sink=self.sink, file=f"{name}.h")
		else:
			module = import_module(name, search_paths=self.options.search_paths, sink=self.sink, span=span)
		if module is not None:
			self.add_module(module)
		return module


__all__ = ["CheckOptions", "CompilationContext"]
