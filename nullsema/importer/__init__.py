# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-13
"""
Foreign-declaration importer.

Turns header text (or a module name resolved on the include path) into a
ForeignModule. Syntax errors are reported as importer-phase diagnostics; the
caller never sees a raw lark exception.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from lark.exceptions import UnexpectedInput

from nullsema.core.diagnostics import Diagnostic, DiagnosticSink, read_error_reason
from nullsema.core.span import Span
from nullsema.importer.decls import ForeignModule
from nullsema.importer.header_parser import parse_header

log = logging.getLogger(__name__)

HEADER_SUFFIX = ".h"


def import_header_text(
	source: str,
	*,
	module_name: str,
	sink: DiagnosticSink,
	file: str | None = None,
) -> Optional[ForeignModule]:
	"""
	Import one header's text.

	Returns None when the header does not parse; annotation diagnostics do not
	prevent the module from being returned.
	"""
	try:
		module, diags = parse_header(source, module_name=module_name, file=file)
	except UnexpectedInput as err:
		sink.append(
			Diagnostic(
				message=f"cannot parse header for module '{module_name}': {err.__class__.__name__}",
				phase="importer",
				severity="error",
				span=Span(file=file, line=getattr(err, "line", None), column=getattr(err, "column", None), raw=err),
			)
		)
		return None
	sink.extend(diags)
	log.debug(
		"imported module %s: %d classes, %d functions",
		module_name,
		len(module.classes),
		len(module.functions),
	)
	return module


def find_header(module_name: str, search_paths: Iterable[Path]) -> Optional[Path]:
	"""First `<module_name>.h` found on the include path, in path order."""
	for root in search_paths:
		candidate = Path(root) / f"{module_name}{HEADER_SUFFIX}"
		if candidate.is_file():
			return candidate
	return None


def import_header_file(path: Path, *, sink: DiagnosticSink, module_name: str | None = None) -> Optional[ForeignModule]:
	"""Import a header from disk; the module name defaults to the file stem."""
	try:
		text = path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as err:
		sink.append(Diagnostic(message=f"cannot read header '{path}': {read_error_reason(err)}", phase="importer", span=Span(file=str(path))))
		return None
	return import_header_text(text, module_name=module_name or path.stem, sink=sink, file=str(path))


def import_module(
	module_name: str,
	*,
	search_paths: Sequence[Path],
	sink: DiagnosticSink,
	span: Span | None = None,
) -> Optional[ForeignModule]:
	"""Resolve `import <module_name>` on the include path and import it."""
	path = find_header(module_name, search_paths)
	if path is None:
		sink.append(Diagnostic(message=f"no such module '{module_name}'", phase="importer", span=span or Span()))
		return None
	log.debug("module %s resolved to %s", module_name, path)
	return import_header_file(path, sink=sink, module_name=module_name)


__all__ = ["import_header_text", "import_header_file", "import_module", "find_header"]
