# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Common diagnostic structure for importer/parser/checker passes.

A Diagnostic is a message plus an optional code, phase label and span. Passes
append into a DiagnosticSink, which preserves emission order; the driver and
the verify harness consume the sink in that order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Phase label (importer, parser, resolve, typecheck, verify). Passes that emit
	# through a sink created for a single phase may leave this unset and let the
	# sink stamp it.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


class DiagnosticSink:
	"""
	Ordered, append-only diagnostic stream for one compilation.

	Nothing is ever removed or reordered: consumers rely on records coming out in
	the order checks ran, which is source order within a compilation unit.
	"""

	def __init__(self, *, default_phase: str | None = None) -> None:
		self._items: List[Diagnostic] = []
		self.default_phase = default_phase

	def append(self, diag: Diagnostic) -> None:
		if diag.phase is None and self.default_phase is not None:
			diag.phase = self.default_phase
		self._items.append(diag)

	def extend(self, diags: Iterable[Diagnostic]) -> None:
		for diag in diags:
			self.append(diag)

	def error(self, message: str, *, span: Span | None = None, code: str | None = None, phase: str | None = None) -> Diagnostic:
		"""Convenience helper: build and append an error diagnostic."""
		diag = Diagnostic(message=message, code=code, phase=phase, severity="error", span=span or Span())
		self.append(diag)
		return diag

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self._items)

	def for_phase(self, phase: str) -> list[Diagnostic]:
		return [d for d in self._items if d.phase == phase]

	def as_list(self) -> list[Diagnostic]:
		return list(self._items)

	def __iter__(self) -> Iterator[Diagnostic]:
		return iter(list(self._items))

	def __len__(self) -> int:
		return len(self._items)


def read_error_reason(err: OSError | UnicodeDecodeError) -> str:
	"""Short reason for a source or header file that could not be read."""
	if isinstance(err, UnicodeDecodeError):
		return f"invalid UTF-8 at byte {err.start}"
	return err.strerror or str(err)


__all__ = ["Diagnostic", "DiagnosticSink", "read_error_reason"]
