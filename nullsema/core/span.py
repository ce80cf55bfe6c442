# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Lightweight source span representation used by diagnostics.

A Span carries best-effort file/line/column info plus the raw parser location
object (a lark Token or tree meta) so richer renderers can recover more.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: str | None = None) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span it is returned unchanged (re-filed when `file`
		is given and the span has none); otherwise common location fields are
		extracted and the parser-specific object is stored in `raw`.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if file is not None and loc.file is None:
				return cls(
					file=file,
					line=loc.line,
					column=loc.column,
					end_line=loc.end_line,
					end_column=loc.end_column,
					raw=loc.raw,
				)
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def sort_key(self) -> tuple[int, int]:
		"""Order spans by (line, column); unknown positions sort last."""
		return (
			self.line if self.line is not None else 1 << 30,
			self.column if self.column is not None else 1 << 30,
		)

	def render(self) -> str:
		"""`line:column` with `?` for unknown parts."""
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{line}:{column}"


__all__ = ["Span"]
