# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Three-valued nullability annotations attached to foreign type references.

The three tags are disjoint, not a numeric order. The only algebra is
`combine`, used when a value is reached through a chain (receiver, then
member): NULLABLE absorbs everything, UNSPECIFIED absorbs NONNULL.
"""

from __future__ import annotations

from enum import Enum, auto


class Nullability(Enum):
	"""Nullability tag of one foreign declaration element."""

	NONNULL = auto()
	NULLABLE = auto()
	UNSPECIFIED = auto()

	@classmethod
	def parse(cls, spelling: str | None) -> "Nullability":
		"""
		Map a header spelling to a tag.

		Absent or unrecognized spellings degrade to UNSPECIFIED rather than
		failing; malformed metadata is never an error.
		"""
		if spelling is None:
			return cls.UNSPECIFIED
		return _SPELLINGS.get(spelling.strip(), cls.UNSPECIFIED)

	def spelling(self) -> str:
		"""Canonical keyword spelling (`nonnull`, `nullable`, `null_unspecified`)."""
		return _CANONICAL[self]


_SPELLINGS = {
	"nonnull": Nullability.NONNULL,
	"_Nonnull": Nullability.NONNULL,
	"__nonnull": Nullability.NONNULL,
	"nullable": Nullability.NULLABLE,
	"_Nullable": Nullability.NULLABLE,
	"__nullable": Nullability.NULLABLE,
	"null_unspecified": Nullability.UNSPECIFIED,
	"_Null_unspecified": Nullability.UNSPECIFIED,
	"__null_unspecified": Nullability.UNSPECIFIED,
}

_CANONICAL = {
	Nullability.NONNULL: "nonnull",
	Nullability.NULLABLE: "nullable",
	Nullability.UNSPECIFIED: "null_unspecified",
}


def combine(a: Nullability, b: Nullability) -> Nullability:
	"""Nullability of a value reached through `a` then `b`."""
	if a is Nullability.NULLABLE or b is Nullability.NULLABLE:
		return Nullability.NULLABLE
	if a is Nullability.UNSPECIFIED or b is Nullability.UNSPECIFIED:
		return Nullability.UNSPECIFIED
	return Nullability.NONNULL


__all__ = ["Nullability", "combine"]
