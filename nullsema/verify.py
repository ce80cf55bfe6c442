# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-17
"""
`-verify` mode: match emitted diagnostics against expectation comments.

A source line may carry any number of expectations:

	sc.methodE(osc) // expected-error{{value of optional type 'SomeClass?' not unwrapped}}

`expected-error`, `expected-warning` and `expected-note` are recognized. An
optional `@+N` / `@-N` suffix moves the expectation N lines relative to the
comment, `@N` pins it to line N. A diagnostic satisfies an expectation when it
is on that line of the same file with the same severity and the expected text
is a substring of its message. Every expectation must be satisfied by a
distinct diagnostic and every diagnostic must satisfy an expectation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from nullsema.core.diagnostics import Diagnostic
from nullsema.core.span import Span

_EXPECT_RE = re.compile(
	r"expected-(?P<severity>error|warning|note)(?:@(?P<offset>[+-]?\d+))?\s*\{\{(?P<text>.*?)\}\}"
)


@dataclass(frozen=True)
class Expectation:
	severity: str
	line: int
	text: str
	comment_line: int


@dataclass
class VerifyResult:
	matched: List[tuple[Expectation, Diagnostic]] = field(default_factory=list)
	missing: List[Expectation] = field(default_factory=list)
	unexpected: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not self.missing and not self.unexpected

	def problems(self, *, file: str | None = None) -> List[Diagnostic]:
		"""Verify-phase diagnostics describing every mismatch, in line order."""
		out: List[Diagnostic] = []
		for exp in self.missing:
			out.append(
				Diagnostic(
					message=f"expected {exp.severity} not produced: {{{{{exp.text}}}}}",
					phase="verify",
					span=Span(file=file, line=exp.line),
				)
			)
		for diag in self.unexpected:
			out.append(
				Diagnostic(
					message=f"unexpected {diag.severity} produced: {diag.message}",
					phase="verify",
					span=Span(file=diag.span.file or file, line=diag.span.line, column=diag.span.column),
				)
			)
		out.sort(key=lambda d: d.span.sort_key())
		return out


def parse_expectations(source: str) -> List[Expectation]:
	"""Collect expectation comments in source order."""
	out: List[Expectation] = []
	for lineno, line in enumerate(source.splitlines(), start=1):
		comment = line.find("//")
		if comment < 0:
			continue
		for m in _EXPECT_RE.finditer(line, comment):
			offset = m.group("offset")
			if offset is None:
				target = lineno
			elif offset[0] in "+-":
				target = lineno + int(offset)
			else:
				target = int(offset)
			out.append(Expectation(severity=m.group("severity"), line=target, text=m.group("text"), comment_line=lineno))
	return out


def verify_diagnostics(
	expectations: Iterable[Expectation],
	diagnostics: Iterable[Diagnostic],
	*,
	file: Optional[str] = None,
) -> VerifyResult:
	"""
	Match expectations to diagnostics.

	Diagnostics located in another file (e.g. a header) can never satisfy an
	expectation in `file` and are reported as unexpected.
	"""
	result = VerifyResult()
	pool = list(diagnostics)
	used = [False] * len(pool)
	for exp in expectations:
		for idx, diag in enumerate(pool):
			if used[idx]:
				continue
			if diag.severity != exp.severity or diag.span.line != exp.line:
				continue
			if file is not None and diag.span.file not in (None, file):
				continue
			if exp.text not in diag.message:
				continue
			used[idx] = True
			result.matched.append((exp, diag))
			break
		else:
			result.missing.append(exp)
	result.unexpected = [d for d, u in zip(pool, used) if not u]
	return result


def verify_source(source: str, diagnostics: Iterable[Diagnostic], *, file: Optional[str] = None) -> VerifyResult:
	return verify_diagnostics(parse_expectations(source), diagnostics, file=file)


__all__ = ["Expectation", "VerifyResult", "parse_expectations", "verify_diagnostics", "verify_source"]
