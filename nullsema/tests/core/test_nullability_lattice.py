#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-17
from __future__ import annotations

import itertools

import pytest

from nullsema.core.nullability import Nullability, combine

N = Nullability


def test_parse_accepts_every_header_spelling():
	assert N.parse("nonnull") is N.NONNULL
	assert N.parse("_Nonnull") is N.NONNULL
	assert N.parse("__nonnull") is N.NONNULL
	assert N.parse("nullable") is N.NULLABLE
	assert N.parse("_Nullable") is N.NULLABLE
	assert N.parse("__nullable") is N.NULLABLE
	assert N.parse("null_unspecified") is N.UNSPECIFIED
	assert N.parse("_Null_unspecified") is N.UNSPECIFIED


def test_parse_degrades_to_unspecified():
	# Absent or malformed metadata is never an error.
	assert N.parse(None) is N.UNSPECIFIED
	assert N.parse("") is N.UNSPECIFIED
	assert N.parse("_Maybe") is N.UNSPECIFIED


def test_spelling_round_trips_through_parse():
	for tag in N:
		assert N.parse(tag.spelling()) is tag


@pytest.mark.parametrize(
	"a,b,expected",
	[
		(N.NONNULL, N.NONNULL, N.NONNULL),
		(N.NONNULL, N.UNSPECIFIED, N.UNSPECIFIED),
		(N.UNSPECIFIED, N.NONNULL, N.UNSPECIFIED),
		(N.UNSPECIFIED, N.UNSPECIFIED, N.UNSPECIFIED),
		(N.NULLABLE, N.NONNULL, N.NULLABLE),
		(N.NONNULL, N.NULLABLE, N.NULLABLE),
		(N.NULLABLE, N.UNSPECIFIED, N.NULLABLE),
		(N.UNSPECIFIED, N.NULLABLE, N.NULLABLE),
		(N.NULLABLE, N.NULLABLE, N.NULLABLE),
	],
)
def test_combine_table(a, b, expected):
	assert combine(a, b) is expected


def test_combine_is_commutative_and_associative():
	for a, b in itertools.product(N, repeat=2):
		assert combine(a, b) is combine(b, a)
	for a, b, c in itertools.product(N, repeat=3):
		assert combine(combine(a, b), c) is combine(a, combine(b, c))
