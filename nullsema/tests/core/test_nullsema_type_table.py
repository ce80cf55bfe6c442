#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
from __future__ import annotations

import pytest

from nullsema.core.types_core import TypeKind, TypeTable


def test_well_known_types_are_canonical():
	table = TypeTable()

	any_ty = table.ensure_any_object()
	void_ty = table.ensure_void()
	nil_ty = table.ensure_nil()
	err_ty = table.ensure_error()

	assert table.get(any_ty).kind is TypeKind.ANY_OBJECT
	assert table.get(void_ty).kind is TypeKind.VOID
	assert table.get(nil_ty).kind is TypeKind.NIL
	assert table.get(err_ty).kind is TypeKind.ERROR
	assert any_ty == table.ensure_any_object()
	assert nil_ty == table.ensure_nil()
	assert table.lookup("AnyObject") == any_ty


def test_optional_wrapping_is_cached_and_pretty_printed():
	table = TypeTable()
	cls = table.ensure_class("SomeClass")

	opt = table.ensure_optional(cls)

	assert opt == table.ensure_optional(cls)
	assert table.is_optional(opt)
	assert not table.is_optional(cls)
	assert table.unwrap_optional(opt) == cls
	assert table.unwrap_optional(cls) == cls
	assert table.pretty(opt) == "SomeClass?"
	assert table.pretty(table.ensure_optional(table.ensure_any_object())) == "AnyObject?"


def test_class_superclass_can_be_filled_in_later():
	table = TypeTable()
	# Seen first through a forward declaration.
	sub = table.ensure_class("Sub")
	base = table.ensure_class("Base")

	assert table.ensure_class("Sub", superclass=base) == sub
	assert table.superclass_chain(sub) == [sub, base]


def test_class_name_clash_with_scalar_is_rejected():
	table = TypeTable()
	table.ensure_scalar("Int32")

	with pytest.raises(ValueError):
		table.ensure_class("Int32")


def test_is_object_covers_classes_and_any_object_only():
	table = TypeTable()

	assert table.is_object(table.ensure_class("SomeClass"))
	assert table.is_object(table.ensure_any_object())
	assert not table.is_object(table.ensure_scalar("Int32"))
	assert not table.is_object(table.ensure_void())


def test_metatype_round_trips_to_instance():
	table = TypeTable()
	cls = table.ensure_class("SomeClass")

	meta = table.ensure_metatype(cls)

	assert table.get(meta).kind is TypeKind.METATYPE
	assert table.pretty(meta) == "SomeClass.Type"
	assert table.instance_of_metatype(meta) == cls
	assert table.instance_of_metatype(cls) is None


def test_unknown_type_id_raises():
	with pytest.raises(ValueError):
		TypeTable().get(999)
