#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
from __future__ import annotations

from pathlib import Path

from nullsema.core.diagnostics import DiagnosticSink
from nullsema.core.span import Span
from nullsema.importer import find_header, import_header_file, import_header_text, import_module


def test_import_header_text_reports_syntax_errors():
	sink = DiagnosticSink()

	module = import_header_text("@interface X\n- (id\n", module_name="broken", sink=sink, file="broken.h")

	assert module is None
	assert len(sink) == 1
	diag = sink.as_list()[0]
	assert diag.phase == "importer"
	assert diag.message.startswith("cannot parse header for module 'broken'")
	assert diag.span.file == "broken.h"


def test_import_header_text_keeps_module_despite_annotation_errors():
	sink = DiagnosticSink()

	module = import_header_text("int _Nullable f(void);", module_name="m", sink=sink)

	assert module is not None
	assert "f" in module.functions
	assert sink.has_errors()


def test_import_module_searches_paths_in_order(tmp_path: Path, nullability_header: str):
	first = tmp_path / "first"
	second = tmp_path / "second"
	first.mkdir()
	second.mkdir()
	(second / "nullability.h").write_text(nullability_header)
	(second / "other.h").write_text("id other(void);")
	(first / "other.h").write_text("id first_other(void);")

	assert find_header("nullability", [first, second]) == second / "nullability.h"
	assert find_header("other", [first, second]) == first / "other.h"

	sink = DiagnosticSink()
	module = import_module("other", search_paths=[first, second], sink=sink)
	assert module is not None
	assert module.name == "other"
	assert list(module.functions) == ["first_other"]
	assert len(sink) == 0


def test_missing_module_is_reported_at_import_site(tmp_path: Path):
	sink = DiagnosticSink()
	site = Span(file="main.ns", line=1, column=1)

	module = import_module("nowhere", search_paths=[tmp_path], sink=sink, span=site)

	assert module is None
	[diag] = sink.as_list()
	assert diag.message == "no such module 'nowhere'"
	assert diag.span == site


def test_import_header_file_uses_stem_as_module_name(tmp_path: Path, nullability_header: str):
	path = tmp_path / "nullability.h"
	path.write_text(nullability_header)
	sink = DiagnosticSink()

	module = import_header_file(path, sink=sink)

	assert module is not None
	assert module.name == "nullability"
	assert "SomeClass" in module.classes
	assert module.classes["SomeClass"].methods[0].loc.file == str(path)


def test_unreadable_header_file_is_a_diagnostic(tmp_path: Path):
	sink = DiagnosticSink()

	assert import_header_file(tmp_path / "absent.h", sink=sink) is None
	assert sink.as_list()[0].message.startswith("cannot read header")


def test_header_with_invalid_utf8_is_a_diagnostic(tmp_path: Path):
	path = tmp_path / "binary.h"
	path.write_bytes(b"@interface A\n@end\n\xff")
	sink = DiagnosticSink()

	assert import_header_file(path, sink=sink) is None
	[diag] = sink.as_list()
	assert diag.phase == "importer"
	assert diag.message == f"cannot read header '{path}': invalid UTF-8 at byte 18"
	assert diag.span.file == str(path)
