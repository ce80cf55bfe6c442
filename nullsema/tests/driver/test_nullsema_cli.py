#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-18
"""CLI entry point: text, --json and --verify output."""

from __future__ import annotations

import json
from pathlib import Path

from nullsema.driver import main

_SOURCE = """\
import nullability

func testSomeClass(sc: SomeClass, osc: SomeClass?) {
  var ao1: AnyObject = sc.methodA(osc)
  if sc.methodD() == nil { } // expected-error{{cannot invoke}}
  sc.methodE(osc) // expected-error{{value of optional type 'SomeClass?' not unwrapped}}
  sc.methodG(sc, second: osc) // expected-error{{not unwrapped}}
}
"""


def _write(tmp_path: Path, header: str, source: str = _SOURCE) -> Path:
	(tmp_path / "nullability.h").write_text(header)
	path = tmp_path / "main.ns"
	path.write_text(source)
	return path


def test_cli_json_reports_every_diagnostic(tmp_path: Path, nullability_header: str, capsys):
	src = _write(tmp_path, nullability_header)

	exit_code = main([str(src), "--json"])

	out = json.loads(capsys.readouterr().out)
	assert exit_code == 1
	assert out["exit_code"] == 1
	assert [(d["line"], d["code"], d["phase"]) for d in out["diagnostics"]] == [
		(5, "E-INVOKE", "typecheck"),
		(6, "E-UNWRAP", "typecheck"),
		(7, "E-UNWRAP", "typecheck"),
	]
	assert all(d["file"] == str(src) for d in out["diagnostics"])


def test_cli_text_output_goes_to_stderr(tmp_path: Path, nullability_header: str, capsys):
	src = _write(tmp_path, nullability_header)

	exit_code = main([str(src)])

	err = capsys.readouterr().err.splitlines()
	assert exit_code == 1
	assert err[0] == f"{src}:5:19: error: cannot invoke '==' with an argument list of type '(AnyObject, nil)'"
	assert len(err) == 3


def test_cli_verify_mode_passes_on_matching_expectations(tmp_path: Path, nullability_header: str, capsys):
	src = _write(tmp_path, nullability_header)

	assert main([str(src), "--verify"]) == 0
	assert capsys.readouterr().err == ""


def test_cli_verify_mode_fails_on_mismatch(tmp_path: Path, nullability_header: str, capsys):
	src = _write(tmp_path, nullability_header, _SOURCE.replace(" // expected-error{{not unwrapped}}", ""))

	exit_code = main([str(src), "--verify", "--json"])

	out = json.loads(capsys.readouterr().out)
	assert exit_code == 1
	[problem] = out["diagnostics"]
	assert problem["phase"] == "verify"
	assert problem["line"] == 7
	assert problem["message"].startswith("unexpected error produced: value of optional type")


def test_cli_include_path_and_explicit_header(tmp_path: Path, nullability_header: str):
	inc = tmp_path / "include"
	inc.mkdir()
	(inc / "nullability.h").write_text(nullability_header)
	src = tmp_path / "clean.ns"
	src.write_text("import nullability\nfunc f(sc: SomeClass) {\n  sc.methodE(sc)\n}\n")

	assert main([str(src), "-I", str(inc)]) == 0

	extra = tmp_path / "extra.h"
	extra.write_text("void takeThing(id _Nonnull thing);\n")
	src.write_text("func g(x: AnyObject?) {\n  takeThing(x!)\n}\n")
	assert main([str(src), "--header", str(extra)]) == 0


def test_cli_reports_unknown_module_and_syntax_errors(tmp_path: Path, capsys):
	src = tmp_path / "bad.ns"
	src.write_text("import missing\n")

	assert main([str(src), "--json"]) == 1
	out = json.loads(capsys.readouterr().out)
	assert [d["message"] for d in out["diagnostics"]] == ["no such module 'missing'"]

	src.write_text("func f( {\n")
	assert main([str(src), "--json"]) == 1
	out = json.loads(capsys.readouterr().out)
	assert out["diagnostics"][0]["phase"] == "parser"


def test_cli_missing_source_file(tmp_path: Path, capsys):
	assert main([str(tmp_path / "absent.ns")]) == 1
	assert "cannot read source file" in capsys.readouterr().err


def test_cli_source_that_is_not_utf8(tmp_path: Path, capsys):
	src = tmp_path / "latin.ns"
	src.write_bytes(b"\xff\xfe")

	assert main([str(src), "--json"]) == 1
	out = json.loads(capsys.readouterr().out)
	[diag] = out["diagnostics"]
	assert (diag["phase"], diag["file"]) == ("driver", str(src))
	assert diag["message"] == "cannot read source file: invalid UTF-8 at byte 0"


def test_cli_header_that_is_not_utf8(tmp_path: Path, capsys):
	header = tmp_path / "broken.h"
	header.write_bytes(b"\xff\xfe")
	src = tmp_path / "ok.ns"
	src.write_text("func f() {\n}\n")

	assert main([str(src), "--header", str(header), "--json"]) == 1
	out = json.loads(capsys.readouterr().out)
	[diag] = out["diagnostics"]
	assert diag["phase"] == "importer"
	assert diag["message"] == f"cannot read header '{header}': invalid UTF-8 at byte 0"
