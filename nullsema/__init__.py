# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
nullsema: nullability-aware optional-type checking for imported declarations.

Stages:
  importer: header text -> foreign declarations with nullability tags
  frontend: checked source -> AST
  checker: lift signatures, classify use sites, check optionality, emit diagnostics

The CLI entrypoint is `nullsema.driver:main`.
"""

__version__ = "0.3.0"

__all__ = ["core", "importer", "frontend", "checker"]
