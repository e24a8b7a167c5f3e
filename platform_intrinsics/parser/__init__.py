# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Spec token parsing (`grammar.lark` + tree builder)."""

from .ast import BaseKind, SpecToken, WidthRange
from .parser import parse_spec_token

__all__ = ["BaseKind", "SpecToken", "WidthRange", "parse_spec_token"]
