# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Emission of monomorphized intrinsics.

Formats:
  - compiler-defs: name -> signature lookup records (default)
  - extern-block: `extern "platform-intrinsic"` declarations
"""

from __future__ import annotations

from typing import Sequence

from platform_intrinsics.config import Platform
from platform_intrinsics.instantiation.monomorphize import MonomorphicIntrinsic, monomorphize

from .compiler_defs import CompilerDefsEmitter
from .extern_block import render_extern_block, rust_name

FORMATS = ("compiler-defs", "extern-block")


def render(
	monos: Sequence[MonomorphicIntrinsic],
	*,
	fmt: str = "compiler-defs",
	platform_prefix: str = "",
	wrap: bool = False,
) -> str:
	if fmt == "compiler-defs":
		return CompilerDefsEmitter().render(monos, platform_prefix=platform_prefix, wrap=wrap)
	if fmt == "extern-block":
		return render_extern_block(monos)
	raise ValueError(f"unknown output format {fmt!r} (expected one of {', '.join(FORMATS)})")


def generate(platform: Platform, *, fmt: str = "compiler-defs", wrap: bool = False, jobs: int = 1) -> str:
	"""Monomorphize `platform` and render the result."""
	monos = monomorphize(platform, jobs=jobs)
	return render(monos, fmt=fmt, platform_prefix=platform.platform_prefix, wrap=wrap)


__all__ = ["FORMATS", "CompilerDefsEmitter", "render", "generate", "render_extern_block", "rust_name"]
