# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
platform_intrinsics: expands polymorphic intrinsic signature specs into the
concrete signature table consumed by the compiler's intrinsic checker.

Layers:
  core: Type values, modifier algebra, errors/diagnostics
  parser: spec token grammar (lark) -> SpecToken
  instantiation: slot enumeration and monomorphization
  codegen: compiler-defs / extern-block rendering
  config: JSON -> Platform
  generator: CLI driver (`python -m platform_intrinsics`)
"""

__all__ = ["core", "parser", "instantiation", "codegen", "config", "generator"]
