# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compiler-definitions table emitter (textual).

Each monomorphic intrinsic becomes one match arm of the compiler's
`name -> Intrinsic` lookup:

        "hadd_s8" => Intrinsic {
            inputs: { static INPUTS: [&'static Type; 2] = [&::I8x8, &::I8x8]; &INPUTS },
            output: &::I8x8,
            definition: Named("llvm.neon.vhadds.v8i8")
        },

Numbers, vectors and void are referenced inline (`&::U16x8`). Pointers and
aggregates are compound values; each distinct one is defined once as a named
static (`static PTR_0: Type = Type::Pointer(&::U8, None, true);`) and every
use refers to that name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from platform_intrinsics.core.types import Aggregate, NumKind, Number, Pointer, Type, Vector, Void
from platform_intrinsics.instantiation.monomorphize import MonomorphicIntrinsic

_CTOR_LETTER = {
	NumKind.SIGNED: "I",
	NumKind.UNSIGNED: "U",
	NumKind.FLOAT: "F",
}


def _rust_bool(value: bool) -> str:
	return "true" if value else "false"


@dataclass
class CompilerDefsEmitter:
	"""Renders intrinsic records and accumulates the shared compound-type statics."""

	consts: List[str] = field(default_factory=list)
	_const_names_by_ctor: Dict[str, str] = field(default_factory=dict)
	_const_counts: Dict[str, int] = field(default_factory=dict)

	def ctor(self, ty: Type) -> str:
		"""Constructor expression for `ty`."""
		if isinstance(ty, Void):
			return "::VOID"
		if isinstance(ty, Number):
			return _number_ctor(ty)
		if isinstance(ty, Vector):
			base = f"{self.ctor(ty.elem)}x{ty.length}"
			if ty.bitcast is None:
				return base
			return f"{base}_{self.ctor(ty.bitcast).replace('::', '')}"
		if isinstance(ty, Pointer):
			llvm_elem = "None" if ty.llvm_elem is None else f"Some({self.ctor_ref(ty.llvm_elem)})"
			return f"Type::Pointer({self.ctor_ref(ty.elem)}, {llvm_elem}, {_rust_bool(ty.is_const)})"
		if isinstance(ty, Aggregate):
			elems = ", ".join(self.ctor_ref(elem) for elem in ty.elems)
			parts = f"{{ static PARTS: [&'static Type; {len(ty.elems)}] = [{elems}]; &PARTS }}"
			return f"Type::Aggregate({_rust_bool(ty.flatten)}, {parts})"
		raise TypeError(f"not a spec type: {ty!r}")

	def ctor_ref(self, ty: Type) -> str:
		"""`&'static Type` expression for `ty`, hoisting compound types."""
		if isinstance(ty, Pointer):
			return "&" + self.ensure_const("PTR", self.ctor(ty))
		if isinstance(ty, Aggregate):
			return "&" + self.ensure_const("AGG", self.ctor(ty))
		return "&" + self.ctor(ty)

	def ensure_const(self, prefix: str, ctor: str) -> str:
		"""
		Return the static holding `ctor`, declaring it on first use.

		Statics are keyed by constructor text, so structurally equal compound
		types across all instantiations share one definition.
		"""
		if ctor in self._const_names_by_ctor:
			return self._const_names_by_ctor[ctor]
		index = self._const_counts.get(prefix, 0)
		self._const_counts[prefix] = index + 1
		name = f"{prefix}_{index}"
		self._const_names_by_ctor[ctor] = name
		self.consts.append(f"static {name}: Type = {ctor};")
		return name

	def render_intrinsic(self, mono: MonomorphicIntrinsic) -> str:
		args = ", ".join(self.ctor_ref(arg) for arg in mono.args)
		return "\n".join(
			[
				f'        "{mono.name}" => Intrinsic {{',
				f"            inputs: {{ static INPUTS: [&'static Type; {mono.arg_count}] = [{args}]; &INPUTS }},",
				f"            output: {self.ctor_ref(mono.ret)},",
				f'            definition: Named("{mono.llvm_name}")',
				"        },",
			]
		)

	def render(self, monos: Iterable[MonomorphicIntrinsic], *, platform_prefix: str = "", wrap: bool = False) -> str:
		"""
		Render all records in order, preceded by the statics they use.

		With `wrap`, the records are enclosed in a `find(name)` function that
		strips `platform_prefix` before matching.
		"""
		records = [self.render_intrinsic(mono) for mono in monos]
		lines: List[str] = []
		if wrap:
			lines.extend(_PREAMBLE)
		if self.consts:
			lines.extend(self.consts)
			lines.append("")
		if wrap:
			lines.extend(_find_open(platform_prefix))
		lines.extend(records)
		if wrap:
			lines.extend(_FIND_CLOSE)
		lines.append("")
		return "\n".join(lines)


def _number_ctor(num: Number) -> str:
	letter = _CTOR_LETTER[num.kind]
	if num.llvm_bitwidth is None or num.kind is NumKind.FLOAT:
		return f"::{letter}{num.bitwidth}"
	return f"::{letter}{num.bitwidth}_{num.llvm_bitwidth}"


_PREAMBLE = [
	"// DO NOT EDIT: autogenerated by platform_intrinsics",
	"",
	"#![allow(unused_imports)]",
	"",
	"use {Intrinsic, Type};",
	"use IntrinsicDef::Named;",
	"",
]


def _find_open(platform_prefix: str) -> List[str]:
	return [
		"#[inline(never)]",
		"pub fn find(name: &str) -> Option<Intrinsic> {",
		f'    if !name.starts_with("{platform_prefix}") {{ return None }}',
		f'    Some(match &name["{platform_prefix}".len()..] {{',
	]


_FIND_CLOSE = [
	"        _ => return None,",
	"    })",
	"}",
]


__all__ = ["CompilerDefsEmitter"]
