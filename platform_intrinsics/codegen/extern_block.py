# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""`extern "platform-intrinsic"` declarations, one `fn` per instantiation."""

from __future__ import annotations

from typing import Iterable, List

from platform_intrinsics.core.types import Aggregate, NumKind, Number, Pointer, Type, Vector, Void
from platform_intrinsics.instantiation.monomorphize import MonomorphicIntrinsic

ARG_NAMES = "xyzwabcdef"

_RUST_LETTER = {
	NumKind.SIGNED: "i",
	NumKind.UNSIGNED: "u",
	NumKind.FLOAT: "f",
}


def rust_name(ty: Type) -> str:
	"""Surface spelling of `ty`: `i32`, `u8x16`, `*const f32`, `(i32, u8)`, `()`."""
	if isinstance(ty, Void):
		return "()"
	if isinstance(ty, Number):
		return f"{_RUST_LETTER[ty.kind]}{ty.bitwidth}"
	if isinstance(ty, Vector):
		return f"{rust_name(ty.elem)}x{ty.length}"
	if isinstance(ty, Pointer):
		return f"*{'const' if ty.is_const else 'mut'} {rust_name(ty.elem)}"
	if isinstance(ty, Aggregate):
		return "(" + ", ".join(rust_name(elem) for elem in ty.elems) + ")"
	raise TypeError(f"not a spec type: {ty!r}")


def signature(mono: MonomorphicIntrinsic) -> str:
	if mono.arg_count > len(ARG_NAMES):
		raise ValueError(f"{mono.name}: at most {len(ARG_NAMES)} arguments can be named")
	params = ", ".join(f"{name}: {rust_name(arg)}" for name, arg in zip(ARG_NAMES, mono.args))
	return f"({params}) -> {rust_name(mono.ret)}"


def render_extern_block(monos: Iterable[MonomorphicIntrinsic]) -> str:
	lines: List[str] = ['extern "platform-intrinsic" {']
	for mono in monos:
		lines.append(f"    fn {mono.platform_prefix}{mono.name}{signature(mono)};")
	lines.append("}")
	lines.append("")
	return "\n".join(lines)


__all__ = ["ARG_NAMES", "rust_name", "signature", "render_extern_block"]
