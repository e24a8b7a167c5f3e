# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from platform_intrinsics.core.errors import (
	AmbiguousBitcastError,
	AmbiguousPointeeError,
	InvalidWidthError,
	UnknownReferenceError,
	UnsupportedModifierError,
)
from platform_intrinsics.core.types import NumKind, Number, Pointer, Vector, Void
from platform_intrinsics.instantiation import TypeSpec, enumerate_spec, enumerate_token

S8 = Number(NumKind.SIGNED, 8)
U8 = Number(NumKind.UNSIGNED, 8)
S32 = Number(NumKind.SIGNED, 32)
U32 = Number(NumKind.UNSIGNED, 32)
F32 = Number(NumKind.FLOAT, 32)


@pytest.mark.parametrize("width", [64, 128, 256, 512])
@pytest.mark.parametrize("text, count", [("i16", 2), ("s16", 1), ("u16", 1), ("f32", 1)])
def test_single_width_vector_tokens_fill_platform_width(width: int, text: str, count: int) -> None:
	types = enumerate_token(text, width, ())
	assert len(types) == count
	for ty in types:
		assert isinstance(ty, Vector)
		assert ty.length * ty.elem.bitwidth == width


@pytest.mark.parametrize("width", [64, 128])
def test_single_width_scalar_tokens_ignore_platform_width(width: int) -> None:
	assert enumerate_token("I16", width, ()) == [Number(NumKind.SIGNED, 16), Number(NumKind.UNSIGNED, 16)]


def test_range_doubles_and_crosses_kinds() -> None:
	types = enumerate_token("I(8-32)", 128, ())
	assert [(t.bitwidth, t.kind) for t in types] == [
		(8, NumKind.SIGNED),
		(8, NumKind.UNSIGNED),
		(16, NumKind.SIGNED),
		(16, NumKind.UNSIGNED),
		(32, NumKind.SIGNED),
		(32, NumKind.UNSIGNED),
	]


def test_lowercase_vectorizes_at_platform_width() -> None:
	assert enumerate_token("i32", 128, ()) == [Vector(S32, 4), Vector(U32, 4)]


def test_void() -> None:
	assert enumerate_token("V", 128, ()) == [Void()]


def test_narrow_llvm_width_is_kept() -> None:
	assert enumerate_token("U32/8", 128, ()) == [Number(NumKind.UNSIGNED, 32, llvm_bitwidth=8)]


def test_reference_is_identity() -> None:
	ret = Vector(U32, 4)
	assert enumerate_token("0", 128, (ret,)) == [ret]


def test_reference_applies_modifiers() -> None:
	previous = (Vector(U32, 4), Vector(S8, 16))
	assert enumerate_token("1hw", 128, previous) == [Vector(Number(NumKind.SIGNED, 16), 8)]
	assert enumerate_token("0S", 128, previous) == [U32]


def test_reference_out_of_range() -> None:
	with pytest.raises(UnknownReferenceError, match="only 1 are known") as excinfo:
		enumerate_token("1", 128, (S32,))
	assert excinfo.value.token == "1"


def test_const_pointer_to_reference() -> None:
	assert enumerate_token("0Pc", 128, (U8,)) == [Pointer(U8, llvm_elem=None, is_const=True)]


def test_pointer_with_llvm_pointee() -> None:
	assert enumerate_token("0Pm/S8", 128, (Vector(U32, 4),)) == [
		Pointer(Vector(U32, 4), llvm_elem=S8, is_const=False)
	]


def test_ambiguous_pointee() -> None:
	with pytest.raises(AmbiguousPointeeError) as excinfo:
		enumerate_token("0Pm/I8", 128, (U8,))
	assert excinfo.value.token == "I8"


def test_bitcast_to_single_type() -> None:
	assert enumerate_token("s32->f32", 128, ()) == [Vector(S32, 4, bitcast=Vector(F32, 4))]


def test_ambiguous_bitcast_is_an_error() -> None:
	with pytest.raises(AmbiguousBitcastError) as excinfo:
		enumerate_token("u32->i8", 128, ())
	assert excinfo.value.token == "i8"


def test_bitcast_on_scalar_is_rejected() -> None:
	with pytest.raises(UnsupportedModifierError) as excinfo:
		enumerate_token("S32->f32", 128, ())
	assert excinfo.value.token == "S32->f32"


def test_bitcast_target_may_reference_earlier_slots() -> None:
	previous = (Vector(F32, 4),)
	assert enumerate_token("s32->0", 128, previous) == [Vector(S32, 4, bitcast=Vector(F32, 4))]


def test_spec_concatenates_token_expansions() -> None:
	spec = TypeSpec.from_list(["S32", "U(8-16)", "V"])
	assert enumerate_spec(spec, 64, ()) == [
		S32,
		U8,
		Number(NumKind.UNSIGNED, 16),
		Void(),
	]
	assert spec.enumerate(64, ()) == enumerate_spec(spec, 64, ())


def test_pointer_modifiers_after_reference() -> None:
	previous = (Pointer(U8, is_const=True),)
	assert enumerate_token("0M", 128, previous) == [Pointer(U8, is_const=False)]
	assert enumerate_token("0D", 128, previous) == [U8]
	assert enumerate_token("0DvPm", 64, previous) == [Pointer(Vector(U8, 8), is_const=False)]


@pytest.mark.parametrize("text", ["I8nnnnv", "i(8-256)", "i32x16"])
def test_degenerate_widths_are_rejected(text: str) -> None:
	with pytest.raises(InvalidWidthError) as excinfo:
		enumerate_token(text, 128, ())
	assert excinfo.value.token == text


def test_halving_a_reference_to_nothing() -> None:
	previous = (Vector(S8, 16),)
	assert enumerate_token("0hhh", 128, previous) == [Vector(S8, 2)]
	with pytest.raises(InvalidWidthError):
		enumerate_token("0hhhhh", 128, previous)


@pytest.mark.parametrize("text", ["VPm", "VPc/U8"])
def test_void_cannot_be_pointed_to(text: str) -> None:
	with pytest.raises(UnsupportedModifierError, match="cannot be applied to Void") as excinfo:
		enumerate_token(text, 128, ())
	assert excinfo.value.token == text
