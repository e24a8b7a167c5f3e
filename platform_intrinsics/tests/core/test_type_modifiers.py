# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from platform_intrinsics.core.errors import InvalidWidthError, UnknownReferenceError, UnsupportedModifierError
from platform_intrinsics.core.modifiers import FieldIndex, ForceWidth, apply_modifier, apply_modifiers
from platform_intrinsics.core.types import Aggregate, NumKind, Number, Pointer, Vector, Void, vectorize

S16 = Number(NumKind.SIGNED, 16)
S32 = Number(NumKind.SIGNED, 32)
U8 = Number(NumKind.UNSIGNED, 8)
U32 = Number(NumKind.UNSIGNED, 32)
F32 = Number(NumKind.FLOAT, 32)


def test_widen_then_narrow_round_trips() -> None:
	assert apply_modifiers(S16, ["w", "n"], 128, ()) == S16
	assert apply_modifier(S16, "w", 128, ()) == S32


def test_kind_change_clears_llvm_width() -> None:
	narrow = Number(NumKind.SIGNED, 32, llvm_bitwidth=16)
	assert apply_modifier(narrow, "u", 128, ()) == U32
	assert apply_modifier(narrow, "f", 128, ()) == F32
	assert apply_modifier(U32, "s", 128, ()) == S32


def test_narrow_llvm_width_must_be_narrower() -> None:
	with pytest.raises(InvalidWidthError):
		Number(NumKind.UNSIGNED, 16, llvm_bitwidth=16)


def test_vectorize_fills_platform_width() -> None:
	assert apply_modifier(S32, "v", 128, ()) == Vector(S32, 4)
	assert apply_modifier(U8, "v", 64, ()) == Vector(U8, 8)
	assert vectorize(S16, 256).length == 16


def test_modifier_order_matters() -> None:
	# vectorize-then-widen keeps the lane count; widen-then-vectorize refits it.
	assert apply_modifiers(S16, ["v", "w"], 128, ()) == Vector(S32, 8)
	assert apply_modifiers(S16, ["w", "v"], 128, ()) == Vector(S32, 4)


def test_vector_lane_modifiers() -> None:
	vec = Vector(S32, 4)
	assert apply_modifier(vec, "h", 128, ()) == Vector(S32, 2)
	assert apply_modifier(vec, "d", 128, ()) == Vector(S32, 8)
	assert apply_modifier(vec, "S", 128, ()) == S32
	assert apply_modifier(vec, ForceWidth(64), 128, ()) == Vector(S32, 2)
	assert apply_modifier(vec, "u", 128, ()) == Vector(U32, 4)
	assert apply_modifier(vec, "n", 128, ()) == Vector(S16, 4)


def test_lane_change_drops_bitcast() -> None:
	vec = Vector(S32, 4, bitcast=Vector(F32, 4))
	assert apply_modifier(vec, "h", 128, ()).bitcast is None
	assert apply_modifier(vec, "w", 128, ()).bitcast is None


def test_pointer_modifiers() -> None:
	ptr = Pointer(Vector(S32, 4), is_const=False)
	assert apply_modifier(ptr, "D", 128, ()) == Vector(S32, 4)
	assert apply_modifier(ptr, "C", 128, ()) == Pointer(Vector(S32, 4), is_const=True)
	assert apply_modifier(Pointer(U8, is_const=True), "M", 128, ()) == Pointer(U8, is_const=False)
	# Anything else is pushed into the pointee, keeping the LLVM pointee.
	ptr = Pointer(Vector(S32, 4), llvm_elem=U8, is_const=True)
	assert apply_modifier(ptr, "u", 128, ()) == Pointer(Vector(U32, 4), llvm_elem=U8, is_const=True)


def test_aggregate_field_selection() -> None:
	agg = Aggregate(flatten=False, elems=(S32, Vector(U8, 16)))
	assert apply_modifier(agg, FieldIndex(1), 128, ()) == Vector(U8, 16)
	with pytest.raises(UnknownReferenceError):
		apply_modifier(agg, FieldIndex(2), 128, ())
	with pytest.raises(UnsupportedModifierError):
		apply_modifier(agg, "w", 128, ())


@pytest.mark.parametrize(
	"ty, modifier",
	[
		(S32, "S"),
		(S32, "h"),
		(S32, "D"),
		(S32, ForceWidth(128)),
		(S32, FieldIndex(0)),
		(Vector(S32, 4), "D"),
		(Void(), "w"),
		(Vector(Vector(S32, 4), 2), ForceWidth(128)),
	],
)
def test_uncovered_modifiers_are_rejected(ty, modifier) -> None:
	with pytest.raises(UnsupportedModifierError):
		apply_modifier(ty, modifier, 128, ())


def test_narrowing_below_one_bit() -> None:
	one_bit = Number(NumKind.UNSIGNED, 1)
	with pytest.raises(InvalidWidthError, match="below one bit"):
		apply_modifier(one_bit, "n", 128, ())
	with pytest.raises(InvalidWidthError):
		Number(NumKind.SIGNED, 0)


def test_element_wider_than_platform() -> None:
	with pytest.raises(InvalidWidthError, match="does not fit a 128-bit vector"):
		vectorize(Number(NumKind.UNSIGNED, 256), 128)
	assert vectorize(Number(NumKind.UNSIGNED, 128), 128) == Vector(Number(NumKind.UNSIGNED, 128), 1)


@pytest.mark.parametrize("modifier", ["h", ForceWidth(16)])
def test_lane_count_cannot_reach_zero(modifier) -> None:
	with pytest.raises(InvalidWidthError, match="0 lanes"):
		apply_modifier(Vector(S32, 1), modifier, 128, ())
