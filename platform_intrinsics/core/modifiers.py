# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Modifier algebra: rewrite one concrete `Type` into another.

A spec token carries its modifiers in application order (see
`SpecToken.modifier_chain`): the `.N` field index, each single-character
modifier left to right, the `xN` forced width, then the `->spec` bitcast.
Later modifiers see the result of earlier ones, so `vw` (vectorize, then widen
the lanes) and `wv` (widen, then vectorize) differ.

Single-character modifiers:

  v  scalar -> vector of the current platform width
  S  vector -> its element type
  h  halve the lane count        d  double the lane count
  n  halve the element width     w  double the element width
  u  force unsigned              s  force signed          f  force float
  D  pointer -> pointee
  M  make pointer mutable        C  make pointer const

Modifiers a pointer or vector does not understand are pushed down into the
pointee / element.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence, Union

from .errors import AmbiguousBitcastError, UnknownReferenceError, UnsupportedModifierError
from .types import Aggregate, NumKind, Number, Pointer, Type, Vector, Void, vectorize

if TYPE_CHECKING:
	from platform_intrinsics.parser.ast import SpecToken

MODIFIER_CHARS = "vShdnwusfDMC"

_KIND_BY_CHAR = {
	"u": NumKind.UNSIGNED,
	"s": NumKind.SIGNED,
	"f": NumKind.FLOAT,
}


@dataclass(frozen=True)
class FieldIndex:
	"""`.N`: select element N of an aggregate."""

	index: int


@dataclass(frozen=True)
class ForceWidth:
	"""`xN`: resize a vector to N total bits."""

	bits: int


@dataclass(frozen=True)
class Bitcast:
	"""`->spec`: present the vector as the single type `spec` enumerates to."""

	target: "SpecToken"


Modifier = Union[str, FieldIndex, ForceWidth, Bitcast]


def describe(modifier: Modifier) -> str:
	"""Render a modifier back to its spec spelling for messages."""
	if isinstance(modifier, FieldIndex):
		return f".{modifier.index}"
	if isinstance(modifier, ForceWidth):
		return f"x{modifier.bits}"
	if isinstance(modifier, Bitcast):
		return f"->{modifier.target.text}"
	return modifier


def _unsupported(ty: Type, modifier: Modifier) -> UnsupportedModifierError:
	return UnsupportedModifierError(f"modifier `{describe(modifier)}` cannot be applied to {type(ty).__name__} {ty}")


def apply_modifier(ty: Type, modifier: Modifier, width: int, previous: Sequence[Type]) -> Type:
	"""Apply one modifier to `ty` at platform `width`; `previous` are the slots resolved so far."""
	if isinstance(ty, Number):
		return _modify_number(ty, modifier, width)
	if isinstance(ty, Pointer):
		return _modify_pointer(ty, modifier, width, previous)
	if isinstance(ty, Vector):
		return _modify_vector(ty, modifier, width, previous)
	if isinstance(ty, Aggregate):
		return _modify_aggregate(ty, modifier)
	if isinstance(ty, Void):
		raise _unsupported(ty, modifier)
	raise TypeError(f"not a spec type: {ty!r}")


def apply_modifiers(ty: Type, modifiers: Sequence[Modifier], width: int, previous: Sequence[Type]) -> Type:
	for modifier in modifiers:
		ty = apply_modifier(ty, modifier, width, previous)
	return ty


def _modify_number(num: Number, modifier: Modifier, width: int) -> Type:
	if modifier in _KIND_BY_CHAR:
		return Number(kind=_KIND_BY_CHAR[modifier], bitwidth=num.bitwidth)
	if modifier == "w":
		return Number(kind=num.kind, bitwidth=num.bitwidth * 2)
	if modifier == "n":
		return Number(kind=num.kind, bitwidth=num.bitwidth // 2)
	if modifier == "v":
		return vectorize(num, width)
	raise _unsupported(num, modifier)


def _modify_pointer(ptr: Pointer, modifier: Modifier, width: int, previous: Sequence[Type]) -> Type:
	if modifier == "D":
		return ptr.elem
	if modifier == "M":
		return replace(ptr, is_const=False)
	if modifier == "C":
		return replace(ptr, is_const=True)
	return replace(ptr, elem=apply_modifier(ptr.elem, modifier, width, previous))


def _modify_vector(vec: Vector, modifier: Modifier, width: int, previous: Sequence[Type]) -> Type:
	if modifier == "S":
		return vec.elem
	if modifier == "h":
		return Vector(elem=vec.elem, length=vec.length // 2)
	if modifier == "d":
		return Vector(elem=vec.elem, length=vec.length * 2)
	if isinstance(modifier, ForceWidth):
		if not isinstance(vec.elem, Number):
			raise _unsupported(vec, modifier)
		return Vector(elem=vec.elem, length=modifier.bits // vec.elem.bitwidth)
	if isinstance(modifier, Bitcast):
		# Imported here: slot enumeration itself applies modifiers.
		from platform_intrinsics.instantiation.slots import enumerate_token

		choices = enumerate_token(modifier.target, width, previous)
		if len(choices) != 1:
			raise AmbiguousBitcastError(
				f"bitcast target must denote exactly one type, got {len(choices)}",
				token=modifier.target.text,
			)
		return Vector(elem=vec.elem, length=vec.length, bitcast=choices[0])
	return Vector(elem=apply_modifier(vec.elem, modifier, width, previous), length=vec.length)


def _modify_aggregate(agg: Aggregate, modifier: Modifier) -> Type:
	if not isinstance(modifier, FieldIndex):
		raise _unsupported(agg, modifier)
	if modifier.index >= len(agg.elems):
		raise UnknownReferenceError(
			f"field .{modifier.index} out of range for an aggregate of {len(agg.elems)} elements"
		)
	return agg.elems[modifier.index]


__all__ = [
	"MODIFIER_CHARS",
	"FieldIndex",
	"ForceWidth",
	"Bitcast",
	"Modifier",
	"apply_modifier",
	"apply_modifiers",
	"describe",
]
