# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Concrete intrinsic signature types.

A `Type` is one of `Void`, `Number`, `Pointer`, `Vector` or `Aggregate`. All of
them are frozen dataclasses: trees with structural equality and no sharing
semantics to worry about, so a back-reference to an earlier slot can reuse the
value as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import InvalidWidthError


class NumKind(Enum):
	"""Scalar number kinds. The value is the lowercase class letter."""

	SIGNED = "s"
	UNSIGNED = "u"
	FLOAT = "f"


@dataclass(frozen=True)
class Void:
	"""No value (`()`); only meaningful in return position."""


@dataclass(frozen=True)
class Number:
	"""
	Scalar number of `bitwidth` bits.

	`llvm_bitwidth`, when set, is the narrower width the backend sees (the value
	is truncated when calling the LLVM intrinsic).
	"""

	kind: NumKind
	bitwidth: int
	llvm_bitwidth: Optional[int] = None

	def __post_init__(self) -> None:
		if self.bitwidth < 1:
			raise InvalidWidthError(f"bit width {self.bitwidth} is below one bit")
		if self.llvm_bitwidth is not None and not self.llvm_bitwidth < self.bitwidth:
			raise InvalidWidthError(
				f"LLVM width {self.llvm_bitwidth} must be narrower than the storage width {self.bitwidth}"
			)


@dataclass(frozen=True)
class Pointer:
	elem: "Type"
	llvm_elem: Optional["Type"] = None  # pointee as seen by the LLVM signature, if different
	is_const: bool = False


@dataclass(frozen=True)
class Vector:
	elem: "Type"
	length: int
	bitcast: Optional["Type"] = None  # type the vector is cast to at the LLVM boundary

	def __post_init__(self) -> None:
		if self.length < 1:
			raise InvalidWidthError(f"vector of {self.elem} would have {self.length} lanes")


@dataclass(frozen=True)
class Aggregate:
	flatten: bool
	elems: Tuple["Type", ...] = field(default_factory=tuple)


Type = Union[Void, Number, Pointer, Vector, Aggregate]


def vectorize(scalar: Number, width: int) -> Vector:
	"""Wrap a scalar in a vector filling `width` bits."""
	if scalar.bitwidth > width:
		raise InvalidWidthError(f"a {scalar.bitwidth}-bit element does not fit a {width}-bit vector")
	return Vector(elem=scalar, length=width // scalar.bitwidth)


__all__ = ["NumKind", "Void", "Number", "Pointer", "Vector", "Aggregate", "Type", "vectorize"]
