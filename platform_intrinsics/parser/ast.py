from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from platform_intrinsics.core.modifiers import Bitcast, FieldIndex, ForceWidth, Modifier
from platform_intrinsics.core.types import NumKind


class BaseKind(Enum):
	VOID = auto()
	ID = auto()
	REFERENCE = auto()


_KINDS_BY_CLASS = {
	"i": (NumKind.SIGNED, NumKind.UNSIGNED),
	"s": (NumKind.SIGNED,),
	"u": (NumKind.UNSIGNED,),
	"f": (NumKind.FLOAT,),
}


@dataclass(frozen=True)
class WidthRange:
	"""Inclusive bit-width progression `start, 2*start, ...` up to `end`."""

	start: int
	end: int

	def widths(self) -> List[int]:
		out: List[int] = []
		bitwidth = self.start
		while bitwidth <= self.end:
			out.append(bitwidth)
			bitwidth *= 2
		return out


@dataclass(frozen=True)
class SpecToken:
	"""
	Structured form of one spec token.

	`text` is the source spelling (used in diagnostics). Exactly one of
	`type_class`/`reference` is set for ID/REFERENCE bases; VOID sets neither.
	`pointer` and `bitcast` are mutually exclusive.
	"""

	text: str
	base: BaseKind
	type_class: Optional[str] = None
	widths: Optional[WidthRange] = None
	llvm_width: Optional[int] = None
	reference: Optional[int] = None
	index: Optional[int] = None
	modifiers: str = ""
	force_width: Optional[int] = None
	pointer: Optional[str] = None  # "Pm" | "Pc"
	pointee: Optional["SpecToken"] = None
	bitcast: Optional["SpecToken"] = None

	@property
	def kinds(self) -> Tuple[NumKind, ...]:
		assert self.type_class is not None
		return _KINDS_BY_CLASS[self.type_class.lower()]

	@property
	def is_vector(self) -> bool:
		"""Lowercase class letters vectorize at the platform width."""
		return self.type_class is not None and self.type_class.islower()

	@property
	def is_const_pointer(self) -> bool:
		return self.pointer == "Pc"

	def modifier_chain(self) -> Tuple[Modifier, ...]:
		"""Modifiers in application order: index, chars, forced width, bitcast."""
		chain: List[Modifier] = []
		if self.index is not None:
			chain.append(FieldIndex(self.index))
		chain.extend(self.modifiers)
		if self.force_width is not None:
			chain.append(ForceWidth(self.force_width))
		if self.bitcast is not None:
			chain.append(Bitcast(self.bitcast))
		return tuple(chain)


__all__ = ["BaseKind", "WidthRange", "SpecToken"]
