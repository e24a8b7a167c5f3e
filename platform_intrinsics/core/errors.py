# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error kinds raised while parsing specs and expanding templates.

All of them are fatal: configuration is trusted build-time input, so the first
failure aborts the run. Every error carries a stable code and, once the
monomorphization engine has seen it, the platform/set/template/width it was
expanding (see `IntrinsicGenError.with_context`).
"""

from __future__ import annotations

from typing import Dict, List, Optional


class IntrinsicGenError(ValueError):
	"""Base class for generator failures."""

	code = "E-INTRINSIC"

	def __init__(self, message: str, *, token: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.token = token
		self.context: Dict[str, object] = {}
		self.notes: List[str] = []

	def with_context(self, **context: object) -> "IntrinsicGenError":
		"""
		Attach expansion context, keeping any context set closer to the failure.

		Returns `self` so callers can `raise err.with_context(...)`.
		"""
		for key, value in context.items():
			self.context.setdefault(key, value)
		return self

	def note(self, text: str) -> "IntrinsicGenError":
		self.notes.append(text)
		return self

	def __str__(self) -> str:
		text = f"{self.code}: {self.message}"
		if self.token is not None:
			text += f" (in spec `{self.token}`)"
		if self.context:
			where = ", ".join(f"{k}={v}" for k, v in self.context.items())
			text += f" [{where}]"
		return text


class SpecParseError(IntrinsicGenError):
	"""Token does not match the type-spec grammar."""

	code = "E-SPEC-PARSE"


class UnknownReferenceError(IntrinsicGenError):
	"""Back-reference (or aggregate field index) out of range."""

	code = "E-SPEC-REF"


class UnsupportedModifierError(IntrinsicGenError):
	"""Modifier is not defined for the type it is applied to."""

	code = "E-SPEC-MODIFIER"


class InvalidWidthError(IntrinsicGenError):
	"""Non-power-of-two width, or a narrow LLVM width that is not narrower."""

	code = "E-SPEC-WIDTH"


class AmbiguousBitcastError(IntrinsicGenError):
	"""A `->spec` bitcast target did not enumerate to exactly one type."""

	code = "E-SPEC-AMBIGUOUS"


class AmbiguousPointeeError(IntrinsicGenError):
	"""A `Pm/spec` / `Pc/spec` LLVM pointee did not enumerate to exactly one type."""

	code = "E-SPEC-AMBIGUOUS"


class EmptyEnumerationError(IntrinsicGenError):
	"""A signature slot enumerated to no types at all."""

	code = "E-SPEC-EMPTY"


class ConfigError(IntrinsicGenError):
	"""Configuration file has the wrong shape."""

	code = "E-CONFIG"


def is_power_of_two(width: int) -> bool:
	return width > 0 and width & (width - 1) == 0


__all__ = [
	"IntrinsicGenError",
	"SpecParseError",
	"UnknownReferenceError",
	"UnsupportedModifierError",
	"InvalidWidthError",
	"AmbiguousBitcastError",
	"AmbiguousPointeeError",
	"EmptyEnumerationError",
	"ConfigError",
	"is_power_of_two",
]
