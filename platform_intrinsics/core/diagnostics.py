"""
Diagnostic records for the generator driver.

The core raises `IntrinsicGenError`s; the driver turns the first one into a
`Diagnostic` so it can be printed for humans or as JSON for build tooling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import IntrinsicGenError


@dataclass
class Diagnostic:
	"""Represents a generator diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Which stage produced the diagnostic: "config" for loading failures,
	# "expand" for anything raised while monomorphizing.
	phase: str | None = None
	severity: str = "error"
	token: str | None = None
	context: Dict[str, Any] = field(default_factory=dict)
	notes: list[str] = field(default_factory=list)

	@classmethod
	def from_error(cls, err: IntrinsicGenError, *, phase: str | None = None) -> "Diagnostic":
		return cls(
			message=err.message,
			code=err.code,
			phase=phase,
			token=err.token,
			context={k: str(v) for k, v in err.context.items()},
			notes=list(err.notes),
		)

	def format(self) -> str:
		head = f"{self.severity}[{self.code}]" if self.code else self.severity
		text = f"{head}: {self.message}"
		if self.token is not None:
			text += f"\n  --> spec `{self.token}`"
		for key, value in self.context.items():
			text += f"\n  = {key}: {value}"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text

	def to_json(self) -> Dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"token": self.token,
			"context": dict(self.context),
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
