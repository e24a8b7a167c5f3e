# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Slot enumeration: one polymorphic `TypeSpec` -> every concrete `Type` it denotes.

A slot's spec is a list of tokens; the slot denotes the union of the token
expansions, in token order. Enumeration happens at one platform width, with
`previous` holding the types already chosen for the earlier slots of the same
signature (index 0 is the return type).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from platform_intrinsics.core.errors import (
	AmbiguousPointeeError,
	IntrinsicGenError,
	SpecParseError,
	UnknownReferenceError,
	UnsupportedModifierError,
)
from platform_intrinsics.core.modifiers import apply_modifiers
from platform_intrinsics.core.types import Number, Pointer, Type, Void, vectorize
from platform_intrinsics.parser import BaseKind, SpecToken, parse_spec_token


@dataclass(frozen=True)
class TypeSpec:
	"""Raw spec tokens for one signature slot."""

	tokens: Tuple[str, ...]

	@classmethod
	def from_str(cls, text: str) -> "TypeSpec":
		return cls((text,))

	@classmethod
	def from_list(cls, tokens: Sequence[str]) -> "TypeSpec":
		return cls(tuple(tokens))

	def parse(self) -> List[SpecToken]:
		"""Parse every token; used to validate configuration up front."""
		return [parse_spec_token(tok) for tok in self.tokens]

	def enumerate(self, width: int, previous: Sequence[Type]) -> List[Type]:
		return enumerate_spec(self, width, previous)

	def __str__(self) -> str:
		return " | ".join(self.tokens)


def enumerate_spec(spec: TypeSpec, width: int, previous: Sequence[Type]) -> List[Type]:
	"""All concrete types `spec` denotes at `width`, given the resolved `previous` slots."""
	result: List[Type] = []
	for text in spec.tokens:
		result.extend(enumerate_token(parse_spec_token(text), width, previous))
	return result


def enumerate_token(token: Union[SpecToken, str], width: int, previous: Sequence[Type]) -> List[Type]:
	if isinstance(token, str):
		token = parse_spec_token(token)
	try:
		return _enumerate_parsed(token, width, previous)
	except IntrinsicGenError as err:
		# Innermost token wins: a failing bitcast target keeps its own text.
		if err.token is None:
			err.token = token.text
		raise


def _enumerate_parsed(token: SpecToken, width: int, previous: Sequence[Type]) -> List[Type]:
	if token.base is BaseKind.VOID:
		if token.pointer is not None:
			raise UnsupportedModifierError(f"pointer suffix `{token.pointer}` cannot be applied to Void", token=token.text)
		return [apply_modifiers(Void(), token.modifier_chain(), width, previous)]
	if token.base is BaseKind.ID:
		return _enumerate_id(token, width, previous)
	if token.base is BaseKind.REFERENCE:
		return [_resolve_reference(token, width, previous)]
	raise SpecParseError(f"unknown base kind {token.base}", token=token.text)


def _enumerate_id(token: SpecToken, width: int, previous: Sequence[Type]) -> List[Type]:
	assert token.widths is not None
	modifiers = token.modifier_chain()
	out: List[Type] = []
	for bitwidth in token.widths.widths():
		for kind in token.kinds:
			scalar = Number(kind=kind, bitwidth=bitwidth, llvm_bitwidth=token.llvm_width)
			elem: Type = vectorize(scalar, width) if token.is_vector else scalar
			elem = apply_modifiers(elem, modifiers, width, previous)
			out.append(ptrify(token, elem, width, previous))
	return out


def _resolve_reference(token: SpecToken, width: int, previous: Sequence[Type]) -> Type:
	assert token.reference is not None
	if token.reference >= len(previous):
		raise UnknownReferenceError(
			f"referring to slot {token.reference}, but only {len(previous)} are known",
			token=token.text,
		)
	ty = apply_modifiers(previous[token.reference], token.modifier_chain(), width, previous)
	return ptrify(token, ty, width, previous)


def ptrify(token: SpecToken, elem: Type, width: int, previous: Sequence[Type]) -> Type:
	"""Wrap `elem` in a pointer if the token ends in `Pm`/`Pc`."""
	if token.pointer is None:
		return elem
	llvm_elem = None
	if token.pointee is not None:
		options = enumerate_token(token.pointee, width, previous)
		if len(options) != 1:
			raise AmbiguousPointeeError(
				f"LLVM pointee must denote exactly one type, got {len(options)}",
				token=token.pointee.text,
			)
		llvm_elem = options[0]
	return Pointer(elem=elem, llvm_elem=llvm_elem, is_const=token.is_const_pointer)


__all__ = ["TypeSpec", "enumerate_spec", "enumerate_token", "ptrify"]
