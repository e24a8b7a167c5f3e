# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Spec token parser: raw token text -> `SpecToken`.

The grammar lives in `grammar.lark` (LALR). Class letters and modifier letters
overlap (`u`, `s`, `f`), which the contextual lexer resolves by parser state:
a class letter can only start a token, a modifier only follows a base.

Width legality is checked here rather than during enumeration so a bad
configuration fails when it is loaded, not halfway through expansion.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from platform_intrinsics.core.errors import InvalidWidthError, SpecParseError, is_power_of_two

from .ast import BaseKind, SpecToken, WidthRange

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="spec",
	maybe_placeholders=False,
)


@lru_cache(maxsize=None)
def parse_spec_token(text: str) -> SpecToken:
	"""Parse one spec token, raising `SpecParseError` if it is not in the grammar."""
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as err:
		raise SpecParseError(f"invalid type spec at column {getattr(err, 'column', '?')}", token=text) from err
	return _build_spec(tree, text, text)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _child(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == name), None)


def _digits(tree: Tree) -> list[int]:
	return [int(c.value) for c in tree.children if isinstance(c, Token) and c.type == "DIGITS"]


def _build_spec(tree: Tree, text: str, source: str) -> SpecToken:
	fields: dict = {}
	for child in tree.children:
		name = _name(child)
		if name == "void":
			fields["base"] = BaseKind.VOID
		elif name == "scalar":
			fields.update(_build_scalar(child, text))
		elif name == "ranged":
			fields.update(_build_ranged(child, text))
		elif name == "reference":
			fields["base"] = BaseKind.REFERENCE
			fields["reference"] = _digits(child)[0]
		elif name == "index":
			fields["index"] = _digits(child)[0]
		elif name == "modifiers":
			fields["modifiers"] = "".join(tok.value for tok in child.children)
		elif name == "force_width":
			fields["force_width"] = _digits(child)[0]
		elif name == "pointer":
			pointer_tok = child.children[0]
			fields["pointer"] = pointer_tok.value
			# Pointee and bitcast targets always run to the end of the source token.
			pointee = _child(child, "pointee")
			if pointee is not None:
				sub_text = source[pointer_tok.end_pos + 1 :]
				fields["pointee"] = _build_spec(pointee.children[0], sub_text, source)
		elif name == "bitcast":
			arrow_tok, target = child.children
			fields["bitcast"] = _build_spec(target, source[arrow_tok.end_pos :], source)
		else:
			raise SpecParseError(f"unexpected grammar node `{name}`", token=text)
	return SpecToken(text=text, **fields)


def _build_scalar(tree: Tree, text: str) -> dict:
	type_class = tree.children[0].value
	width = int(tree.children[1].value)
	_check_width(width, text)
	llvm_width: Optional[int] = None
	llvm = _child(tree, "llvm_width")
	if llvm is not None:
		llvm_width = _digits(llvm)[0]
		if type_class.islower():
			raise InvalidWidthError("a narrow LLVM width only applies to scalar (uppercase) classes", token=text)
		if not llvm_width < width:
			raise InvalidWidthError(f"LLVM width {llvm_width} must be narrower than {width}", token=text)
	return {
		"base": BaseKind.ID,
		"type_class": type_class,
		"widths": WidthRange(width, width),
		"llvm_width": llvm_width,
	}


def _build_ranged(tree: Tree, text: str) -> dict:
	type_class = tree.children[0].value
	start, end = _digits(tree)
	if start > end:
		raise InvalidWidthError(f"width range ({start}-{end}) is empty", token=text)
	# Steps double from `start`, so a legal start makes every step legal.
	_check_width(start, text)
	return {
		"base": BaseKind.ID,
		"type_class": type_class,
		"widths": WidthRange(start, end),
	}


def _check_width(width: int, text: str) -> None:
	if not is_power_of_two(width):
		raise InvalidWidthError(f"bit width {width} is not a power of two", token=text)


__all__ = ["parse_spec_token"]
