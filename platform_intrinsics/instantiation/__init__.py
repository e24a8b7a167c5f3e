# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Slot enumeration and monomorphization."""

from .slots import TypeSpec, enumerate_spec, enumerate_token, ptrify

__all__ = [
	"TypeSpec",
	"enumerate_spec",
	"enumerate_token",
	"ptrify",
]
