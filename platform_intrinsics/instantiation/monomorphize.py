# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Monomorphization: every (set, template, platform width) triple expands into the
cartesian product of its slot enumerations.

Slots are resolved left to right, return type first. Each slot is enumerated
with the tuple of types already chosen for the earlier slots (`processed`),
which is what back-references index into. `processed` is never mutated; every
branch extends its own copy.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from platform_intrinsics.config import IntrinsicData, IntrinsicSet, Platform, iter_templates
from platform_intrinsics.core.errors import EmptyEnumerationError, IntrinsicGenError, InvalidWidthError, is_power_of_two
from platform_intrinsics.core.types import Type

from .slots import TypeSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonomorphicIntrinsic:
	"""One concrete intrinsic signature."""

	name: str
	platform_prefix: str
	llvm_name: str
	ret: Type
	args: Tuple[Type, ...]
	width: int

	@property
	def arg_count(self) -> int:
		return len(self.args)


def check_width(width: int) -> None:
	if not is_power_of_two(width):
		raise InvalidWidthError(f"platform width {width} is not a positive power of two")


def resolve_slots(slots: Sequence[TypeSpec], width: int, processed: Tuple[Type, ...] = ()) -> List[Tuple[Type, ...]]:
	"""
	Every full slot assignment reachable from `processed`.

	Each result has one type per slot; position 0 is the return type.
	"""
	if not slots:
		return [processed]
	head, rest = slots[0], slots[1:]
	try:
		choices = head.enumerate(width, processed)
	except IntrinsicGenError as err:
		raise err.note(f"while resolving slot {len(processed)} (`{head}`)")
	if not choices:
		raise EmptyEnumerationError(f"slot {len(processed)} denotes no types", token=str(head))
	out: List[Tuple[Type, ...]] = []
	for choice in choices:
		out.extend(resolve_slots(rest, width, processed + (choice,)))
	return out


def monomorphize_template(
	platform: Platform,
	iset: IntrinsicSet,
	template: IntrinsicData,
	width: int,
) -> List[MonomorphicIntrinsic]:
	"""Expand one template at one platform width."""
	name = iset.intrinsic_prefix + template.name
	try:
		check_width(width)
		assignments = resolve_slots(template.slots(), width)
	except IntrinsicGenError as err:
		raise err.with_context(platform=platform.platform_prefix, intrinsic=name, width=width)
	llvm_name = iset.llvm_name(template)
	result = [
		MonomorphicIntrinsic(
			name=name,
			platform_prefix=platform.platform_prefix,
			llvm_name=llvm_name,
			ret=types[0],
			args=types[1:],
			width=width,
		)
		for types in assignments
	]
	logger.debug("%s @ %d: %d instantiations", name, width, len(result))
	return result


def monomorphize(platform: Platform, *, jobs: int = 1) -> List[MonomorphicIntrinsic]:
	"""
	Expand every template of every set at every platform width.

	Order is set, template, width, then slot cartesian order. With `jobs > 1`
	the triples are expanded on a thread pool; results are still concatenated
	in that order.
	"""
	# Fail on bad widths before anything is enumerated.
	for width in platform.widths:
		try:
			check_width(width)
		except InvalidWidthError as err:
			raise err.with_context(platform=platform.platform_prefix)

	triples = [(iset, template, width) for iset, template in iter_templates(platform) for width in platform.widths]
	if jobs <= 1:
		chunks = [monomorphize_template(platform, iset, template, width) for iset, template, width in triples]
	else:
		with ThreadPoolExecutor(max_workers=jobs) as pool:
			chunks = list(pool.map(lambda t: monomorphize_template(platform, *t), triples))

	result = [mono for chunk in chunks for mono in chunk]
	logger.debug("platform %s: %d intrinsic instantiations", platform.platform_prefix or platform.file_stem, len(result))
	return result


__all__ = ["MonomorphicIntrinsic", "check_width", "resolve_slots", "monomorphize_template", "monomorphize"]
