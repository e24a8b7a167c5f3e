# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Platform configuration: the in-memory object graph the generator expands, and
a JSON loader for it.

A JSON file carries a platform header, one intrinsic set, or both:

{
  "platform": "arm_v",
  "width_info": { "64": {...}, "128": {...} },   // keys are the platform widths
  "number_info": {...},                          // ignored
  "intrinsic_prefix": "v",
  "llvm_prefix": "llvm.neon.v",
  "intrinsics": [
    { "intrinsic": "hadd", "width": ["64", "128"], "llvm": "vhadds.v8i8",
      "ret": "i(8-32)", "args": ["0", "0"] }
  ]
}

`ret` and each entry of `args` may be one token or a list of tokens. A
directory is loaded by merging its `*.json` files in name order: the last
header wins and intrinsic sets are appended.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from platform_intrinsics.core.errors import ConfigError, IntrinsicGenError
from platform_intrinsics.instantiation.slots import TypeSpec

logger = logging.getLogger(__name__)

VERBATIM_MARKER = "!"


@dataclass(frozen=True)
class IntrinsicData:
	"""One polymorphic intrinsic template."""

	name: str
	llvm: str
	ret: TypeSpec
	args: Tuple[TypeSpec, ...] = ()
	# Parsed but not consulted: expansion iterates the platform widths.
	widths: Tuple[str, ...] = ()

	@property
	def is_verbatim(self) -> bool:
		return self.llvm.startswith(VERBATIM_MARKER)

	def slots(self) -> Tuple[TypeSpec, ...]:
		"""Signature slots in reference order: return type first."""
		return (self.ret, *self.args)


@dataclass(frozen=True)
class IntrinsicSet:
	intrinsic_prefix: str = ""
	llvm_prefix: str = ""
	intrinsics: Tuple[IntrinsicData, ...] = ()

	def llvm_name(self, template: IntrinsicData) -> str:
		if template.is_verbatim:
			return template.llvm[len(VERBATIM_MARKER) :]
		# The whole pattern is kept; no leading character is stripped before prefixing.
		return self.llvm_prefix + template.llvm


@dataclass(frozen=True)
class PlatformInfo:
	name: str
	widths: Tuple[int, ...] = ()


@dataclass
class Platform:
	info: Optional[PlatformInfo] = None
	sets: List[IntrinsicSet] = field(default_factory=list)
	file_stem: str = ""

	@property
	def platform_prefix(self) -> str:
		return self.info.name if self.info is not None else ""

	@property
	def widths(self) -> Tuple[int, ...]:
		return self.info.widths if self.info is not None else ()

	def merge(self, other: "Platform") -> None:
		if other.info is not None:
			self.info = other.info
		self.sets.extend(other.sets)

	def validate(self) -> None:
		"""Parse every spec token so grammar errors surface at load time."""
		for iset, template in iter_templates(self):
			for slot in template.slots():
				try:
					slot.parse()
				except IntrinsicGenError as err:
					raise err.with_context(platform=self.platform_prefix, intrinsic=iset.intrinsic_prefix + template.name)


def _tokens(raw: Any, *, what: str) -> Tuple[str, ...]:
	if isinstance(raw, str):
		return (raw,)
	if isinstance(raw, list) and all(isinstance(t, str) for t in raw):
		return tuple(raw)
	raise ConfigError(f"{what} must be a string or a list of strings")


def intrinsic_from_json(obj: Any) -> IntrinsicData:
	if not isinstance(obj, dict):
		raise ConfigError("intrinsic entry must be a JSON object")
	name = obj.get("intrinsic")
	llvm = obj.get("llvm")
	if not isinstance(name, str) or not isinstance(llvm, str):
		raise ConfigError("intrinsic entry needs string `intrinsic` and `llvm` fields")
	ret = TypeSpec.from_list(_tokens(obj.get("ret", []), what=f"`ret` of {name}"))
	raw_args = obj.get("args", [])
	if not isinstance(raw_args, list):
		raise ConfigError(f"`args` of {name} must be a list")
	args = tuple(TypeSpec.from_list(_tokens(a, what=f"argument of {name}")) for a in raw_args)
	widths = tuple(str(w) for w in _as_list(obj.get("width", [])))
	return IntrinsicData(name=name, llvm=llvm, ret=ret, args=args, widths=widths)


def _as_list(raw: Any) -> list:
	return raw if isinstance(raw, list) else [raw]


def platform_info_from_json(obj: Mapping[str, Any]) -> Optional[PlatformInfo]:
	name = obj.get("platform")
	if name is None:
		return None
	if not isinstance(name, str):
		raise ConfigError("`platform` must be a string")
	width_info = obj.get("width_info") or {}
	if not isinstance(width_info, dict):
		raise ConfigError("`width_info` must be a JSON object keyed by width")
	try:
		widths = tuple(int(w) for w in width_info)
	except ValueError as err:
		raise ConfigError(f"`width_info` keys must be integers: {err}") from err
	return PlatformInfo(name=name, widths=widths)


def platform_from_json(obj: Any, *, file_stem: str = "") -> Platform:
	if not isinstance(obj, dict):
		raise ConfigError("platform file must be a JSON object")
	platform = Platform(info=platform_info_from_json(obj), file_stem=file_stem)
	if "intrinsics" in obj:
		raw = obj["intrinsics"]
		if not isinstance(raw, list):
			raise ConfigError("`intrinsics` must be a list")
		platform.sets.append(
			IntrinsicSet(
				intrinsic_prefix=str(obj.get("intrinsic_prefix") or ""),
				llvm_prefix=str(obj.get("llvm_prefix") or ""),
				intrinsics=tuple(intrinsic_from_json(item) for item in raw),
			)
		)
	return platform


def _read_json(path: Path) -> Any:
	try:
		return json.loads(path.read_text(encoding="utf-8"))
	except json.JSONDecodeError as err:
		raise ConfigError(f"{path}: invalid JSON: {err}") from err


def load_file(path: Path, *, info: Optional[Mapping[str, Any]] = None) -> Platform:
	"""Load one JSON file; an `info` header, if given, overrides the file's keys."""
	logger.debug("parsing platform file %s", path)
	obj = _read_json(path)
	if info is not None:
		if not isinstance(obj, dict):
			raise ConfigError(f"{path}: platform file must be a JSON object")
		obj = {**obj, **info}
	try:
		return platform_from_json(obj, file_stem=path.stem)
	except ConfigError as err:
		raise err.with_context(file=str(path))


def load_dir(path: Path, *, info: Optional[Mapping[str, Any]] = None) -> Platform:
	logger.debug("parsing platform directory %s", path)
	result = Platform(file_stem=path.name)
	for entry in sorted(path.glob("*.json")):
		result.merge(load_file(entry, info=info))
	return result


def load_platform(paths: Sequence[Path] | Path, *, info_path: Optional[Path] = None) -> Platform:
	"""
	Load a platform from files and/or directories.

	Several inputs are merged in order. `info_path` names a header file whose
	keys are merged into every input (for platforms split into one file per
	instruction set).
	"""
	if isinstance(paths, Path):
		paths = [paths]
	info: Optional[Mapping[str, Any]] = None
	if info_path is not None:
		raw_info = _read_json(info_path)
		if not isinstance(raw_info, dict):
			raise ConfigError(f"{info_path}: info header must be a JSON object")
		info = raw_info
	result: Optional[Platform] = None
	for path in paths:
		loaded = load_dir(path, info=info) if path.is_dir() else load_file(path, info=info)
		if result is None:
			result = loaded
		else:
			result.merge(loaded)
	if result is None:
		raise ConfigError("no platform inputs given")
	return result


def iter_templates(platform: Platform) -> Iterable[Tuple[IntrinsicSet, IntrinsicData]]:
	for iset in platform.sets:
		for template in iset.intrinsics:
			yield iset, template


__all__ = [
	"IntrinsicData",
	"IntrinsicSet",
	"PlatformInfo",
	"Platform",
	"intrinsic_from_json",
	"platform_info_from_json",
	"platform_from_json",
	"load_file",
	"load_dir",
	"load_platform",
	"iter_templates",
]
