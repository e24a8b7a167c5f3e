# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

from platform_intrinsics.generator import main


def _platform_file(tmp_path: Path, ret: str = "i32") -> Path:
	path = tmp_path / "arm.json"
	path.write_text(
		json.dumps(
			{
				"platform": "arm_v",
				"width_info": {"128": {}},
				"intrinsic_prefix": "",
				"llvm_prefix": "llvm.neon.",
				"intrinsics": [{"intrinsic": "hadd", "llvm": "vhadd", "ret": ret, "args": ["0", "0"]}],
			}
		),
		encoding="utf-8",
	)
	return path


def test_writes_compiler_defs_to_stdout(tmp_path: Path, capsys) -> None:
	assert main([str(_platform_file(tmp_path))]) == 0
	out = capsys.readouterr().out
	assert out.count('"hadd" => Intrinsic {') == 2
	assert "output: &::I32x4," in out
	assert "output: &::U32x4," in out
	assert 'definition: Named("llvm.neon.vhadd")' in out


def test_extern_block_to_file(tmp_path: Path) -> None:
	out_path = tmp_path / "out.rs"
	assert main([str(_platform_file(tmp_path)), "--format", "extern-block", "-o", str(out_path)]) == 0
	text = out_path.read_text(encoding="utf-8")
	assert "    fn arm_vhadd(x: i32x4, y: i32x4) -> i32x4;" in text


def test_wrap_with_jobs(tmp_path: Path, capsys) -> None:
	assert main([str(_platform_file(tmp_path)), "--wrap", "-j", "2"]) == 0
	assert 'if !name.starts_with("arm_v")' in capsys.readouterr().out


def test_bad_token_is_a_config_diagnostic(tmp_path: Path, capsys) -> None:
	assert main([str(_platform_file(tmp_path, ret="i24"))]) == 1
	err = capsys.readouterr().err
	assert err.startswith("error[E-SPEC-WIDTH]:")
	assert "  --> spec `i24`" in err
	assert "  = intrinsic: hadd" in err


def test_expansion_failure_as_json(tmp_path: Path, capsys) -> None:
	assert main([str(_platform_file(tmp_path, ret="s8->i16")), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	[diag] = payload["diagnostics"]
	assert diag["phase"] == "expand"
	assert diag["code"] == "E-SPEC-AMBIGUOUS"
	assert diag["context"]["width"] == "128"


def test_missing_input(tmp_path: Path, capsys) -> None:
	assert main([str(tmp_path / "missing.json")]) == 1
	assert "error[E-CONFIG]:" in capsys.readouterr().err


def test_width_underflow_is_a_diagnostic(tmp_path: Path, capsys) -> None:
	assert main([str(_platform_file(tmp_path, ret="I8nnnnv")), "--json"]) == 1
	[diag] = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["code"] == "E-SPEC-WIDTH"
	assert diag["token"] == "I8nnnnv"
	assert diag["notes"] == ["while resolving slot 0 (`I8nnnnv`)"]
