from __future__ import annotations

import json
import pathlib

import pytest
from cachet import cli as cli_mod
from cachet.signers import FileSigner
from cachet.utils import b64u_encode

ROOT_SEED = b64u_encode(b"\x00" * 32)
LEAF_SEED = b64u_encode(b"\x01" * 32)


def _setup(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> dict[str, pathlib.Path]:
    paths = {
        "roots": tmp_path / "roots.json",
        "chain": tmp_path / "chain.bin",
        "data": tmp_path / "payload.bin",
        "cachet": tmp_path / "payload.cachet",
    }
    assert cli_mod.main(["jwks", "--seed", ROOT_SEED]) == 0
    paths["roots"].write_text(capsys.readouterr().out)
    rc = cli_mod.main(
        [
            "issue-chain",
            "--root-seed",
            ROOT_SEED,
            "--seed",
            LEAF_SEED,
            "--out",
            str(paths["chain"]),
        ]
    )
    assert rc == 0
    paths["data"].write_bytes(b"test data")
    rc = cli_mod.main(
        [
            "sign",
            "--seed",
            LEAF_SEED,
            "--chain",
            str(paths["chain"]),
            "--roots",
            str(paths["roots"]),
            "--data",
            str(paths["data"]),
            "--out",
            str(paths["cachet"]),
        ]
    )
    assert rc == 0
    return paths


def test_cli_keygen(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["keygen"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert FileSigner(out["seed"]).public_jwk() == out["jwk"]


def test_cli_sign_and_verify(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
    paths = _setup(tmp_path, capsys)
    data_out = tmp_path / "verified.bin"
    rc = cli_mod.main(
        [
            "verify",
            "--cachet",
            str(paths["cachet"]),
            "--roots",
            str(paths["roots"]),
            "--data-out",
            str(data_out),
            "--json",
        ]
    )
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is True
    assert out["root_kid"] == FileSigner(ROOT_SEED).kid
    assert out["leaf_kid"] == FileSigner(LEAF_SEED).kid
    assert data_out.read_bytes() == b"test data"


def test_cli_verify_rejects_tampered(
    tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
) -> None:
    paths = _setup(tmp_path, capsys)
    blob = bytearray(paths["cachet"].read_bytes())
    blob[-1] ^= 0x01
    paths["cachet"].write_bytes(bytes(blob))
    rc = cli_mod.main(
        ["verify", "--cachet", str(paths["cachet"]), "--roots", str(paths["roots"]), "--json"]
    )
    assert rc == 1
    assert json.loads(capsys.readouterr().out) == {"ok": False, "reason": "signature_invalid"}


def test_cli_verify_plain_output(
    tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
) -> None:
    paths = _setup(tmp_path, capsys)
    other_roots = tmp_path / "other.json"
    assert cli_mod.main(["jwks", "--seed", LEAF_SEED]) == 0
    other_roots.write_text(capsys.readouterr().out)
    rc = cli_mod.main(["verify", "--cachet", str(paths["cachet"]), "--roots", str(other_roots)])
    assert rc == 1
    assert "untrusted_root" in capsys.readouterr().err


def test_cli_sign_with_wrong_seed(
    tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
) -> None:
    paths = _setup(tmp_path, capsys)
    with pytest.raises(ValueError):
        cli_mod.main(
            [
                "sign",
                "--seed",
                ROOT_SEED,
                "--chain",
                str(paths["chain"]),
                "--roots",
                str(paths["roots"]),
                "--data",
                str(paths["data"]),
                "--out",
                str(tmp_path / "x.cachet"),
            ]
        )
