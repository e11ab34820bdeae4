"""
CLI Unit Tests
Tests for distributor_cli (generate, verify, proof, config)

Commands are driven through main([...]) with files under tmp_path.
"""
import json

import pytest
from eth_utils import to_checksum_address

from distributor_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)

from fixtures.common import ALICE, BOB, CAROL, OUTSIDER, THREE_USER_BALANCES


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each CLI test from an empty directory (no stray config files)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def balances_file(workdir):
    path = workdir / "balances.json"
    path.write_text(json.dumps(THREE_USER_BALANCES))
    return path


@pytest.fixture
def artifact_file(workdir, balances_file):
    out = workdir / "proofs.json"
    assert main(["generate", str(balances_file), "--out", str(out)]) == EXIT_SUCCESS
    return out


class TestGenerate:

    def test_generate_json_summary(self, workdir, balances_file, capsys):
        out = workdir / "artifacts" / "proofs.json"
        code = main(["generate", str(balances_file), "--out", str(out), "--json"])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["success"] is True
        assert summary["claim_count"] == 3
        assert summary["token_total"] == "75"
        assert json.loads(out.read_text())["merkleRoot"] == summary["merkle_root"]

    def test_default_output_path(self, workdir, balances_file):
        assert main(["generate", str(balances_file)]) == EXIT_SUCCESS
        assert (workdir / "proofs.json").exists()

    def test_output_path_from_env(self, workdir, balances_file, monkeypatch):
        monkeypatch.setenv("DISTRIBUTOR_OUTPUT_PATH", str(workdir / "env.json"))
        assert main(["generate", str(balances_file)]) == EXIT_SUCCESS
        assert (workdir / "env.json").exists()

    def test_generate_from_csv(self, workdir, capsys):
        path = workdir / "balances.csv"
        path.write_text("address,amount\n" + "".join(f"{a},{v}\n" for a, v in THREE_USER_BALANCES.items()))
        assert main(["generate", str(path), "--out", str(workdir / "p.json")]) == EXIT_SUCCESS
        assert "token_total: 75" in capsys.readouterr().out

    def test_duplicate_identity_fails(self, workdir, capsys):
        path = workdir / "balances.csv"
        path.write_text(f"address,amount\n{ALICE},1\n{to_checksum_address(ALICE)},2\n")
        code = main(["generate", str(path), "--out", str(workdir / "p.json"), "--json"])

        assert code == EXIT_RUNTIME_ERROR
        summary = json.loads(capsys.readouterr().out)
        assert summary["error_code"] == "DUPLICATE_IDENTITY"
        assert not (workdir / "p.json").exists()

    def test_repeated_json_address_reported_once(self, workdir, capsys, caplog):
        path = workdir / "balances.json"
        path.write_text('{"%s": 10, "%s": 50}' % (ALICE, ALICE))
        code = main(["generate", str(path), "--out", str(workdir / "p.json")])

        assert code == EXIT_RUNTIME_ERROR
        err = capsys.readouterr().err
        assert err.count("more than once") == 1
        assert not [r for r in caplog.records if r.levelname == "ERROR"]
        assert not (workdir / "p.json").exists()

    def test_missing_input(self, workdir):
        assert main(["generate", str(workdir / "missing.json")]) == EXIT_RUNTIME_ERROR


class TestVerify:

    def test_valid_artifact(self, artifact_file, capsys):
        assert main(["verify", str(artifact_file), "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert {c["check_id"] for c in report["checks"]} >= {"root_matches", "proofs_valid"}

    def test_tampered_artifact(self, artifact_file, capsys):
        data = json.loads(artifact_file.read_text())
        data["claims"][to_checksum_address(BOB)]["amount"] = "0x64"
        artifact_file.write_text(json.dumps(data))

        assert main(["verify", str(artifact_file)]) == EXIT_VERIFICATION_FAILED
        assert "ok: false" in capsys.readouterr().out

    def test_missing_artifact(self, workdir):
        assert main(["verify", str(workdir / "missing.json")]) == EXIT_RUNTIME_ERROR


class TestProof:

    def test_known_claimant(self, artifact_file, capsys):
        assert main(["proof", str(artifact_file), CAROL, "--json"]) == EXIT_SUCCESS
        info = json.loads(capsys.readouterr().out)
        assert info["index"] == 2
        assert info["amount"] == "15"
        assert info["valid"] is True

    def test_unknown_claimant(self, artifact_file):
        assert main(["proof", str(artifact_file), OUTSIDER]) == EXIT_RUNTIME_ERROR

    def test_invalid_address(self, artifact_file):
        assert main(["proof", str(artifact_file), "0x1234"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:

    def test_init_and_show(self, workdir, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (workdir / "distributor.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["ledger"]["lock_stripes"] == 64

    def test_no_command(self, workdir):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_bad_config_file(self, workdir):
        assert main(["--config", str(workdir / "missing.json"), "config", "--show"]) == EXIT_RUNTIME_ERROR
