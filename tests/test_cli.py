"""CLI tests using click's CliRunner."""
from __future__ import annotations

import json

from click.testing import CliRunner

from claimproof.backends.snarkjs import SnarkjsError
from claimproof.cli import main
from claimproof.cli.exit_codes import (
    EXIT_ARTIFACT,
    EXIT_MALFORMED,
    EXIT_PROOF_INVALID,
    EXIT_PROVER_FAILED,
    EXIT_VERIFIER_FAILED,
)
from claimproof.codec import convert_proof
from claimproof.orchestrator import ClaimProof, ProofOrchestrator

from conftest import FakeProver, FakeVerifier, FIXTURES


def _patch_orchestrator(monkeypatch, orchestrator):
    monkeypatch.setattr(
        "claimproof.cli.proof_cmd.build_orchestrator",
        lambda config: orchestrator,
    )


def test_evaluate_true():
    result = CliRunner().invoke(main, ["evaluate", "5", "adjacent", "2"])
    assert result.exit_code == 0
    assert result.output.strip() == "true"


def test_evaluate_false_with_exit_code():
    result = CliRunner().invoke(main, ["evaluate", "5", "adjacent", "1", "--exit-code"])
    assert result.exit_code == 1
    assert "false" in result.output


def test_evaluate_invalid_position():
    result = CliRunner().invoke(main, ["evaluate", "10", "row", "0"])
    assert result.exit_code == EXIT_MALFORMED
    assert "between 1 and 9" in result.output


def test_evaluate_rejects_unknown_claim_type():
    result = CliRunner().invoke(main, ["evaluate", "5", "diagonal", "1"])
    assert result.exit_code != 0


def test_grid_json():
    result = CliRunner().invoke(main, ["grid", "--json"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert len(rows) == 9 * 15
    center_row_1 = [r for r in rows if r["position"] == 5 and r["claimType"] == "row" and r["claimValue"] == 1]
    assert center_row_1[0]["isTrue"] is True


def test_grid_table():
    result = CliRunner().invoke(main, ["grid"])
    assert result.exit_code == 0
    assert "Claim truth table" in result.output


def test_convert_bare_proof():
    result = CliRunner().invoke(main, ["convert", str(FIXTURES / "proof.json")])
    assert result.exit_code == 0
    data = json.loads(result.output)
    proof = json.loads((FIXTURES / "proof.json").read_text())
    assert data == convert_proof(proof).to_dict()


def test_convert_submission(tmp_path, native_proof, public_signals):
    claim = ClaimProof(proof=native_proof, public_signals=tuple(public_signals), is_true=True)
    path = tmp_path / "claim.json"
    path.write_text(json.dumps(claim.to_dict()))

    result = CliRunner().invoke(main, ["convert", str(path), "--claim-type", "adjacent", "--claim-value", "2"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["claim_type"] == 2
    assert data["expected_result"] is True
    assert len(data["public_inputs"]) == len(public_signals)


def test_convert_malformed(tmp_path):
    path = tmp_path / "proof.json"
    path.write_text(json.dumps({"pi_a": ["1"]}))
    result = CliRunner().invoke(main, ["convert", str(path)])
    assert result.exit_code == EXIT_MALFORMED


def test_prove_writes_output(monkeypatch, tmp_path, native_proof, counting_cache):
    orchestrator = ProofOrchestrator(FakeProver(native_proof), FakeVerifier(), counting_cache[0])
    _patch_orchestrator(monkeypatch, orchestrator)
    out = tmp_path / "claim.json"

    result = CliRunner().invoke(main, ["prove", "5", "row", "1", "-o", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert data["isTrue"] is True
    assert data["proof"] == native_proof.to_dict()
    assert "Claim is true" in result.output


def test_prove_failure_is_distinct_from_false_claim(monkeypatch, native_proof, counting_cache):
    prover = FakeProver(native_proof, error=RuntimeError("Assert Failed"))
    _patch_orchestrator(monkeypatch, ProofOrchestrator(prover, FakeVerifier(), counting_cache[0]))
    result = CliRunner().invoke(main, ["prove", "5", "row", "1"])
    assert result.exit_code == EXIT_PROVER_FAILED
    assert "retryable" in result.output


def test_verify_ok(monkeypatch, tmp_path, native_proof, public_signals, counting_cache):
    _patch_orchestrator(monkeypatch, ProofOrchestrator(FakeProver(native_proof), FakeVerifier(), counting_cache[0]))
    result = CliRunner().invoke(
        main,
        ["verify", str(FIXTURES / "proof.json"), "--public", str(FIXTURES / "public.json")],
    )
    assert result.exit_code == 0
    assert "OK" in result.output


def test_verify_missing_key(monkeypatch, tmp_path):
    monkeypatch.setenv("CLAIMPROOF_VKEY_URI", str(tmp_path / "missing_vk.json"))
    result = CliRunner().invoke(main, ["verify", str(FIXTURES / "proof.json")])
    assert result.exit_code == EXIT_ARTIFACT


def test_verify_rejected_proof(monkeypatch, native_proof, counting_cache):
    _patch_orchestrator(monkeypatch, ProofOrchestrator(FakeProver(native_proof), FakeVerifier(result=False), counting_cache[0]))
    result = CliRunner().invoke(main, ["verify", str(FIXTURES / "proof.json")])
    assert result.exit_code == EXIT_PROOF_INVALID
    assert "INVALID" in result.output


def test_verify_tool_failure_is_not_invalid(monkeypatch, native_proof, counting_cache):
    error = SnarkjsError(["groth16", "verify"], 99, "Error: ENOENT verification_key.json")
    verifier = FakeVerifier(error=error)
    _patch_orchestrator(monkeypatch, ProofOrchestrator(FakeProver(native_proof), verifier, counting_cache[0]))
    result = CliRunner().invoke(main, ["verify", str(FIXTURES / "proof.json")])
    assert result.exit_code == EXIT_VERIFIER_FAILED
    assert "INVALID" not in result.output
    assert "ENOENT" in result.output


def test_verify_malformed_public_file(monkeypatch, tmp_path, native_proof, counting_cache):
    _patch_orchestrator(monkeypatch, ProofOrchestrator(FakeProver(native_proof), FakeVerifier(), counting_cache[0]))
    public = tmp_path / "public.json"
    public.write_text("[\"1\", ")
    result = CliRunner().invoke(main, ["verify", str(FIXTURES / "proof.json"), "--public", str(public)])
    assert result.exit_code == EXIT_MALFORMED
    assert "cannot read" in result.output


def test_verify_public_file_must_be_a_list(tmp_path):
    public = tmp_path / "public.json"
    public.write_text(json.dumps({"signals": ["1"]}))
    result = CliRunner().invoke(main, ["verify", str(FIXTURES / "proof.json"), "--public", str(public)])
    assert result.exit_code == EXIT_MALFORMED
