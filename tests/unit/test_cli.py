"""
CLI Unit Tests
Tests for reviewproof_cli/main.py and its commands

Each test drives main(argv) end to end against a temporary dataset and
root log, and checks exit codes and JSON output.
"""
import json

import pytest

from reviewproof_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

from fixtures.common import make_raw_review, write_jsonl


@pytest.fixture
def cli_env(tmp_path, monkeypatch, root_log):
    """Run from an empty directory with the root log under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REVIEWPROOF_ROOT_LOG", str(root_log))
    return tmp_path


def run_json(capsys, argv):
    code = main(argv)
    out = capsys.readouterr().out
    return code, json.loads(out) if out.strip() else None


class TestParser:
    """Argument parsing."""

    def test_no_command(self, capsys):
        """No subcommand prints help and fails."""
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_tamper_requires_mode(self):
        """tamper without --mode is a usage error."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["tamper", "data.jsonl"])

    def test_roots_subcommands_dispatch(self):
        """roots subcommands bind their handlers."""
        args = create_parser().parse_args(["roots", "list"])
        assert args.func.__name__ == "roots_list_cmd"


class TestBuild:
    """build command."""

    def test_build_json(self, cli_env, dataset_file, capsys):
        """build reports the root and leaf count."""
        code, data = run_json(capsys, ["build", str(dataset_file), "--json"])
        assert code == EXIT_SUCCESS
        assert data["leaf_count"] == 5
        assert data["height"] == 3
        assert len(data["root_hash"]) == 64
        assert data["stored"] is False

    def test_build_store(self, cli_env, dataset_file, root_log, capsys):
        """--store appends to the root log."""
        code, data = run_json(
            capsys, ["build", str(dataset_file), "--label", "books", "--store", "--json"]
        )
        assert code == EXIT_SUCCESS
        assert root_log.read_text().startswith(f"books|{data['root_hash']}|")

    def test_store_requires_label(self, cli_env, dataset_file, capsys):
        """--store without --label is an error."""
        assert main(["build", str(dataset_file), "--store"]) == EXIT_RUNTIME_ERROR
        assert "label" in capsys.readouterr().err

    def test_missing_dataset(self, cli_env, capsys):
        """A missing dataset file is a runtime error."""
        assert main(["build", "absent.jsonl"]) == EXIT_RUNTIME_ERROR

    def test_dataset_from_env(self, cli_env, dataset_file, monkeypatch, capsys):
        """REVIEWPROOF_DATASET supplies the default dataset."""
        monkeypatch.setenv("REVIEWPROOF_DATASET", str(dataset_file))
        code, data = run_json(capsys, ["build", "--json"])
        assert code == EXIT_SUCCESS
        assert data["leaf_count"] == 5


class TestProve:
    """prove command."""

    def test_prove_review(self, cli_env, dataset_file, capsys):
        """A known review proves and verifies."""
        code, data = run_json(
            capsys, ["prove", str(dataset_file), "--review-id", "A2_P2_1000001", "--json"]
        )
        assert code == EXIT_SUCCESS
        assert data["verified"] == 1
        assert data["proofs"][0]["status"] == "PROOF_GENERATED"

    def test_prove_product(self, cli_env, dataset_file, capsys):
        """Every review of a product is proven."""
        code, data = run_json(capsys, ["prove", str(dataset_file), "--product", "P1", "--json"])
        assert code == EXIT_SUCCESS
        assert data["requested"] == 3

    def test_unknown_review(self, cli_env, dataset_file, capsys):
        """An unknown review exits with a runtime error."""
        code, data = run_json(
            capsys, ["prove", str(dataset_file), "--review-id", "nobody", "--json"]
        )
        assert code == EXIT_RUNTIME_ERROR
        assert data["not_found"] == ["nobody"]

    def test_needs_target(self, cli_env, dataset_file):
        """prove without a review or product is an error."""
        assert main(["prove", str(dataset_file)]) == EXIT_RUNTIME_ERROR


class TestAdd:
    """add command."""

    def test_add_records(self, cli_env, dataset_file, capsys):
        """New reviews are inserted and verified; duplicates are rejected."""
        records = write_jsonl(
            cli_env / "new.jsonl",
            [make_raw_review("N1", "P1", 2000000), make_raw_review("A1", "P1", 1000000)],
        )
        code, data = run_json(
            capsys, ["add", str(dataset_file), "--records", str(records), "--json"]
        )
        assert code == EXIT_SUCCESS
        assert data["added"] == ["N1_P1_2000000"]
        assert data["rejected"] == ["A1_P1_1000000"]
        assert data["new_leaves"] == 6
        assert data["new_root"] != data["original_root"]


class TestRoots:
    """roots store / check / list."""

    def test_store_then_check(self, cli_env, dataset_file, capsys):
        """An unchanged dataset checks as verified."""
        assert main(["roots", "store", str(dataset_file), "--label", "books"]) == EXIT_SUCCESS
        capsys.readouterr()
        code, data = run_json(
            capsys, ["roots", "check", str(dataset_file), "--label", "books", "--json"]
        )
        assert code == EXIT_SUCCESS
        assert data["status"] == "INTEGRITY_VERIFIED"
        assert data["update"] == "NO_UPDATES"

    def test_check_detects_change(self, cli_env, dataset_file, capsys):
        """A changed dataset exits with the verification-failed code."""
        main(["roots", "store", str(dataset_file), "--label", "books"])
        with open(dataset_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(make_raw_review("Z9", "P9", 3000000)) + "\n")
        capsys.readouterr()
        code, data = run_json(
            capsys, ["roots", "check", str(dataset_file), "--label", "books", "--json"]
        )
        assert code == EXIT_VERIFICATION_FAILED
        assert data["status"] == "INTEGRITY_VIOLATED"
        assert data["update"] == "UPDATE_DETECTED"

    def test_check_unknown_label(self, cli_env, dataset_file, capsys):
        """A label without a stored root is a runtime error."""
        code, data = run_json(
            capsys, ["roots", "check", str(dataset_file), "--label", "nothing", "--json"]
        )
        assert code == EXIT_RUNTIME_ERROR
        assert data["status"] == "NOT_FOUND"

    def test_list(self, cli_env, dataset_file, capsys):
        """list shows the latest root per label."""
        main(["roots", "store", str(dataset_file), "--label", "b"])
        main(["roots", "store", str(dataset_file), "--label", "a"])
        capsys.readouterr()
        code, data = run_json(capsys, ["roots", "list", "--json"])
        assert code == EXIT_SUCCESS
        assert [entry["label"] for entry in data] == ["a", "b"]

    def test_list_without_log(self, cli_env, capsys):
        """An absent log lists nothing."""
        code, data = run_json(capsys, ["roots", "list", "--json"])
        assert code == EXIT_SUCCESS
        assert data == []


class TestTamper:
    """tamper command."""

    @pytest.mark.parametrize(
        "mode,classification",
        [("modify", "modification"), ("delete", "deletion"), ("inject", "insertion")],
    )
    def test_modes(self, cli_env, dataset_file, capsys, mode, classification):
        """Each simulation is detected and classified."""
        code, data = run_json(
            capsys,
            ["tamper", str(dataset_file), "--mode", mode, "--count", "1", "--seed", "1", "--json"],
        )
        assert code == EXIT_SUCCESS
        assert data["classification"] == classification
        assert data["root_comparison"]["tampering_detected"] is True

    def test_rerate(self, cli_env, dataset_file, capsys):
        """Rating manipulation is caught per record."""
        code, data = run_json(
            capsys,
            ["tamper", str(dataset_file), "--mode", "rerate", "--seed", "2", "--records", "--json"],
        )
        assert code == EXIT_SUCCESS
        assert data["tampered_count"] == 1
        assert data["record_results"][0]["status"] == "MODIFIED_RECORD_DETECTED"

    def test_delete_all_rejected(self, cli_env, dataset_file):
        """Deleting every review is an input error."""
        assert main(["tamper", str(dataset_file), "--mode", "delete", "--count", "5"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """config command."""

    def test_init_and_refuse_overwrite(self, cli_env, capsys):
        """--init writes a template once."""
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (cli_env / "reviewproof.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show(self, cli_env, root_log, capsys):
        """--show prints the effective configuration."""
        code, data = run_json(capsys, ["config", "--show"])
        assert code == EXIT_SUCCESS
        assert data["storage"]["root_log_path"] == str(root_log)
