"""
Unit tests for CLI commands.

Tests cover:
- compile command (write, check, jsonl, errors)
- fmt command
- scenarios command
"""

import json
import os

from typer.testing import CliRunner

from scenariotree.cli.app import app

runner = CliRunner()

SINGLE_CHILD_TREE = "Vault\n└── when a\n    └── given b\n        └── it should x\n"


def _json_lines(output: str):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestCompileCommand:
    """Tests for compile command."""

    def test_compile_writes_scaffold(self, tmp_path, hash_pair_file, monkeypatch):
        """Compile writes test_<stem>.py beside the tree."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["compile", "hash_pair.tree"])

        assert result.exit_code == 0
        assert "written" in result.stdout
        assert (tmp_path / "test_hash_pair.py").exists()

    def test_compile_directory(self, tmp_path, write_tree, monkeypatch):
        """Directories expand into their .tree files."""
        monkeypatch.chdir(tmp_path)
        write_tree("Vault\n└── when a\n    └── it should x\n", "specs/vault.tree")
        write_tree("Other\n└── when b\n    └── it should y\n", "specs/nested/other.tree")

        result = runner.invoke(app, ["compile", "specs"])

        assert result.exit_code == 0
        assert (tmp_path / "specs" / "test_vault.py").exists()
        assert (tmp_path / "specs" / "nested" / "test_other.py").exists()

    def test_compile_out_option(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["compile", "hash_pair.tree", "--out", "generated/test_pair.py"])

        assert result.exit_code == 0
        assert (tmp_path / "generated" / "test_pair.py").exists()

    def test_compile_uses_config_output_dir(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "scenariotree.yaml").write_text("scenariotree:\n  output_dir: generated\n", encoding="utf-8")

        result = runner.invoke(app, ["compile", "hash_pair.tree"])

        assert result.exit_code == 0
        assert (tmp_path / "generated" / "test_hash_pair.py").exists()

    def test_compile_invalid_tree(self, tmp_path, write_tree, monkeypatch):
        """Structural errors fail the run and write nothing."""
        monkeypatch.chdir(tmp_path)
        tree_path = write_tree(SINGLE_CHILD_TREE, "vault.tree")

        result = runner.invoke(app, ["compile", tree_path])

        assert result.exit_code == 1
        assert "SingleChildBranchError" in result.stdout
        assert not (tmp_path / "test_vault.py").exists()

    def test_compile_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["compile", "missing.tree"])

        assert result.exit_code == 1
        assert "Tree file not found" in result.stdout

    def test_compile_unknown_format(self, hash_pair_file):
        result = runner.invoke(app, ["compile", hash_pair_file, "--format", "xml"])

        assert result.exit_code == 2
        assert "Supported formats" in result.stdout

    def test_out_with_many_trees(self, tmp_path, hash_pair_file, write_tree, monkeypatch):
        monkeypatch.chdir(tmp_path)
        other = write_tree("Other\n└── when b\n    └── it should y\n", "other.tree")

        result = runner.invoke(app, ["compile", "hash_pair.tree", other, "--out", "x.py"])

        assert result.exit_code == 2

    def test_trees_sharing_output_path(self, tmp_path, write_tree, monkeypatch):
        """Two trees that would write the same scaffold stop the run before anything is written."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "scenariotree.yaml").write_text("scenariotree:\n  output_dir: gen\n", encoding="utf-8")
        write_tree("Vault\n└── when x\n    └── it should p\n", "a/vault.tree")
        write_tree("Vault\n└── when y\n    └── it should q\n", "b/vault.tree")

        result = runner.invoke(app, ["compile", "a", "b", "--jobs", "2"])

        assert result.exit_code == 2
        assert "Output path clash" in result.stdout
        assert os.path.join("a", "vault.tree") in result.stdout
        assert os.path.join("b", "vault.tree") in result.stdout
        assert not (tmp_path / "gen" / "test_vault.py").exists()


class TestCompileCheck:
    """Tests for compile --check."""

    def test_check_reports_missing_scaffold(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["compile", "--check", "hash_pair.tree"])

        assert result.exit_code == 1
        assert "drift" in result.stdout
        assert not (tmp_path / "test_hash_pair.py").exists()

    def test_check_passes_after_compile(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner.invoke(app, ["compile", "hash_pair.tree"])

        result = runner.invoke(app, ["compile", "--check", "hash_pair.tree"])

        assert result.exit_code == 0
        assert "up to date" in result.stdout

    def test_check_flags_non_canonical_tree(self, tmp_path, write_tree, monkeypatch):
        monkeypatch.chdir(tmp_path)
        tree_path = write_tree("Vault\n  when a\n    it should x\n", "vault.tree")
        runner.invoke(app, ["compile", tree_path])

        result = runner.invoke(app, ["compile", "--check", tree_path])

        assert result.exit_code == 1
        assert "run fmt" in result.stdout


class TestCompileJsonl:
    """Tests for compile --format jsonl."""

    def test_first_compile_records(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["compile", "hash_pair.tree", "--format", "jsonl"])

        records = _json_lines(result.stdout)
        assert result.exit_code == 0
        assert len(records) == 5
        assert {record["kind"] for record in records} == {"added"}
        assert all(record["unit"] == "HashPairTest" for record in records)

    def test_error_record(self, tmp_path, write_tree, monkeypatch):
        monkeypatch.chdir(tmp_path)
        tree_path = write_tree(SINGLE_CHILD_TREE, "vault.tree")

        result = runner.invoke(app, ["compile", tree_path, "--format", "jsonl"])

        records = _json_lines(result.stdout)
        assert result.exit_code == 1
        assert records[0]["kind"] == "error"
        assert records[0]["error_type"] == "SingleChildBranchError"


class TestFmtCommand:
    """Tests for fmt command."""

    def test_fmt_rewrites(self, write_tree):
        tree_path = write_tree("Vault\n  when a\n    it should x\n", "vault.tree")

        result = runner.invoke(app, ["fmt", tree_path])

        assert result.exit_code == 0
        assert "1 file(s) reformatted" in result.stdout
        with open(tree_path, encoding="utf-8") as f:
            assert f.read() == "Vault\n└── when a\n    └── it should x\n"

    def test_fmt_check(self, write_tree):
        tree_path = write_tree("Vault\n  when a\n    it should x\n", "vault.tree")

        result = runner.invoke(app, ["fmt", "--check", tree_path])

        assert result.exit_code == 1
        assert "Would reformat" in result.stdout

    def test_fmt_check_canonical(self, hash_pair_file):
        result = runner.invoke(app, ["fmt", "--check", hash_pair_file])

        assert result.exit_code == 0
        assert "0 of 1" in result.stdout

    def test_fmt_malformed(self, write_tree):
        tree_path = write_tree("Vault\n└── should revert\n", "vault.tree")

        result = runner.invoke(app, ["fmt", tree_path])

        assert result.exit_code == 1
        assert "MalformedTreeError" in result.stdout


class TestScenariosCommand:
    """Tests for scenarios command."""

    def test_scenarios_table(self, hash_pair_file):
        result = runner.invoke(app, ["scenarios", hash_pair_file])

        assert result.exit_code == 0
        assert "HashPairTest" in result.stdout
        assert "Branches: 8, Scenarios: 5, Depth: 5" in result.stdout

    def test_scenarios_keys(self, hash_pair_file):
        result = runner.invoke(app, ["scenarios", "--keys", hash_pair_file])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "whenIdNull.itShouldRevert",
            "whenIdNotNull.givenFullyWithdrawn.itShouldReturnDEPLETED",
            "whenIdNotNull.givenNotFullyWithdrawn.givenCanceled.itShouldReturnCANCELED",
            "whenIdNotNull.givenNotFullyWithdrawn.givenNotCanceled.givenStartTimeInFuture.itShouldReturnPENDING",
            "whenIdNotNull.givenNotFullyWithdrawn.givenNotCanceled.givenStartTimeNotInFuture.itShouldReturnSTREAMING",
        ]

    def test_scenarios_invalid_tree(self, write_tree):
        tree_path = write_tree(SINGLE_CHILD_TREE, "vault.tree")

        result = runner.invoke(app, ["scenarios", tree_path])

        assert result.exit_code == 1
        assert "SingleChildBranchError" in result.stdout


class TestVerboseOption:
    """Tests for the global --verbose flag."""

    def test_verbose_compile(self, tmp_path, hash_pair_file, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["--verbose", "compile", "hash_pair.tree"])

        assert result.exit_code == 0
        assert os.path.exists(tmp_path / "test_hash_pair.py")
