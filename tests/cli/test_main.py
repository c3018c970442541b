"""Tests for the tidyfolder command line."""

import json

import pytest
from click.testing import CliRunner

from tidyfolder.cli.main import cli
from tidyfolder.version import __version__


@pytest.fixture
def workspace(temp_dir, monkeypatch, make_file):
    """Working directory with a config file and a cluttered target folder."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.delenv("TIDYFOLDER_JOURNAL_FILE", raising=False)

    config_path = temp_dir / "rules.json"
    config_path.write_text(
        json.dumps(
            {
                "categories": {"Documents": [".pdf"], "Audio": [".mp3"]},
                "rules": [
                    {
                        "category": "Projects",
                        "priority": 10,
                        "conditions": [
                            {"type": "contains_filename", "values": ["package.json"]}
                        ],
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    target = temp_dir / "Downloads"
    make_file(target / "report.pdf", "report")
    make_file(target / "song.mp3", "song")
    make_file(target / "web" / "package.json", "{}")

    return {"root": temp_dir, "config": config_path, "target": target}


class TestCli:
    """Test CLI commands."""

    def test_version(self):
        """Test --version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_is_exact_package_version(self):
        """Test --version prints only the package version, with no suffix."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.output.strip() == f"tidyfolder version {__version__}"

    def test_help(self):
        """Test help lists the commands."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("scan", "apply", "undo", "interactive"):
            assert command in result.output

    def test_scan_changes_nothing(self, workspace):
        """Test scan previews without moving."""
        target = workspace["target"]

        result = CliRunner().invoke(
            cli, ["scan", str(target), "--config", str(workspace["config"])]
        )

        assert result.exit_code == 0, result.output
        assert "Proposed actions (3)" in result.output
        assert (target / "report.pdf").exists()
        assert not (target / "Documents").exists()

    def test_apply_and_undo(self, workspace):
        """Test applying a plan and reverting it."""
        target = workspace["target"]
        journal = workspace["root"] / "journal.json"
        runner = CliRunner()

        result = runner.invoke(
            cli,
            [
                "apply",
                str(target),
                "--config",
                str(workspace["config"]),
                "--journal",
                str(journal),
                "--yes",
            ],
        )

        assert result.exit_code == 0, result.output
        assert (target / "Documents" / "report.pdf").exists()
        assert (target / "Audio" / "song.mp3").exists()
        assert (target / "Projects" / "web" / "package.json").exists()
        assert journal.exists()

        result = runner.invoke(cli, ["undo", "--journal", str(journal)])

        assert result.exit_code == 0, result.output
        assert (target / "report.pdf").read_text() == "report"
        assert (target / "web" / "package.json").exists()
        assert not journal.exists()

    def test_apply_declined(self, workspace):
        """Test answering no to the confirmation moves nothing."""
        target = workspace["target"]

        result = CliRunner().invoke(
            cli,
            ["apply", str(target), "--config", str(workspace["config"])],
            input="n\n",
        )

        assert result.exit_code == 0, result.output
        assert (target / "report.pdf").exists()
        assert not (workspace["root"] / "organizer_journal.json").exists()

    def test_missing_target(self, workspace):
        """Test a missing target directory exits with an error."""
        result = CliRunner().invoke(
            cli,
            ["scan", str(workspace["root"] / "nope"), "--config", str(workspace["config"])],
        )

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_broken_config(self, workspace):
        """Test an unparseable config exits with an error."""
        broken = workspace["root"] / "broken.json"
        broken.write_text("{", encoding="utf-8")

        result = CliRunner().invoke(
            cli, ["scan", str(workspace["target"]), "--config", str(broken)]
        )

        assert result.exit_code == 1
        assert "Could not load configuration" in result.output

    def test_undo_without_journal(self, workspace):
        """Test undo with nothing to undo."""
        result = CliRunner().invoke(
            cli, ["undo", "--journal", str(workspace["root"] / "none.json")]
        )

        assert result.exit_code == 0
        assert "Nothing to undo" in result.output
