"""
CLI Integration Tests

Runs the `pharmaplan` command through cli_main with the rule-based
assistant so no network access is needed.
"""

import json

import pytest

from pharmaplan.bootstrap.entrypoints import cli_main
from pharmaplan.facility.schema.room_sizes import ROOM_SIZE_TABLE


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory without provider credentials."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("PHARMAPLAN_LLM_API_KEY", raising=False)


class TestGenerateCommand:
    """Tests for `pharmaplan generate`."""

    def test_generate_to_file(self, tmp_path):
        """Explicit rooms produce a layout document with validation."""
        out = tmp_path / "layout.json"

        code = cli_main([
            "generate",
            "--rooms", "Weighing Room", "Granulation Room",
            "--batch-size", "20",
            "--rule-based",
            "--seed", "7",
            "--validate",
            "-o", str(out),
        ])

        assert code == 0
        data = json.loads(out.read_text())
        assert [s["name"] for s in data["shapes"]] == ["Weighing Room", "Granulation Room"]
        assert data["shapes"][1]["area"] == 100.0
        assert data["metadata"]["room_count"] == 2
        assert data["validation"]["is_valid"] is True

    def test_generate_to_stdout(self, capsys):
        """Without -o the layout goes to stdout."""
        code = cli_main(["generate", "-d", "weighing and granulation", "--rule-based", "--seed", "3"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert {s["name"] for s in data["shapes"]} == {"Weighing Room", "Granulation Room"}

    def test_extraction_failure_exit_code(self):
        """Layout errors exit with status 2."""
        assert cli_main(["generate", "-d", "a garden shed", "--rule-based"]) == 2

    def test_config_file_applied(self, tmp_path):
        """Layout constants come from the config file."""
        config = tmp_path / "pharmaplan.json"
        config.write_text(json.dumps({"layout": {"canvas_margin": 50.0, "seed": 11}}))
        out = tmp_path / "layout.json"

        code = cli_main(["-c", str(config), "generate", "-r", "Weighing Room", "--rule-based", "-o", str(out)])

        assert code == 0
        assert json.loads(out.read_text())["shapes"][0]["x"] == 50.0


class TestRoomTypesCommand:
    """Tests for `pharmaplan room-types`."""

    def test_json_listing(self, capsys):
        assert cli_main(["room-types", "--json"]) == 0
        records = json.loads(capsys.readouterr().out)
        assert len(records) == len(ROOM_SIZE_TABLE)
        assert records[0]["room_type"] == "Sterile Filling Room"

    def test_category_filter(self, capsys):
        """Only rooms of the requested category are listed."""
        assert cli_main(["room-types", "--category", "utilities"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines
        assert all("Utilities" in line for line in lines)
