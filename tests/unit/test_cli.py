"""
Unit tests for the command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from gavel.cli.main import cli
from gavel.crypto import is_valid_address, to_checksum_address


OWNER = "0x" + "a1" * 20
BIDDER = "0x" + "c3" * 20


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GAVEL_LOG_TO_FILE", raising=False)
    # keep log records out of the captured output
    monkeypatch.setenv("GAVEL_LOG_LEVEL", "ERROR")
    return CliRunner()


def write_script(path, steps, timestamp=1000):
    path.write_text(json.dumps({"owner": OWNER, "timestamp": timestamp, "steps": steps}))
    return str(path)


class TestKeygen:

    def test_keygen_count(self, runner):
        result = runner.invoke(cli, ["keygen", "--count", "2"])
        assert result.exit_code == 0
        lines = result.output.split()
        assert len(lines) == 2
        assert all(is_valid_address(line) for line in lines)


class TestDemo:

    def test_demo_runs(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0, result.output
        assert "ALREADY_CLOSED" in result.output
        payload = result.output.strip().splitlines()[-1]
        [winner] = json.loads(payload)
        assert winner["productCode"] == 1
        assert winner["amount"] == str(2 * 10**18)


class TestRun:

    def test_replay_script(self, runner, tmp_path):
        script = write_script(tmp_path / "script.json", [
            {"op": "authorize", "identity": BIDDER},
            {"op": "set_auction_timing", "start": 1000, "end": 2000},
            {"op": "product", "code": 1, "price": 10, "remove": False},
            {"op": "bid", "caller": BIDDER, "code": 1, "amount": 25},
            {"op": "get_highest_bid", "code": 1},
            {"op": "advance_time", "timestamp": 2000},
            {"op": "bid", "caller": BIDDER, "code": 1, "amount": 30},
            {"op": "get_winners"},
        ])
        result = runner.invoke(cli, ["run", script])
        assert result.exit_code == 0, result.output

        lines = result.output.strip().splitlines()
        assert lines[0] == "[0] authorize: ok"
        assert lines[4] == "[4] get_highest_bid: 25"
        assert "ALREADY_CLOSED" in lines[6]
        assert json.loads(lines[7].split(": ", 1)[1]) == [
            {"productCode": 1, "amount": "25", "winner": to_checksum_address(BIDDER)}
        ]

    def test_strict_stops(self, runner, tmp_path):
        script = write_script(tmp_path / "script.json", [
            {"op": "authorize", "caller": BIDDER, "identity": BIDDER},
            {"op": "get_winners"},
        ])
        result = runner.invoke(cli, ["run", "--strict", script])
        assert result.exit_code == 1
        assert "FORBIDDEN" in result.output
        assert "get_winners" not in result.output

    def test_invalid_step(self, runner, tmp_path):
        script = write_script(tmp_path / "script.json", [{"op": "explode"}])
        result = runner.invoke(cli, ["run", script])
        assert result.exit_code != 0
        assert "Unknown op" in result.output

    def test_string_remove_flag_rejected(self, runner, tmp_path):
        """A quoted "false" must not delist the product."""
        script = write_script(tmp_path / "script.json", [
            {"op": "product", "code": 1, "price": 10, "remove": False},
            {"op": "product", "code": 1, "price": 10, "remove": "false"},
        ])
        result = runner.invoke(cli, ["run", script])
        assert result.exit_code != 0
        assert "Step 1" in result.output
        assert "remove" in result.output

    def test_non_integer_timestamp_rejected(self, runner, tmp_path):
        script = write_script(tmp_path / "script.json", [
            {"op": "advance_time", "timestamp": "2000"},
        ])
        result = runner.invoke(cli, ["run", script])
        assert result.exit_code != 0
        assert "Step 0" in result.output
        assert "Traceback" not in result.output

    def test_backwards_time_reported(self, runner, tmp_path):
        script = write_script(tmp_path / "script.json", [
            {"op": "advance_time", "timestamp": 500},
        ])
        result = runner.invoke(cli, ["run", script])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("[0] advance_time: ")
        assert result.output.strip() != "[0] advance_time: ok"

    def test_missing_owner(self, runner, tmp_path):
        path = tmp_path / "script.json"
        path.write_text(json.dumps({"steps": []}))
        result = runner.invoke(cli, ["run", str(path)])
        assert result.exit_code != 0


class TestConfigCommand:

    def test_shows_values(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "currency_decimals: 18" in result.output
