# tests/cli/test_cli_formatters.py
"""Tests for CLI output formatting."""

import json

import pytest

from localconfig.cli_formatters import print_config, print_result
from localconfig.contracts import ReconciliationResult


class TestPrinting:
    def test_print_config_literals(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_config({"db_port": 3306, "servers": []})

        assert capsys.readouterr().out == "db_port = 3306\nservers = []\n"

    def test_print_config_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_config({"b": 1, "a": None}, as_json=True)

        assert json.loads(capsys.readouterr().out) == {"a": None, "b": 1}

    def test_print_result_up_to_date(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_result(ReconciliationResult())

        assert "up to date" in capsys.readouterr().out

    def test_print_result_changes(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_result(ReconciliationResult(new_vars=("a", "b"), old_vars=("z",)))

        out = capsys.readouterr().out
        assert "New variables: a, b" in out
        assert "Orphaned variables: z" in out

    def test_print_result_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        print_result(ReconciliationResult(new_vars=("a",), config_hash="abc"), as_json=True)

        assert json.loads(capsys.readouterr().out) == {"new_vars": ["a"], "old_vars": [], "config_hash": "abc"}
