# tests/core/test_settings_parser.py
"""Tests for the restricted settings grammar."""

from pathlib import Path

import pytest

from localconfig.core.settings_parser import (
    SettingsIncludeError,
    SettingsParser,
    SettingsSecurityError,
    SettingsSyntaxError,
)


class TestParseText:
    """Accepted constructs."""

    def test_scalar_assignments(self) -> None:
        values = SettingsParser().parse_text(
            "db_host = 'localhost'\n"
            "db_port = 3306\n"
            "ratio = -1.5\n"
            "plus = +2\n"
            "db_check = True\n"
            "db_sock = None\n"
        )

        assert values == {
            "db_host": "localhost",
            "db_port": 3306,
            "ratio": -1.5,
            "plus": 2,
            "db_check": True,
            "db_sock": None,
        }

    def test_comments_and_blank_lines(self) -> None:
        text = "# The database host.\n\ndb_host = 'localhost'  # trailing\n"

        assert SettingsParser().parse_text(text) == {"db_host": "localhost"}

    def test_lists_and_tuples_become_lists(self) -> None:
        values = SettingsParser().parse_text("servers = ['a', 'b']\nports = (1, 2,)\nempty = []\n")

        assert values == {"servers": ["a", "b"], "ports": [1, 2], "empty": []}

    def test_mapping(self) -> None:
        values = SettingsParser().parse_text("param_override = {\n    'shadowdb': None,\n    'use_mailer_queue': 1,\n}\n")

        assert values == {"param_override": {"shadowdb": None, "use_mailer_queue": 1}}

    def test_later_assignment_wins(self) -> None:
        assert SettingsParser().parse_text("a = 1\na = 2\n") == {"a": 2}

    def test_preserves_assignment_order(self) -> None:
        assert list(SettingsParser().parse_text("b = 1\na = 2\n")) == ["b", "a"]

    def test_empty_text(self) -> None:
        assert SettingsParser().parse_text("") == {}


class TestForbiddenConstructs:
    """Anything beyond literal assignments is rejected before evaluation."""

    @pytest.mark.parametrize(
        "text",
        [
            "import os\n",
            "x = __import__('os')\n",
            "x = open('/etc/passwd').read()\n",
            "x = other\n",
            "x = os.environ\n",
            "x = f'{y}'\n",
            "x = [i for i in range(3)]\n",
            "x = lambda: 1\n",
            "x = 1 + 2\n",
            "x = [[1]]\n",
            "x = {'a': {'b': 1}}\n",
            "x = {1: 'a'}\n",
            "x = {**other}\n",
            "x = b'bytes'\n",
            "x = 1j\n",
            "x = 1e999\n",
            "x = -1e999\n",
            "x = [1.5, 1e999]\n",
            "x = {'limit': 1e999}\n",
            "a = b = 1\n",
            "a, b = 1, 2\n",
            "x += 1\n",
            "def f():\n    pass\n",
            "if True:\n    x = 1\n",
            "print('hi')\n",
            "include = 'x'\n",
        ],
    )
    def test_rejected(self, text: str) -> None:
        with pytest.raises(SettingsSecurityError):
            SettingsParser().parse_text(text)

    def test_reports_every_violation_with_line_numbers(self) -> None:
        with pytest.raises(SettingsSecurityError) as exc_info:
            SettingsParser().parse_text("ok = 1\nbad = other\nimport os\n")

        message = str(exc_info.value)
        assert "line 2" in message
        assert "line 3" in message

    def test_nothing_is_evaluated_when_rejected(self, tmp_path: Path) -> None:
        marker = tmp_path / "marker"
        text = f"a = 1\nb = open({str(marker)!r}, 'w')\n"

        with pytest.raises(SettingsSecurityError):
            SettingsParser().parse_text(text)

        assert not marker.exists()

    @pytest.mark.parametrize(
        "text",
        [
            "include()\n",
            "include('a', 'b')\n",
            "include(path='a')\n",
            "include(name)\n",
        ],
    )
    def test_malformed_include(self, text: str) -> None:
        with pytest.raises(SettingsSecurityError, match="include"):
            SettingsParser().parse_text(text)

    def test_syntax_error(self) -> None:
        with pytest.raises(SettingsSyntaxError, match="line 2"):
            SettingsParser().parse_text("a = 1\nb = = 2\n")


class TestIncludes:
    """Tests for include() resolution."""

    def test_relative_include_resolves_against_including_file(self, tmp_path: Path) -> None:
        (tmp_path / "secrets").write_text("db_pass = 'hunter2'\n")
        main = tmp_path / "localconfig"
        main.write_text("db_host = 'localhost'\ninclude('secrets')\n")

        values = SettingsParser().parse_file(main)

        assert values == {"db_host": "localhost", "db_pass": "hunter2"}

    def test_included_values_can_be_overridden(self, tmp_path: Path) -> None:
        (tmp_path / "base").write_text("db_host = 'base'\n")
        main = tmp_path / "localconfig"
        main.write_text("include('base')\ndb_host = 'override'\n")

        assert SettingsParser().parse_file(main) == {"db_host": "override"}

    def test_absolute_include(self, tmp_path: Path) -> None:
        included = tmp_path / "shared" / "db"
        included.parent.mkdir()
        included.write_text("db_name = 'bugs'\n")
        main = tmp_path / "localconfig"
        main.write_text(f"include({str(included)!r})\n")

        assert SettingsParser().parse_file(main) == {"db_name": "bugs"}

    def test_missing_include(self, tmp_path: Path) -> None:
        main = tmp_path / "localconfig"
        main.write_text("include('nope')\n")

        with pytest.raises(SettingsIncludeError, match="not found"):
            SettingsParser().parse_file(main)

    def test_cycle_detected(self, tmp_path: Path) -> None:
        (tmp_path / "a").write_text("include('b')\n")
        (tmp_path / "b").write_text("include('a')\n")

        with pytest.raises(SettingsIncludeError, match="cycle"):
            SettingsParser().parse_file(tmp_path / "a")

    def test_self_include_detected(self, tmp_path: Path) -> None:
        main = tmp_path / "localconfig"
        main.write_text("include('localconfig')\n")

        with pytest.raises(SettingsIncludeError, match="cycle"):
            SettingsParser().parse_file(main)

    def test_same_file_included_twice_is_not_a_cycle(self, tmp_path: Path) -> None:
        (tmp_path / "common").write_text("x = 1\n")
        main = tmp_path / "localconfig"
        main.write_text("include('common')\ninclude('common')\n")

        assert SettingsParser().parse_file(main) == {"x": 1}

    def test_depth_limit(self, tmp_path: Path) -> None:
        for i in range(4):
            (tmp_path / f"f{i}").write_text(f"include('f{i + 1}')\n")
        (tmp_path / "f4").write_text("x = 1\n")

        assert SettingsParser(max_include_depth=4).parse_file(tmp_path / "f0") == {"x": 1}
        with pytest.raises(SettingsIncludeError, match="deeper than 3"):
            SettingsParser(max_include_depth=3).parse_file(tmp_path / "f0")


class TestParseFile:
    def test_missing_file_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            SettingsParser().parse_file(tmp_path / "missing")

    def test_utf8_bom_is_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "localconfig"
        path.write_bytes("\ufeffdb_host = 'h\u00f6st'\n".encode())

        assert SettingsParser().parse_file(path) == {"db_host": "höst"}

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "localconfig"
        path.write_bytes(b"db_host = '\xff'\n")

        with pytest.raises(UnicodeDecodeError):
            SettingsParser().parse_file(path)
