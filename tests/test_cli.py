"""Tests for the command line interface."""

import io
import logging

import pytest
import readchar
from rich.console import Console

from skill_palette import cli


@pytest.fixture
def palette_env(tmp_path, config_dir, write_skill, monkeypatch):
    """Config with one skill dir and a private usage file."""
    root = tmp_path / "skills"
    write_skill(root / "marketing", "ad-creative", "Write ad copy", body="Make ads.\n")
    write_skill(root / "tools", "fizzy-cli", "Fizzy tooling", body="Use fizzy.\n")
    cfg_path = config_dir / "config.yaml"
    cfg_path.write_text(
        f"usage_path: {tmp_path / 'usage.json'}\n"
        "inactivity_timeout: 0\n"
        "skill_dirs:\n"
        f"  - dir: {root}\n"
        "    recursive: true\n"
    )
    monkeypatch.setattr(cli, "_console", Console(file=io.StringIO(), width=120))
    return tmp_path


def _stdout(capsys) -> str:
    return capsys.readouterr().out


class TestUse:
    def test_use_prints_injection(self, palette_env, capsys):
        cli.main(["use", "marketing:ad-creative"])
        out = _stdout(capsys)
        assert '<skill name="marketing:ad-creative">' in out
        assert "Make ads." in out

    def test_use_name_only(self, palette_env, capsys):
        cli.main(["use", "fizzy-cli", "--name-only"])
        assert _stdout(capsys).strip() == "tools:fizzy-cli"

    def test_use_records_recent(self, palette_env, capsys):
        cli.main(["use", "fizzy-cli", "--name-only"])
        cli.main(["use", "fizzy-cli", "--name-only"])
        capsys.readouterr()
        cli.main(["recent"])
        output = cli._console.file.getvalue()
        assert "tools:fizzy-cli" in output
        assert "×2" in output

    def test_unknown_skill(self, palette_env):
        with pytest.raises(SystemExit) as exc:
            cli.main(["use", "nope"])
        assert exc.value.code == 1


class TestList:
    def test_list_groups(self, palette_env):
        cli.main(["list"])
        output = cli._console.file.getvalue()
        assert output.index("marketing") < output.index("tools")
        assert "ad-creative" in output

    def test_list_namespace_filter(self, palette_env):
        cli.main(["list", "--namespace", "tool"])
        output = cli._console.file.getvalue()
        assert "fizzy-cli" in output
        assert "ad-creative" not in output

    def test_recent_empty(self, palette_env):
        cli.main(["recent"])
        assert "No recent skills" in cli._console.file.getvalue()


class TestComplete:
    def test_complete(self, palette_env, capsys):
        cli.main(["complete", "mark"])
        lines = _stdout(capsys).split()
        assert lines[0] == "marketing:"


class TestPick:
    def _open_with(self, monkeypatch, keys):
        pending = list(keys)

        def read():
            if pending:
                return pending.pop(0)
            raise KeyboardInterrupt

        monkeypatch.setattr(readchar, "readkey", read)

    def test_pick_prints_selection(self, palette_env, monkeypatch, capsys):
        self._open_with(monkeypatch, ["\r"])
        cli.main(["pick", "--name-only"])
        assert _stdout(capsys).strip() == "marketing:ad-creative"

    def test_default_command_is_pick(self, palette_env, monkeypatch, capsys):
        self._open_with(monkeypatch, [*"fizzy", "\r"])
        cli.main([])
        assert "Use fizzy." in _stdout(capsys)

    def test_pick_cancel_exit_code(self, palette_env, monkeypatch):
        self._open_with(monkeypatch, ["\x1b"])
        with pytest.raises(SystemExit) as exc:
            cli.main(["pick"])
        assert exc.value.code == 130

    def test_pick_unqueue(self, palette_env, monkeypatch, capsys):
        self._open_with(monkeypatch, ["\r"])
        cli.main(["pick", "--queued", "ad-creative"])
        assert _stdout(capsys) == ""

    def test_no_skills(self, tmp_path, config_dir, monkeypatch):
        (config_dir / "config.yaml").write_text(f"skill_dirs: []\nusage_path: {tmp_path / 'u.json'}\n")
        with pytest.raises(SystemExit) as exc:
            cli.main(["pick"])
        assert exc.value.code == 1


class TestLogging:
    def test_debug_writes_log(self, palette_env, config_dir, capsys):
        logger = logging.getLogger("skill_palette")
        handlers = list(logger.handlers)
        try:
            cli.main(["--debug", "use", "fizzy-cli", "--name-only"])
            assert "Queued skill tools:fizzy-cli" in (config_dir / "debug.log").read_text()
        finally:
            for handler in logger.handlers[len(handlers):]:
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
