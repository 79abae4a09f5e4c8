"""Unit tests for the check, add, remove, hash and config commands.

Tests CLI behavior using Click's CliRunner for isolated, fast testing.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from mfa_cache.cli import cli
from mfa_cache.constants import (
    CACHE_DIR_ENV,
    CONFIG_ENV,
    PAM_RHOST_ENV,
    PAM_USER_ENV,
)

SALT = "test-host"
HOST = "203.0.113.5"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "2fa"


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config with a fixed salt and a 30 minute default window."""
    path = tmp_path / "mfa_cache_config.json"
    path.write_text(json.dumps({"salt": SALT, "ttl_minutes": 30}))
    return path


@pytest.fixture
def env(cache_dir: Path, config_file: Path) -> dict[str, str | None]:
    """Isolated environment without PAM variables."""
    return {
        CACHE_DIR_ENV: str(cache_dir),
        CONFIG_ENV: str(config_file),
        PAM_USER_ENV: None,
        PAM_RHOST_ENV: None,
    }


def _marker(cache_dir: Path, user: str, host: str) -> Path:
    digest = lambda value: hashlib.sha256(f"{SALT}{value}".encode()).hexdigest()  # noqa: E731
    return cache_dir / digest(user) / digest(f"{user}{host}")


def _backdate(path: Path, minutes: int) -> None:
    stamp = path.stat().st_mtime - minutes * 60
    os.utime(path, (stamp, stamp))


class TestCheckCommand:
    """Tests for mfa-cache check."""

    def test_missing_cache_fails(self, runner, env):
        result = runner.invoke(cli, ["check", "doe", HOST, "60"], env=env)

        assert result.exit_code == 1

    def test_added_token_passes(self, runner, env):
        runner.invoke(cli, ["add", "doe", HOST], env=env)

        result = runner.invoke(cli, ["check", "doe", HOST, "60"], env=env)

        assert result.exit_code == 0

    def test_other_host_fails(self, runner, env):
        runner.invoke(cli, ["add", "doe", HOST], env=env)

        result = runner.invoke(cli, ["check", "doe", "203.0.113.9", "60"], env=env)

        assert result.exit_code == 1

    def test_reads_pam_environment(self, runner, env):
        pam_env = {**env, PAM_USER_ENV: "doe", PAM_RHOST_ENV: HOST}
        runner.invoke(cli, ["add"], env=pam_env)

        result = runner.invoke(cli, ["check", "60"], env=pam_env)

        assert result.exit_code == 0

    def test_default_window_from_config(self, runner, env, cache_dir):
        """With no MINUTES the configured ttl_minutes (30) applies."""
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        marker = _marker(cache_dir, "doe", HOST)
        _backdate(marker, 45)

        result = runner.invoke(cli, ["check", "doe", HOST], env=env)

        assert result.exit_code == 1
        assert not marker.exists()

    def test_expired_token_is_evicted(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        marker = _marker(cache_dir, "doe", HOST)
        _backdate(marker, 61)

        result = runner.invoke(cli, ["check", "doe", HOST, "60"], env=env)

        assert result.exit_code == 1
        assert not marker.exists()

    @pytest.mark.parametrize("minutes", ["-5", "abc", "1.5"])
    def test_malformed_minutes_is_usage_error(self, runner, env, minutes):
        result = runner.invoke(cli, ["check", "doe", HOST, minutes], env=env)

        assert result.exit_code == 2

    def test_too_many_arguments(self, runner, env):
        result = runner.invoke(cli, ["check", "doe", HOST, "60", "extra"], env=env)

        assert result.exit_code == 2

    def test_no_pam_user_is_usage_error(self, runner, env):
        result = runner.invoke(cli, ["check", "60"], env=env)

        assert result.exit_code == 2
        assert PAM_USER_ENV in result.output


class TestAddCommand:
    """Tests for mfa-cache add."""

    def test_creates_marker(self, runner, env, cache_dir):
        result = runner.invoke(cli, ["add", "doe", HOST], env=env)

        assert result.exit_code == 0
        assert _marker(cache_dir, "doe", HOST).is_file()

    def test_duplicate_keeps_timestamp(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        marker = _marker(cache_dir, "doe", HOST)
        _backdate(marker, 10)
        before = marker.stat().st_mtime

        result = runner.invoke(cli, ["add", "doe", HOST], env=env)

        assert result.exit_code == 0
        assert marker.stat().st_mtime == before

    def test_one_argument_is_usage_error(self, runner, env):
        result = runner.invoke(cli, ["add", "doe"], env=env)

        assert result.exit_code == 2


class TestRemoveCommand:
    """Tests for mfa-cache remove."""

    def test_refuses_multiple_without_force(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        runner.invoke(cli, ["add", "alice", HOST], env=env)

        result = runner.invoke(cli, ["remove"], env=env)

        assert result.exit_code == 1
        assert "--force" in result.output
        assert _marker(cache_dir, "doe", HOST).exists()
        assert _marker(cache_dir, "alice", HOST).exists()

    def test_force_removes_everything(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        runner.invoke(cli, ["add", "alice", HOST], env=env)

        result = runner.invoke(cli, ["remove", "--force"], env=env)

        assert result.exit_code == 0
        assert "Removed 2 tokens and 2 user directories." in result.output
        assert list(cache_dir.iterdir()) == []

    def test_force_after_user(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        runner.invoke(cli, ["add", "doe", "203.0.113.9"], env=env)

        result = runner.invoke(cli, ["remove", "doe", "-f"], env=env)

        assert result.exit_code == 0
        assert list(cache_dir.iterdir()) == []

    def test_single_pair(self, runner, env, cache_dir):
        runner.invoke(cli, ["add", "doe", HOST], env=env)
        runner.invoke(cli, ["add", "doe", "203.0.113.9"], env=env)
        runner.invoke(cli, ["add", "alice", HOST], env=env)

        result = runner.invoke(cli, ["remove", "doe", HOST], env=env)

        assert result.exit_code == 0
        assert "Removed 1 token and 0 user directories." in result.output
        assert not _marker(cache_dir, "doe", HOST).exists()
        assert _marker(cache_dir, "doe", "203.0.113.9").exists()

    def test_nothing_to_remove(self, runner, env):
        result = runner.invoke(cli, ["remove", "doe"], env=env)

        assert result.exit_code == 0
        assert "Nothing to remove." in result.output


class TestHashCommand:
    """Tests for mfa-cache hash."""

    def test_prints_salted_hash(self, runner, env):
        result = runner.invoke(cli, ["hash", "doe"], env=env)

        assert result.exit_code == 0
        assert result.output.strip() == hashlib.sha256(f"{SALT}doe".encode()).hexdigest()

    def test_empty_string_is_usage_error(self, runner, env):
        result = runner.invoke(cli, ["hash", ""], env=env)

        assert result.exit_code == 2


class TestConfigCommands:
    """Tests for mfa-cache config."""

    def test_show_merges_override(self, runner, env, cache_dir):
        result = runner.invoke(cli, ["config", "show"], env=env)

        data = json.loads(result.output)
        assert data["cache_dir"] == str(cache_dir)
        assert data["ttl_minutes"] == 30

    def test_show_field(self, runner, env):
        result = runner.invoke(cli, ["config", "show", "--field", "ttl_minutes"], env=env)

        assert result.output.strip() == "30"

    def test_init_refuses_overwrite(self, runner, env):
        result = runner.invoke(cli, ["config", "init"], env=env)

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_init_writes_file(self, runner, env, tmp_path):
        target = tmp_path / "new" / "config.json"

        result = runner.invoke(
            cli,
            ["--config", str(target), "config", "init", "--ttl-minutes", "15"],
            env={**env, CONFIG_ENV: None},
        )

        assert result.exit_code == 0
        assert json.loads(target.read_text())["ttl_minutes"] == 15

    def test_invalid_config_fails_closed(self, runner, env, config_file):
        config_file.write_text("{broken")

        result = runner.invoke(cli, ["check", "doe", HOST, "60"], env=env)

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output


class TestMainGroup:
    """Tests for the top-level group."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "mfa-cache" in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("check", "add", "remove", "hash", "config"):
            assert name in result.output
