"""Tests for the CLI.

The Kubernetes accessor is replaced by the in-memory cluster, so these
tests need no cluster access.
"""

import json
import os
from datetime import timedelta
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from brigade_vacuum import __version__
from brigade_vacuum.cli import app
from brigade_vacuum.errors import KubeConfigError
from brigade_vacuum.types import WorkerPhase

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env():
    """Keep VACUUM_* variables from the outer environment out of tests."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("VACUUM_")}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def patched_cluster(cluster):
    """Route the CLI to the in-memory cluster and leave logging alone."""
    with (
        patch("brigade_vacuum.cli.build_accessor", return_value=cluster) as build,
        patch("brigade_vacuum.cli.setup_logging"),
    ):
        cluster.build_accessor = build
        yield cluster


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Brigade Vacuum" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        """CLI -V should print version and exit 0."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self) -> None:
        """CLI with no args should show help."""
        result = runner.invoke(app, [])
        assert "Usage:" in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command_shows_all_settings(self) -> None:
        """CLI config should show all configuration sections."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Retention:" in result.stdout
        assert "Operational:" in result.stdout
        assert "Cluster:" in result.stdout
        assert "Namespace" in result.stdout
        assert "Max age" in result.stdout
        assert "Max builds" in result.stdout
        assert "(unlimited)" in result.stdout
        assert "(disabled)" in result.stdout

    def test_config_json_contains_all_fields(self) -> None:
        """CLI config --json should contain all config fields."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        config_data = json.loads(result.stdout)
        expected_keys = [
            "namespace",
            "max_age",
            "max_builds",
            "skip_running_builds",
            "dry_run",
            "log_level",
            "kubeconfig",
            "kube_context",
            "request_timeout",
        ]
        for key in expected_keys:
            assert key in config_data, f"Missing key: {key}"

    def test_config_reads_env(self) -> None:
        with patch.dict(os.environ, {"VACUUM_NAMESPACE": "brigade-ci"}):
            result = runner.invoke(app, ["config", "--json"])
        assert json.loads(result.stdout)["namespace"] == "brigade-ci"


class TestCLIRun:
    """Test CLI run command."""

    def test_run_json(self, patched_cluster) -> None:
        patched_cluster.add_build("old", timedelta(days=40))
        patched_cluster.add_build("new", timedelta(days=1))

        result = runner.invoke(
            app, ["run", "-n", "brigade", "--max-age", "720h", "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["namespace"] == "brigade"
        assert data["dry_run"] is False
        assert data["failures"] == 0
        assert [e["build_id"] for e in data["age"]["evictions"]] == ["old"]
        assert data["count"]["ran"] is False
        assert sorted(patched_cluster.records) == ["new-secret"]

    def test_run_passes_settings_to_accessor(self, patched_cluster) -> None:
        result = runner.invoke(
            app, ["run", "--namespace", "ci", "--kubeconfig", "/tmp/kc"]
        )

        assert result.exit_code == 0
        settings = patched_cluster.build_accessor.call_args.args[0]
        assert settings.namespace == "ci"
        assert str(settings.kubeconfig) == "/tmp/kc"

    def test_run_max_builds(self, patched_cluster) -> None:
        for i in range(1, 6):
            patched_cluster.add_build(f"t{i}", timedelta(hours=10 - i))

        result = runner.invoke(app, ["run", "--max-builds", "2"])

        assert result.exit_code == 0
        assert "Count policy" in result.stdout
        assert "t1" in result.stdout
        assert sorted(patched_cluster.records) == ["t4-secret", "t5-secret"]

    def test_run_max_builds_from_env(self, patched_cluster) -> None:
        patched_cluster.add_build("a", timedelta(hours=2))
        patched_cluster.add_build("b", timedelta(hours=1))

        with patch.dict(os.environ, {"VACUUM_MAX_BUILDS": "1"}):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert list(patched_cluster.records) == ["b-secret"]

    def test_run_dry_run(self, patched_cluster) -> None:
        patched_cluster.add_build("old", timedelta(days=2))

        result = runner.invoke(app, ["run", "--max-age", "1d", "--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN" in result.stdout
        assert patched_cluster.deletions == []

    def test_run_skip_running_builds(self, patched_cluster) -> None:
        patched_cluster.add_build("old", timedelta(days=2), phase=WorkerPhase.RUNNING)

        result = runner.invoke(
            app, ["run", "--max-age", "1d", "--skip-running-builds", "--json"]
        )

        assert result.exit_code == 0
        assert list(patched_cluster.workers) == ["old-worker-0"]
        assert patched_cluster.records == {}

    def test_run_deletion_failure_exits_zero(self, patched_cluster) -> None:
        patched_cluster.add_build("old", timedelta(days=2))
        patched_cluster.failing_deletes.add("old-worker-0")

        result = runner.invoke(app, ["run", "--max-age", "1d", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["failures"] == 1

    def test_run_listing_failure_exits_one(self, patched_cluster) -> None:
        patched_cluster.fail_lists_after(0)

        result = runner.invoke(app, ["run", "--max-builds", "1", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["error"]["code"] == "list_failed"

    def test_run_kube_config_error(self) -> None:
        with (
            patch(
                "brigade_vacuum.cli.build_accessor",
                side_effect=KubeConfigError("no kubeconfig"),
            ),
            patch("brigade_vacuum.cli.setup_logging"),
        ):
            result = runner.invoke(app, ["run", "--max-builds", "1"])

        assert result.exit_code == 1
        assert "no kubeconfig" in result.stdout

    def test_run_invalid_max_age(self, patched_cluster) -> None:
        result = runner.invoke(app, ["run", "--max-age", "forever"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout
        assert patched_cluster.calls == []

    def test_run_out_of_range_max_age(self, patched_cluster) -> None:
        result = runner.invoke(app, ["run", "--max-age", "99999999999d"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout
        assert patched_cluster.calls == []

    def test_run_negative_max_age(self, patched_cluster) -> None:
        result = runner.invoke(app, ["run", "--max-age=-5"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout

    def test_run_max_age_before_earliest_datetime(self, patched_cluster) -> None:
        result = runner.invoke(app, ["run", "--max-age", "1000000d", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["error"]["code"] == "invalid_limit"
        assert patched_cluster.calls == []

    def test_run_nothing_enabled(self, patched_cluster) -> None:
        patched_cluster.add_build("old", timedelta(days=400))

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert "disabled" in result.stdout
        assert patched_cluster.calls == []
