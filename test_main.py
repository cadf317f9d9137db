#!/usr/bin/env python3
"""
Tests for the command-line entry point
"""

import asyncio

import pytest

import main as cli
from orchestrator import AnalysisOrchestrator
from test_orchestrator import FakeGateway


class ClosableFakeGateway(FakeGateway):
    def close(self):
        self.closed = True


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITANALYZER_EXPORT_DIR", raising=False)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    return tmp_path


def test_parse_args_collects_exports():
    args = cli.parse_args(["octocat/Hello-World", "--export", "json", "--export", "csv"])
    assert args.repository == "octocat/Hello-World"
    assert args.export == ["json", "csv"]
    assert not args.rate_limit


def test_invalid_repository_exits_with_error(workdir):
    assert asyncio.run(cli.main(["justowner"])) == 1


def test_analysis_and_export(workdir, monkeypatch):
    gateway = ClosableFakeGateway()
    monkeypatch.setattr(
        cli, "AnalysisOrchestrator",
        lambda config: AnalysisOrchestrator(gateway=gateway, config=config),
    )

    exit_code = asyncio.run(cli.main([
        "https://github.com/octocat/Hello-World",
        "--export", "csv", "--export", "json",
        "--output-dir", str(workdir / "out"),
    ]))

    assert exit_code == 0
    assert gateway.closed
    csv_file = workdir / "out" / "octocat_Hello-World-contributors.csv"
    assert csv_file.read_text(encoding="utf-8") == "login,contributions\nalice,5\n"
    assert (workdir / "out" / "octocat_Hello-World-git-analyzer.json").exists()


def test_api_failure_exits_with_error(workdir, monkeypatch):
    gateway = ClosableFakeGateway(fail_stage="metadata", status_code=404)
    monkeypatch.setattr(
        cli, "AnalysisOrchestrator",
        lambda config: AnalysisOrchestrator(gateway=gateway, config=config),
    )

    assert asyncio.run(cli.main(["octocat/missing", "--export", "csv"])) == 1
    assert gateway.calls == ["metadata"]
    assert not (workdir / "reports").exists()


def test_unwritable_export_dir_reports_error(workdir, monkeypatch):
    gateway = ClosableFakeGateway()
    monkeypatch.setattr(
        cli, "AnalysisOrchestrator",
        lambda config: AnalysisOrchestrator(gateway=gateway, config=config),
    )
    blocker = workdir / "out"
    blocker.write_text("not a directory", encoding="utf-8")

    exit_code = asyncio.run(cli.main(["octocat/Hello-World", "--export", "csv", "--output-dir", str(blocker)]))

    assert exit_code == 1
    assert blocker.read_text(encoding="utf-8") == "not a directory"
