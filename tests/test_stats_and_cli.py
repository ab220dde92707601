"""Tests for summary statistics, configuration and the command-line entry point."""

import json

import pytest

from change_detector.config import Config
from change_detector.drift_analyzer import ChangeDetectionEngine, summarize
from change_detector.main import main
from change_detector.models import Category, ConnectorReport, KeyAdded, Severity

from conftest import write_json


def test_summarize_counts_by_severity_kind_and_category(okta_snapshots):
    previous, current = okta_snapshots
    write_json(current / "okta" / "actions" / "createUser.json", {})

    reports = ChangeDetectionEngine().run(previous, current)
    reports.append(ConnectorReport(connector="broken", processing_error="boom"))

    summary = summarize(reports)

    assert summary.total_changes == 5
    assert summary.by_severity == {"P0": 4, "P1": 1, "P2": 0}
    assert summary.by_kind["added"] == 2
    assert summary.by_kind["folder-added"] == 1
    assert summary.by_category["auth"].total == 4
    assert summary.by_category["actions"].by_severity["P1"] == 1
    assert summary.connectors["okta"].total == 5
    assert summary.connectors["broken"].total == 0
    assert summary.failed_connectors == ["broken"]


def test_summarize_counts_unclassified_changes_as_minor():
    report = ConnectorReport(connector="c", changes=[
        KeyAdded(category=Category.META, file_name="m.json", path="m.a", value=1),
    ])

    assert summarize([report]).by_severity[Severity.MINOR.value] == 1


def test_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CONNECTORS_PREVIOUS", str(tmp_path / "p"))
    monkeypatch.setenv("EXPAND_FOLDER_CHANGES", "true")
    monkeypatch.setenv("MAX_WORKERS", "3")
    monkeypatch.delenv("SEVERITY_RULES_PATH", raising=False)

    config = Config()

    assert config.previous_root == tmp_path / "p"
    assert config.expand_folder_changes is True
    assert config.max_workers == 3
    assert config.is_parallel
    assert config.severity_rules_path is None


def test_config_validate_rejects_bad_values():
    with pytest.raises(ValueError):
        Config(max_workers=0).validate()
    with pytest.raises(ValueError):
        Config(log_level="LOUD").validate()


def test_cli_prints_reports_and_summary(okta_snapshots, capsys):
    previous, current = okta_snapshots

    exit_code = main(["--previous", str(previous), "--current", str(current), "--log-level", "WARNING"])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["reports"][0]["connector"] == "okta"
    kinds = sorted(c["kind"] for c in output["reports"][0]["changes"])
    assert kinds == ["added", "added", "modified", "removed"]
    assert output["reports"][0]["changes"][0]["severity"] == "P0"
    assert output["summary"]["total_changes"] == 4


def test_cli_fails_when_both_roots_are_missing(tmp_path, capsys):
    exit_code = main(["--previous", str(tmp_path / "a"), "--current", str(tmp_path / "b"),
                      "--log-level", "CRITICAL"])

    assert exit_code == 1
    assert capsys.readouterr().out == ""


def test_cli_rejects_invalid_worker_count(tmp_path):
    assert main(["--previous", str(tmp_path), "--current", str(tmp_path), "--workers", "0"]) == 1
