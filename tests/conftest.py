"""Shared fixtures: connector snapshots built under ``tmp_path``."""

import json
from pathlib import Path

import pytest


def write_json(path: Path, content) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(content), encoding="utf-8")
    return path


@pytest.fixture
def snapshots(tmp_path):
    """Empty ``previous`` and ``current`` roots."""
    previous = tmp_path / "previous"
    current = tmp_path / "current"
    previous.mkdir()
    current.mkdir()
    return previous, current


@pytest.fixture
def okta_snapshots(snapshots):
    """The okta connector switching from OAuth2 to an API key."""
    previous, current = snapshots
    write_json(previous / "okta" / "auth" / "auth.json",
               {"type": "OAuth2", "tokenUrl": "https://okta.com/oauth2/token"})
    write_json(current / "okta" / "auth" / "auth.json",
               {"type": "API Key", "keyName": "Authorization", "location": "header"})
    return previous, current
