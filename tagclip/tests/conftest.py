"""Shared fixtures: a small registry snapshot covering inheritance edge cases."""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from tagclip.engine.config import Config, RegistryConfig
from tagclip.engine.schema_store import SchemaStore


def field(attribute_id: str, name: str, data_type: str = "plain") -> Dict[str, Any]:
    return {"attributeId": attribute_id, "name": name, "dataType": data_type}


def tag(tag_id: str, name: str, fields: List[Dict[str, Any]], extends: List[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": tag_id, "name": name, "fields": fields}
    if extends:
        data["extends"] = extends
    return data


SUPERTAGS = [
    tag("bm", "bookmark", [field("a-url", "URL", "url"), field("a-notes", "Notes")]),
    tag("wc", "web-clip", [
        field("a-wc-url", "URL", "url"),
        field("a-wc-notes", "Notes", "text"),
        field("a-wc-author", "Author", "text"),
    ]),
    tag("ar", "article", [
        field("a-ar-summary", "Summary"),
        field("a-ar-author", "Author", "reference"),
        field("a-ar-rt", "Reading Time", "number"),
    ], extends=["wc"]),
    tag("rs", "resource", [
        field("a-rs-source", "Source"),
        field("a-rs-link", "Link", "url"),
        field("a-rs-creator", "Created By"),
    ]),
    tag("mt", "meeting", [field("a-mt-date", "Date", "date"), field("a-mt-att", "Attendees", "reference")]),
    # Cycle
    tag("ca", "alpha", [field("a-alpha", "Alpha")], extends=["cb"]),
    tag("cb", "beta", [field("a-beta", "Beta")], extends=["ca"]),
    # Diamond: bottom -> left, right -> top
    tag("dt", "top", [field("a-top-shared", "Shared"), field("a-top-only", "Top")]),
    tag("dl", "left", [field("a-left", "Left")], extends=["dt"]),
    tag("dr", "right", [field("a-right-shared", "Shared"), field("a-right", "Right")], extends=["dt"]),
    tag("db", "bottom", [field("a-bottom", "Bottom")], extends=["dl", "dr"]),
    # Dangling parent
    tag("or", "orphan", [field("a-orphan", "Notes")], extends=["missing"]),
]


def write_snapshot(path: Path, supertags: List[Dict[str, Any]] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"version": 1, "supertags": supertags if supertags is not None else SUPERTAGS}))
    return path


@pytest.fixture
def snapshot_path(tmp_path):
    """A registry snapshot inside a workspace directory layout."""
    return write_snapshot(tmp_path / "workspaces" / "main" / "schema-registry.json")


@pytest.fixture
def store(snapshot_path):
    return SchemaStore(snapshot_path)


@pytest.fixture
def test_config(snapshot_path):
    """Config pointing at the temporary registry."""
    return Config(registry=RegistryConfig(root=snapshot_path.parent.parent, workspace="main"))
