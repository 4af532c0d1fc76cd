from __future__ import annotations

import json

import pytest

from animgraph.exceptions import InvalidDocument
from animgraph.extraction import get_root_collection, get_root_entry, load_document


def test_root_entry_is_first_node_init_element(abr_document):
    entry = get_root_entry(abr_document)
    assert entry["HandleId"] == "R"


@pytest.mark.parametrize(
    "doc",
    [
        None,
        [],
        {"Data": {}},
        {"Data": {"RootChunk": {"nodesToInit": {"0": {}}}}},
        {"Data": {"RootChunk": {"nodesToInit": []}}},
    ],
)
def test_missing_or_malformed_collection_raises(doc):
    with pytest.raises(InvalidDocument):
        get_root_collection(doc)


def test_root_entry_requires_payload_object():
    doc = {"Data": {"RootChunk": {"nodesToInit": [{"HandleId": "0", "Data": "animAnimNode_Output"}]}}}
    with pytest.raises(InvalidDocument, match="payload"):
        get_root_entry(doc)


def test_invalid_document_is_a_value_error():
    with pytest.raises(ValueError):
        get_root_entry({})


def test_load_document_parses_json(tmp_path, abr_document):
    path = tmp_path / "graph.animgraph.json"
    path.write_text(json.dumps(abr_document), encoding="utf-8")
    assert load_document(path) == abr_document


def test_load_document_rejects_bad_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{\"Data\": ", encoding="utf-8")
    with pytest.raises(InvalidDocument):
        load_document(path)


def test_load_document_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "nope.json")
