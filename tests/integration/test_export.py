"""End-to-end tests: design config to .sketch file and back."""

import json
import zipfile

import pytest

from sketch_mcp.archive import ArchiveSerializer, export_sketch
from sketch_mcp.assembler import generate_document
from sketch_mcp.model import Text, walk_layers
from sketch_mcp.validation import check, validate_archive, validate_directory


@pytest.mark.integration
def test_sample_config_round_trip(tmp_path, sample_config, node_factory):
    result = export_sketch(sample_config, output_dir=tmp_path, factory=node_factory)

    report = validate_directory(result.directory_path)
    assert report.violations == []
    assert report.warnings == []

    unpacked = tmp_path / "unpacked"
    with zipfile.ZipFile(result.archive_path) as zf:
        zf.extractall(unpacked)
    assert validate_directory(unpacked).valid

    document = json.loads((unpacked / "document.json").read_text(encoding="utf-8"))
    (ref,) = document["pages"]
    page = json.loads((unpacked / f"{ref['_ref']}.json").read_text(encoding="utf-8"))
    assert page["name"] == "Orders"
    artboard = page["layers"][0]
    assert artboard["frame"]["width"] == 393
    assert artboard["layers"][0]["name"] == "background"


@pytest.mark.integration
def test_dashboard_config(tmp_path, dashboard_config, node_factory):
    document = generate_document(dashboard_config, node_factory)
    assert check(document).violations == []

    cjk = [
        layer
        for layer, _ in walk_layers(document.pages[0].layers)
        if isinstance(layer, Text) and layer.attributed_string.string == "客户列表"
    ]
    assert len(cjk) == 1
    style_font = cjk[0].style.text_style.encode_attributes.font.attributes
    assert style_font.name.startswith("PingFang")

    result = ArchiveSerializer(tmp_path).write(document, "admin")
    assert validate_archive(result.archive_path).valid


@pytest.mark.integration
def test_seeded_exports_are_reproducible(tmp_path, sample_config):
    import random

    from sketch_mcp.codec import IdentifierSource
    from sketch_mcp.model import NodeFactory

    first = generate_document(sample_config, NodeFactory(IdentifierSource(random.Random(9))))
    second = generate_document(sample_config, NodeFactory(IdentifierSource(random.Random(9))))
    assert first.to_sketch() == second.to_sketch()
