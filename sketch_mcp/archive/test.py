"""Unit tests for archive layout and export."""

import json
import random
from zipfile import ZipFile

import pytest

from sketch_mcp.codec import IdentifierSource
from sketch_mcp.model import NodeFactory, StyleSpec
from sketch_mcp.validation import validate_directory

from . import lib
from .lib import (
    ArchiveSerializer,
    InvalidFilename,
    IOFailure,
    ValidationFailed,
    export_sketch,
    layout_archive,
)


@pytest.fixture
def factory():
    return NodeFactory(IdentifierSource(random.Random(5)))


@pytest.fixture
def document(factory):
    card = factory.rectangle((16, 16, 361, 80), StyleSpec(fills=["#FFFFFF"]), name="Card")
    label = factory.text("Orders", (32, 40, 200, 24), StyleSpec(font_size=18))
    home = factory.artboard("Home", 393, 852, "#F2F2F7", [card, label])
    detail = factory.artboard("Detail", 393, 852, x=433)
    return factory.document([factory.page("Design", [home, detail])])


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr(lib.time, "time", lambda: 1718000000.0)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestLayoutArchive:
    """Tests for splitting a document into archive files."""

    @pytest.mark.unit
    def test_pages_become_references(self, document):
        layout = layout_archive(document)
        page_id = document.pages[0].object_id
        assert layout.document["pages"] == [
            {
                "_class": "MSJSONFileReference",
                "_ref_class": "MSImmutablePage",
                "_ref": f"pages/{page_id}",
            }
        ]
        assert layout.pages[page_id]["_class"] == "page"
        assert layout.document["_class"] == "document"

    @pytest.mark.unit
    def test_meta_index(self, document):
        meta = layout_archive(document).meta
        page = document.pages[0]
        entry = meta["pagesAndArtboards"][page.object_id]
        assert entry["name"] == "Design"
        assert {v["name"] for v in entry["artboards"].values()} == {"Home", "Detail"}
        assert meta["compatibilityVersion"] == 99
        assert meta["version"] == 136
        assert meta["app"] == "com.bohemiancoding.sketch3"
        assert meta["created"]["coeditCompatibilityVersion"] == 99

    @pytest.mark.unit
    def test_user_view_state(self, document):
        user = layout_archive(document).user
        page_id = document.pages[0].object_id
        assert user["document"] == {"pageListHeight": 85, "pageListCollapsed": 0}
        assert user[page_id]["scrollOrigin"] == "{-0.000000, -0.000000}"

    @pytest.mark.unit
    def test_files_listing(self, document):
        paths = [path for path, _ in layout_archive(document).files()]
        page_id = document.pages[0].object_id
        assert paths == ["document.json", "meta.json", "user.json", f"pages/{page_id}.json"]


class TestArchiveSerializer:
    """Tests for writing and packaging archives."""

    @pytest.mark.unit
    def test_write_produces_valid_directory(self, tmp_path, document):
        result = ArchiveSerializer(tmp_path).write(document, "home")
        assert result.directory_path.parent == tmp_path
        assert result.unique_name.startswith("home_")
        assert result.archive_path == tmp_path / f"{result.unique_name}.sketch"
        assert result.size_bytes == result.archive_path.stat().st_size

        report = validate_directory(result.directory_path)
        assert report.violations == []
        assert report.warnings == []

    @pytest.mark.unit
    def test_zip_contents_match_directory(self, tmp_path, document):
        result = ArchiveSerializer(tmp_path).write(document, "home")
        page_id = document.pages[0].object_id
        with ZipFile(result.archive_path) as zf:
            names = set(zf.namelist())
            assert {"document.json", "meta.json", "user.json", f"pages/{page_id}.json"} <= names
            assert any(name.rstrip("/") == "pages" for name in names)
            packed = json.loads(zf.read(f"pages/{page_id}.json"))
        assert packed == _read(result.directory_path / "pages" / f"{page_id}.json")

    @pytest.mark.unit
    def test_written_json_keeps_unicode(self, tmp_path, factory):
        title = factory.text("我的订单", (0, 0, 200, 24), StyleSpec())
        artboard = factory.artboard("订单", 393, 852, children=[title])
        document = factory.document([factory.page("Design", [artboard])])
        result = ArchiveSerializer(tmp_path).write(document, "orders")
        page_file = next((result.directory_path / "pages").iterdir())
        assert "我的订单" in page_file.read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_unique_names_on_clash(self, tmp_path, document, frozen_clock):
        serializer = ArchiveSerializer(tmp_path)
        first = serializer.write(document, "home")
        second = serializer.write(document, "home")
        assert first.unique_name == "home_1718000000000"
        assert second.unique_name == "home_1718000000000_1"
        assert first.archive_path.exists()
        assert second.archive_path.exists()

    @pytest.mark.unit
    def test_default_filename_from_environment(self, tmp_path, document, monkeypatch):
        monkeypatch.setenv("SKETCH_FILENAME", "fromenv")
        result = ArchiveSerializer(tmp_path).write(document)
        assert result.unique_name.startswith("fromenv_")

    @pytest.mark.unit
    def test_validation_failure_keeps_directory(self, tmp_path, factory):
        card = factory.rectangle((0, 0, 10, 10), StyleSpec())
        artboard = factory.artboard("Dup", 100, 100, children=[card, card])
        document = factory.document([factory.page("Design", [artboard])])

        with pytest.raises(ValidationFailed) as excinfo:
            ArchiveSerializer(tmp_path).write(document, "dup")
        assert "duplicate_id" in {v.error_type for v in excinfo.value.violations}
        assert excinfo.value.directory.is_dir()
        assert not list(tmp_path.glob("*.sketch"))
        assert len([p for p in tmp_path.iterdir() if p.is_dir()]) == 1

    @pytest.mark.unit
    def test_validation_can_be_disabled(self, tmp_path, factory):
        card = factory.rectangle((0, 0, 10, 10), StyleSpec())
        artboard = factory.artboard("Dup", 100, 100, children=[card, card])
        document = factory.document([factory.page("Design", [artboard])])
        result = ArchiveSerializer(tmp_path, validate=False).write(document, "dup")
        assert result.archive_path.exists()

    @pytest.mark.unit
    def test_io_failure(self, tmp_path, document):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(IOFailure) as excinfo:
            ArchiveSerializer(blocker).write(document, "home")
        assert isinstance(excinfo.value.__cause__, OSError)

    @pytest.mark.unit
    @pytest.mark.parametrize("filename", ["../escaped", "nested/home", "..", "."])
    def test_rejects_names_outside_root(self, tmp_path, document, filename):
        root = tmp_path / "out"
        with pytest.raises(InvalidFilename):
            ArchiveSerializer(root, validate=False).write(document, filename)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_rejects_absolute_name(self, tmp_path, document):
        root = tmp_path / "out"
        target = tmp_path / "elsewhere" / "home"
        with pytest.raises(InvalidFilename) as excinfo:
            ArchiveSerializer(root).write(document, str(target))
        assert isinstance(excinfo.value, ValueError)
        assert isinstance(excinfo.value, IOFailure)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_write_async(self, tmp_path, document):
        result = await ArchiveSerializer(tmp_path).write_async(document, "async")
        assert result.archive_path.exists()
        assert validate_directory(result.directory_path).valid


class TestExportSketch:
    """Tests for the config-to-archive entry point."""

    @pytest.mark.unit
    def test_export_from_config(self, tmp_path, factory):
        config = {
            "pageName": "Orders",
            "filename": "orders",
            "modules": [{"type": "header", "title": "我的订单"}, {"type": "hero", "title": "Sale"}],
        }
        result = export_sketch(config, output_dir=tmp_path, factory=factory)
        assert result.unique_name.startswith("orders_")
        meta = _read(result.directory_path / "meta.json")
        (entry,) = meta["pagesAndArtboards"].values()
        assert entry["name"] == "Orders"
        assert validate_directory(result.directory_path).valid
