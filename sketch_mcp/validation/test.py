"""Unit tests for structural validation."""

import json
import random

import pytest

from sketch_mcp.codec import IdentifierSource
from sketch_mcp.model import Group, LayerClass, NodeFactory, StyleSpec

from .files import validate_archive, validate_directory
from .lib import LAYER_HANDLERS, ValidationReport, check, is_valid, validate


@pytest.fixture
def factory():
    return NodeFactory(IdentifierSource(random.Random(11)))


@pytest.fixture
def document(factory):
    """Small document: one page, one artboard with a card and a CJK title."""
    card = factory.rectangle(
        (16, 80, 361, 120),
        StyleSpec(fills=["#FFFFFF"], corner_radius=12, border_color="#E5E5EA"),
        name="Card",
    )
    title = factory.text(
        "我的订单",
        (16, 16, 361, 24),
        StyleSpec(font_family="Roboto-Bold", font_size=18, color="#1C1C1E", alignment="center"),
    )
    artboard = factory.artboard("Home", 393, 852, "#F2F2F7", [card, title])
    return factory.document([factory.page("Design", [artboard])])


def _types(violations):
    return {v.error_type for v in violations}


def _artboard(data):
    return data["pages"][0]["layers"][0]


class TestCheck:
    """Tests for in-memory validation."""

    @pytest.mark.unit
    def test_fresh_document_is_valid(self, document):
        report = check(document)
        assert isinstance(report, ValidationReport)
        assert report.violations == []
        assert report.valid
        assert is_valid(document)

    @pytest.mark.unit
    def test_accepts_parsed_json(self, document):
        assert validate(document.to_sketch()) == []

    @pytest.mark.unit
    def test_page_and_layer_roots(self, document):
        page = document.pages[0]
        assert validate(page) == []
        assert validate(page.layers[0]) == []

    @pytest.mark.unit
    def test_handler_per_layer_class(self):
        assert set(LAYER_HANDLERS) == set(LayerClass)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["nope", None, 42, []])
    def test_never_raises_on_garbage(self, value):
        violations = validate(value)
        assert _types(violations) == {"wrong_type"}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "in_group, key, value, expected",
        [
            (True, "_class", ["rectangle"], "unhandled_variant"),
            (True, "_class", {"name": "rectangle"}, "unhandled_variant"),
            (False, "layers", 5, "wrong_type"),
            (True, "frame", "{0, 0, 10, 10}", "wrong_type"),
            (True, "do_objectID", ["A"], "wrong_type"),
            (True, "style", [], "wrong_type"),
        ],
    )
    def test_never_raises_on_nested_garbage(self, factory, in_group, key, value, expected):
        child = factory.rectangle((0, 0, 10, 10), StyleSpec(), name="Child")
        group = factory.group("Group", [child])
        artboard = factory.artboard("Home", 393, 852, children=[group])
        data = factory.document([factory.page("Design", [artboard])]).to_sketch()
        target = _artboard(data)["layers"][1]
        if in_group:
            target = target["layers"][0]
        target[key] = value

        violations = validate(data)
        assert _types(violations) == {expected}
        assert all(v.path.startswith("document.pages[0].layers[0].layers[1]") for v in violations)

    @pytest.mark.unit
    def test_unhashable_class_at_root(self):
        violations = validate({"_class": ["rectangle"]})
        assert _types(violations) == {"unhandled_variant"}
        assert violations[0].path == "layer._class"

    @pytest.mark.unit
    def test_empty_object(self):
        violations = validate({})
        assert "unhandled_variant" in _types(violations)


class TestFieldRules:
    """Tests for individual structural rules."""

    @pytest.mark.unit
    def test_color_channel_out_of_range(self, document):
        data = document.to_sketch()
        _artboard(data)["backgroundColor"]["red"] = 1.5
        violations = validate(data)
        assert len(violations) == 1
        assert violations[0].error_type == "out_of_range"
        assert violations[0].path.endswith("backgroundColor.red")

    @pytest.mark.unit
    def test_missing_export_options(self, document):
        data = document.to_sketch()
        del _artboard(data)["layers"][1]["exportOptions"]
        violations = validate(data)
        assert _types(violations) == {"missing_field"}

    @pytest.mark.unit
    def test_wrong_type(self, document):
        data = document.to_sketch()
        _artboard(data)["isVisible"] = "yes"
        assert _types(validate(data)) == {"wrong_type"}

    @pytest.mark.unit
    def test_wrong_class_tag(self, document):
        data = document.to_sketch()
        _artboard(data)["frame"]["_class"] = "frame"
        assert _types(validate(data)) == {"wrong_class"}

    @pytest.mark.unit
    def test_rectangle_needs_four_points(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][1]["points"].pop()
        violations = validate(data)
        assert _types(violations) == {"cardinality"}

    @pytest.mark.unit
    def test_malformed_point_string(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][1]["points"][0]["point"] = "0, 0"
        assert _types(validate(data)) == {"invalid_point"}

    @pytest.mark.unit
    def test_invalid_border_position(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][1]["style"]["borders"][0]["position"] = 7
        assert _types(validate(data)) == {"invalid_enum"}

    @pytest.mark.unit
    def test_resizing_constraint_mask(self, document):
        data = document.to_sketch()
        _artboard(data)["resizingConstraint"] = 64
        assert _types(validate(data)) == {"invalid_enum"}

    @pytest.mark.unit
    def test_current_page_index_out_of_range(self, document):
        data = document.to_sketch()
        data["currentPageIndex"] = 3
        assert _types(validate(data)) == {"out_of_range"}

    @pytest.mark.unit
    def test_missing_shared_container(self, document):
        data = document.to_sketch()
        del data["layerTextStyles"]
        assert _types(validate(data)) == {"missing_field"}

    @pytest.mark.unit
    def test_span_outside_string(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][2]["attributedString"]["attributes"][0]["length"] = 10
        assert _types(validate(data)) == {"out_of_range"}


class TestIdentifiers:
    """Tests for identifier rules."""

    @pytest.mark.unit
    def test_malformed_identifier(self, document):
        data = document.to_sketch()
        _artboard(data)["do_objectID"] = "not-a-uuid"
        assert _types(validate(data)) == {"invalid_identifier"}

    @pytest.mark.unit
    def test_lowercase_identifier_accepted(self, document):
        data = document.to_sketch()
        _artboard(data)["do_objectID"] = _artboard(data)["do_objectID"].lower()
        assert validate(data) == []

    @pytest.mark.unit
    def test_duplicate_identifier(self, document):
        data = document.to_sketch()
        layers = _artboard(data)["layers"]
        layers[2]["do_objectID"] = layers[1]["do_objectID"]
        violations = validate(data)
        assert _types(violations) == {"duplicate_id"}
        assert layers[1]["do_objectID"] in violations[0].message

    @pytest.mark.unit
    def test_style_identifier_collision(self, document):
        data = document.to_sketch()
        rect = _artboard(data)["layers"][1]
        rect["style"]["do_objectID"] = rect["do_objectID"]
        assert _types(validate(data)) == {"duplicate_id"}


class TestVariants:
    """Tests for layer dispatch."""

    @pytest.mark.unit
    def test_unknown_layer_class(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][1]["_class"] = "hologram"
        violations = validate(data)
        assert _types(violations) == {"unhandled_variant"}

    @pytest.mark.unit
    def test_unmodeled_layer_class_warns(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][1]["_class"] = "oval"
        report = check(data)
        assert report.valid
        assert _types(report.warnings) == {"unmodeled_variant"}

    @pytest.mark.unit
    def test_group_children_are_checked(self, factory):
        child = factory.rectangle((0, 0, 5, 5))
        base = factory.layer_base(LayerClass.GROUP, (0, 0, 10, 10), name="Group")
        data = Group(**base, layers=[child]).to_sketch()
        assert validate(data) == []
        data["layers"][0]["fixedRadius"] = "round"
        assert _types(validate(data)) == {"wrong_type"}


class TestDocumentRules:
    """Tests for graph-wide rules."""

    @pytest.mark.unit
    def test_font_mismatch(self, document):
        data = document.to_sketch()
        font = _artboard(data)["layers"][2]["style"]["textStyle"]["encodeAttributes"][
            "MSAttributedStringFontAttribute"
        ]["attributes"]
        font["name"] = "Roboto-Bold"
        font["size"] = 18
        assert _types(validate(data)) == {"font_mismatch"}

    @pytest.mark.unit
    def test_missing_background(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"].pop(0)
        assert "missing_background" in _types(validate(data))

    @pytest.mark.unit
    def test_empty_artboard(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"] = []
        assert _types(validate(data)) == {"missing_background"}

    @pytest.mark.unit
    def test_background_must_cover_frame(self, document):
        data = document.to_sketch()
        _artboard(data)["layers"][0]["frame"]["width"] = 100
        assert _types(validate(data)) == {"missing_background"}

    @pytest.mark.unit
    def test_text_requires_style_text_style(self, document):
        data = document.to_sketch()
        del _artboard(data)["layers"][2]["style"]["textStyle"]
        violations = validate(data)
        assert _types(violations) == {"missing_field"}
        assert violations[0].path == "document.pages[0].layers[0].layers[2].style.textStyle"


# =============================================================================
# Cross-file validation
# =============================================================================


def _write_archive(root, document):
    """Write a document into the unpacked archive layout."""
    data = document.to_sketch()
    pages = data.pop("pages")
    data["pages"] = [
        {"_class": "MSJSONFileReference", "_ref_class": "MSImmutablePage", "_ref": f"pages/{p['do_objectID']}"}
        for p in pages
    ]
    (root / "pages").mkdir(parents=True)
    for page in pages:
        (root / "pages" / f"{page['do_objectID']}.json").write_text(json.dumps(page))
    (root / "document.json").write_text(json.dumps(data))
    meta = {
        "commit": "eec98fa25f4692ad75f1a3b955a6293b4a93836e",
        "version": 136,
        "compatibilityVersion": 99,
        "app": "com.bohemiancoding.sketch3",
        "autosaved": 0,
        "variant": "NONAPPSTORE",
        "fonts": [],
        "appVersion": "74.1",
        "build": 128920,
        "pagesAndArtboards": {
            p["do_objectID"]: {
                "name": p["name"],
                "artboards": {a["do_objectID"]: {"name": a["name"]} for a in p["layers"]},
            }
            for p in pages
        },
    }
    (root / "meta.json").write_text(json.dumps(meta))
    user = {"document": {"pageListHeight": 85, "pageListCollapsed": 0}}
    for page in pages:
        user[page["do_objectID"]] = {"scrollOrigin": "{-0.000000, -0.000000}", "zoomValue": 0.8}
    (root / "user.json").write_text(json.dumps(user))
    return pages[0]["do_objectID"]


class TestValidateDirectory:
    """Tests for cross-file validation."""

    @pytest.mark.unit
    def test_valid_archive(self, tmp_path, document):
        _write_archive(tmp_path, document)
        report = validate_directory(tmp_path)
        assert report.violations == []
        assert report.warnings == []

    @pytest.mark.unit
    def test_not_a_directory(self, tmp_path):
        report = validate_directory(tmp_path / "missing")
        assert _types(report.violations) == {"missing_file"}

    @pytest.mark.unit
    def test_missing_user_file(self, tmp_path, document):
        _write_archive(tmp_path, document)
        (tmp_path / "user.json").unlink()
        report = validate_directory(tmp_path)
        assert [(v.file, v.error_type) for v in report.violations] == [
            ("user.json", "missing_file")
        ]

    @pytest.mark.unit
    def test_parse_error_scoped_to_file(self, tmp_path, document):
        page_id = _write_archive(tmp_path, document)
        (tmp_path / "pages" / f"{page_id}.json").write_text("{not json")
        report = validate_directory(tmp_path)
        errors = [v for v in report.violations if v.error_type == "parse_error"]
        assert len(errors) == 1
        assert errors[0].file == f"pages/{page_id}.json"

    @pytest.mark.unit
    def test_unresolved_reference(self, tmp_path, document):
        page_id = _write_archive(tmp_path, document)
        (tmp_path / "pages" / f"{page_id}.json").unlink()
        report = validate_directory(tmp_path)
        assert "unresolved_reference" in _types(report.violations)

    @pytest.mark.unit
    def test_page_id_must_match_file_name(self, tmp_path, document):
        page_id = _write_archive(tmp_path, document)
        page_file = tmp_path / "pages" / f"{page_id}.json"
        page = json.loads(page_file.read_text())
        page["do_objectID"] = "0B2E1C43-7F1A-4C8E-9D2B-3A4F5E6D7C8B"
        page_file.write_text(json.dumps(page))
        report = validate_directory(tmp_path)
        assert _types(report.violations) == {"id_mismatch"}

    @pytest.mark.unit
    def test_unreferenced_page_file(self, tmp_path, document):
        _write_archive(tmp_path, document)
        (tmp_path / "pages" / "0B2E1C43-7F1A-4C8E-9D2B-3A4F5E6D7C8B.json").write_text("{}")
        report = validate_directory(tmp_path)
        assert report.valid
        assert _types(report.warnings) == {"unreferenced_file"}

    @pytest.mark.unit
    def test_compatibility_version(self, tmp_path, document):
        _write_archive(tmp_path, document)
        meta = json.loads((tmp_path / "meta.json").read_text())
        meta["compatibilityVersion"] = 98
        (tmp_path / "meta.json").write_text(json.dumps(meta))
        assert _types(validate_directory(tmp_path).violations) == {"unsupported_version"}

    @pytest.mark.unit
    def test_meta_index_missing_page(self, tmp_path, document):
        _write_archive(tmp_path, document)
        meta = json.loads((tmp_path / "meta.json").read_text())
        meta["pagesAndArtboards"] = {}
        (tmp_path / "meta.json").write_text(json.dumps(meta))
        assert _types(validate_directory(tmp_path).violations) == {"index_mismatch"}

    @pytest.mark.unit
    def test_missing_view_state(self, tmp_path, document):
        page_id = _write_archive(tmp_path, document)
        user = json.loads((tmp_path / "user.json").read_text())
        del user[page_id]
        (tmp_path / "user.json").write_text(json.dumps(user))
        report = validate_directory(tmp_path)
        assert [(v.file, v.error_type) for v in report.violations] == [
            ("user.json", "missing_view_state")
        ]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "mutate, expected",
        [
            (lambda page: page.update(layers=5), "wrong_type"),
            (lambda page: page["layers"][0]["layers"][1].update(_class=["rectangle"]), "unhandled_variant"),
            (lambda page: page["layers"][0]["layers"][1].update(frame="{0, 0}"), "wrong_type"),
        ],
        ids=["layers-not-a-list", "unhashable-class", "string-frame"],
    )
    def test_malformed_page_file(self, tmp_path, document, mutate, expected):
        page_id = _write_archive(tmp_path, document)
        page_file = tmp_path / "pages" / f"{page_id}.json"
        page = json.loads(page_file.read_text())
        mutate(page)
        page_file.write_text(json.dumps(page))

        report = validate_directory(tmp_path)
        assert [(v.file, v.error_type) for v in report.violations] == [
            (f"pages/{page_id}.json", expected)
        ]

    @pytest.mark.unit
    def test_non_string_artboard_id(self, tmp_path, document):
        page_id = _write_archive(tmp_path, document)
        page_file = tmp_path / "pages" / f"{page_id}.json"
        page = json.loads(page_file.read_text())
        page["layers"][0]["do_objectID"] = 7
        page_file.write_text(json.dumps(page))

        report = validate_directory(tmp_path)
        assert [(v.file, v.error_type) for v in report.violations] == [
            (f"pages/{page_id}.json", "wrong_type"),
            ("meta.json", "index_mismatch"),
        ]

    @pytest.mark.unit
    def test_embedded_pages_rejected(self, tmp_path, document):
        _write_archive(tmp_path, document)
        data = document.to_sketch()
        (tmp_path / "document.json").write_text(json.dumps(data))
        report = validate_directory(tmp_path)
        assert "wrong_class" in _types(report.violations)


class TestValidateArchive:
    """Tests for validating zipped archives."""

    @pytest.mark.unit
    def test_zipped_archive(self, tmp_path, document):
        import zipfile

        unpacked = tmp_path / "unpacked"
        _write_archive(unpacked, document)
        archive = tmp_path / "design.sketch"
        with zipfile.ZipFile(archive, "w") as zf:
            for path in sorted(unpacked.rglob("*")):
                zf.write(path, path.relative_to(unpacked).as_posix())

        assert validate_archive(archive).valid
        assert validate_archive(unpacked).valid

    @pytest.mark.unit
    def test_violation_to_dict(self):
        report = validate_archive("/nonexistent/path")
        (violation,) = report.violations
        assert violation.to_dict()["error_type"] == "missing_file"
