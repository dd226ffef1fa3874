"""Tests for structural RAML validation."""

from __future__ import annotations

from raml2html.models.errors import Position
from raml2html.parser.loader import RamlLoader
from raml2html.parser.validator import RamlValidator, reference_names
from tests.conftest import LIBRARY_API, SAMPLE_RAML, SAMPLE_RAML_WITH_DIAGNOSTICS


def _validate(loader: RamlLoader, validator: RamlValidator, path) -> list:
    doc = loader.load(path)
    assert doc.ok, doc.errors
    return validator.validate(doc.data, doc.source_map, doc.file)


class TestValidDocuments:
    def test_sample_is_clean(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        assert _validate(loader, validator, write_raml(SAMPLE_RAML)) == []

    def test_library_is_clean(self, loader: RamlLoader, validator: RamlValidator) -> None:
        assert _validate(loader, validator, LIBRARY_API) == []


class TestDiagnostics:
    def test_errors_and_warnings(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        errors = _validate(loader, validator, write_raml(SAMPLE_RAML_WITH_DIAGNOSTICS))
        by_code = {e.code: e for e in errors}
        assert set(by_code) == {"UNKNOWN_NODE", "EMPTY_RESOURCE"}

        unknown = by_code["UNKNOWN_NODE"]
        assert unknown.is_warning is False
        assert unknown.path == "api.raml"
        assert unknown.range is not None
        assert unknown.range.start == Position(line=4, column=1)

        empty = by_code["EMPTY_RESOURCE"]
        assert empty.is_warning is True
        assert empty.range is not None
        assert empty.range.start.line == 5

    def test_title_required(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        errors = _validate(loader, validator, write_raml("#%RAML 1.0\ndescription: d\n"))
        assert [e.code for e in errors] == ["TITLE_REQUIRED"]

    def test_missing_description_is_warning(
        self, loader: RamlLoader, validator: RamlValidator, write_raml
    ) -> None:
        errors = _validate(loader, validator, write_raml("#%RAML 1.0\ntitle: T\n"))
        assert [(e.code, e.is_warning) for e in errors] == [("MISSING_DESCRIPTION", True)]

    def test_missing_version(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        raml = "#%RAML 1.0\ntitle: T\ndescription: d\nbaseUri: http://x/{version}\n"
        errors = _validate(loader, validator, write_raml(raml))
        assert [e.code for e in errors] == ["MISSING_VERSION"]
        assert errors[0].range.start.line == 4

    def test_invalid_method(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        raml = "#%RAML 1.0\ntitle: T\ndescription: d\n/a:\n  fetch:\n    description: nope\n  get:\n"
        errors = _validate(loader, validator, write_raml(raml))
        assert [e.code for e in errors] == ["INVALID_METHOD"]
        assert errors[0].range.start == Position(line=5, column=3)

    def test_invalid_status_code(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        raml = (
            "#%RAML 1.0\ntitle: T\ndescription: d\n/a:\n  get:\n"
            "    responses:\n      200:\n      abc:\n"
        )
        errors = _validate(loader, validator, write_raml(raml))
        assert [e.code for e in errors] == ["INVALID_STATUS_CODE"]
        assert errors[0].range.start.line == 8

    def test_unknown_trait_and_resource_type(
        self, loader: RamlLoader, validator: RamlValidator, write_raml
    ) -> None:
        raml = (
            "#%RAML 1.0\ntitle: T\ndescription: d\n"
            "/a:\n  type: missingType\n  get:\n    is: [missingTrait]\n"
        )
        errors = _validate(loader, validator, write_raml(raml))
        assert sorted(e.code for e in errors) == ["UNKNOWN_RESOURCE_TYPE", "UNKNOWN_TRAIT"]

    def test_library_references_are_not_checked(
        self, loader: RamlLoader, validator: RamlValidator, write_raml
    ) -> None:
        raml = "#%RAML 1.0\ntitle: T\ndescription: d\n/a:\n  get:\n    is: [lib.paged]\n"
        assert _validate(loader, validator, write_raml(raml)) == []

    def test_annotations_allowed(self, loader: RamlLoader, validator: RamlValidator, write_raml) -> None:
        raml = "#%RAML 1.0\ntitle: T\ndescription: d\n(internal): true\n/a:\n  (owner): team\n  get:\n"
        assert _validate(loader, validator, write_raml(raml)) == []


class TestReferenceNames:
    def test_forms(self) -> None:
        assert reference_names(None) == []
        assert reference_names("paged") == ["paged"]
        assert reference_names(["a", {"b": {"size": 1}}]) == ["a", "b"]
        assert reference_names({"collection": {}}) == ["collection"]
