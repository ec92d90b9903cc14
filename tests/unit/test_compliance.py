"""Tests for document checks and the contrast audit."""

from __future__ import annotations

from themeweave.core.compliance import audit_contrast, check_store
from themeweave.core.document_index import DocumentIndex
from themeweave.core.resolver import Resolver
from themeweave.core.store import ThemeStore


class TestAuditContrast:
    def test_sample_surfaces_pass(self, resolver):
        assert audit_contrast(resolver) == []

    def test_include_passing(self, resolver):
        findings = audit_contrast(resolver, include_passing=True)
        by_surface = {f.surface: f for f in findings}
        light = by_surface["brand:themes.light.layers.layer-1.properties.surface"]
        assert light.on_tone == "#000000"
        assert light.passes

    def test_failing_surface(self):
        brand = {"layers": {"surface": "#767676"}}
        findings = audit_contrast(Resolver(DocumentIndex(brand=brand)), candidates=["#777777", "#888888"])
        assert len(findings) == 1
        assert not findings[0].passes

    def test_non_color_surfaces_are_skipped(self):
        brand = {"layers": {"surface": "linear-gradient(red, blue)"}}
        assert audit_contrast(Resolver(DocumentIndex(brand=brand)), include_passing=True) == []


class TestCheckStore:
    def test_clean_documents(self, store):
        report = check_store(store)
        assert report.is_valid
        assert report.warnings == []

    def test_cycle_is_an_error(self, tokens_doc):
        store = ThemeStore(tokens=tokens_doc, brand={"a": {"$value": "{brand.b}"}, "b": {"$value": "{brand.a}"}})
        report = check_store(store)
        assert not report.is_valid
        assert any("Cyclic reference" in error for error in report.errors)

    def test_unresolved_is_a_warning(self, tokens_doc):
        store = ThemeStore(tokens=tokens_doc, brand={"a": {"$value": "{tokens.missing}"}})
        report = check_store(store)
        assert report.is_valid
        assert any("--tw-brand-a" in warning for warning in report.warnings)

    def test_strict_mode_flags_malformed_references(self, tokens_doc):
        store = ThemeStore(tokens=tokens_doc, brand={"a": {"$value": "{tokens.size.md"}})
        assert check_store(store).is_valid
        report = check_store(store, strict=True)
        assert not report.is_valid
        assert "brand:a" in report.errors[0]

    def test_repr(self, store):
        assert repr(check_store(store)) == "CheckReport(errors=0, warnings=0)"
