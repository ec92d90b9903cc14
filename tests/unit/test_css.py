"""Tests for CSS rendering."""

from __future__ import annotations

from themeweave.core.css import export_css, mode_selector, render_css, render_delta
from themeweave.core.ir import ResolvedVariable


class TestRenderCss:
    def test_root_block(self):
        css = render_css(
            [
                ResolvedVariable(name="--tw-tokens-size-md", value=16),
                ResolvedVariable(name="--tw-tokens-color-black", value="#000000"),
            ]
        )
        assert css == ":root {\n  --tw-tokens-size-md: 16;\n  --tw-tokens-color-black: #000000;\n}\n"

    def test_header_and_selector(self):
        css = render_css([], selector=mode_selector("dark"), header="generated")
        assert css.startswith("/* generated */\n")
        assert '[data-theme="dark"] {' in css

    def test_mode_selector_default(self):
        assert mode_selector(None) == ":root"

    def test_integral_floats_render_without_decimals(self):
        assert ResolvedVariable(name="--x", value=4.0).css_value() == "4"
        assert ResolvedVariable(name="--x", value=0.4).css_value() == "0.4"


class TestStoreRendering:
    def test_render_delta(self, store):
        events = []
        store.subscribe(events.append)
        store.set_override("size/md", 24)
        delta = render_delta(store, events[0])
        assert delta["--tw-tokens-size-md"] == "24"
        assert delta["--tw-brand-themes-light-elevations-elevation-4-y-offset"] == "24px"

    def test_render_delta_reports_removals(self, store):
        events = []
        store.subscribe(events.append)
        store.set_document("components", {})
        delta = render_delta(store, events[0])
        assert delta["--tw-components-button-padding"] is None

    def test_export_css(self, store, tmp_path):
        path = export_css(store, tmp_path / "dist" / "theme.css")
        text = path.read_text()
        assert text.startswith("/* themeweave (light)")
        assert "  --tw-components-button-padding: 16;" in text
        assert "--tw-brand-themes-light-elevations-elevation-1-blur: 4px;" in text
