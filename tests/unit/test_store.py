"""Tests for the reactive theme store."""

from __future__ import annotations

import logging

import pytest

from themeweave.core.css import render_css
from themeweave.core.errors import MalformedReference, VariableNameCollision
from themeweave.core.ir import (
    ChangeEvent,
    Collection,
    ElevationSettings,
    ScaleByDefault,
    StoreState,
)
from themeweave.core.overrides import OVERRIDES_STORAGE_KEY, MemoryKeyValueStore, OverrideLayer
from themeweave.core.store import ThemeStore

SIZE_MD = "--tw-tokens-size-md"
LIGHT_PADDING = "--tw-brand-themes-light-layers-layer-1-properties-padding"
BUTTON_PADDING = "--tw-components-button-padding"
ELEVATION = "--tw-brand-themes-light-elevations-elevation-{level}-{output}"


@pytest.fixture
def events(store) -> list[ChangeEvent]:
    received: list[ChangeEvent] = []
    store.subscribe(received.append)
    return received


class TestProjection:
    def test_token_brand_and_component_outputs(self, store):
        assert store.value_of(SIZE_MD) == 16
        assert store.value_of(LIGHT_PADDING) == 16
        assert store.value_of(BUTTON_PADDING) == 16
        assert store.value_of("--tw-components-button-background") == "#1f6feb"
        assert store.value_of("--tw-brand-typography-body") == "Inter"

    def test_elevation_outputs(self, store):
        assert store.value_of(ELEVATION.format(level=1, output="blur")) == "4px"
        assert store.value_of(ELEVATION.format(level=4, output="y-offset")) == "16px"
        assert store.value_of(ELEVATION.format(level=0, output="x-offset")) == "0px"
        assert store.value_of(ELEVATION.format(level=1, output="shadow-color")).startswith("color-mix(")

    def test_raw_elevation_leaves_are_not_outputs(self, store):
        assert ELEVATION.format(level=1, output="x-direction") not in store
        assert ELEVATION.format(level=1, output="y") not in store

    def test_on_tone_outputs(self, store):
        assert store.value_of("--tw-brand-themes-light-layers-layer-1-properties-on-surface") == "#000000"
        assert store.value_of("--tw-brand-themes-dark-layers-layer-1-properties-on-surface") == "#ffffff"

    def test_variables_carry_their_source(self, store):
        by_name = {v.name: v for v in store.variables()}
        assert by_name[SIZE_MD].source == "tokens:size.md"
        assert by_name[SIZE_MD].css_value() == "16"

    def test_documents_are_copied_on_entry(self, store, tokens_doc):
        tokens_doc["tokens"]["size"]["md"]["$value"] = 99
        assert store.resolve(Collection.TOKENS, ("size", "md")) == 16

    def test_persisted_overrides_apply_at_start_up(self, tokens_doc, brand_doc):
        storage = MemoryKeyValueStore({OVERRIDES_STORAGE_KEY: '{"size/md": 24}'})
        store = ThemeStore(tokens=tokens_doc, brand=brand_doc, overrides=OverrideLayer(storage))
        assert store.value_of(LIGHT_PADDING) == 24

    def test_list_token_renders_as_font_stack(self, tokens_doc):
        tokens_doc["tokens"]["font"]["family"]["base"]["$value"] = ["Inter", "sans-serif"]
        store = ThemeStore(tokens=tokens_doc)
        css = render_css(store.variables())
        assert "  --tw-tokens-font-family-base: Inter, sans-serif;" in css
        assert "  --tw-tokens-size-md: 16;" in css

    def test_structured_token_fails_alone(self, tokens_doc, caplog):
        tokens_doc["tokens"]["shadow"] = {"base": {"$value": [{"x": 0, "y": 1}]}}
        with caplog.at_level(logging.WARNING):
            store = ThemeStore(tokens=tokens_doc)
        assert "--tw-tokens-shadow-base" not in store
        assert "Non-literal value" in caplog.text
        css = render_css(store.variables())
        assert "  --tw-tokens-size-md: 16;" in css


class TestReads:
    def test_resolve_scenario(self, store):
        path = ("layers", "layer-1", "properties", "padding")
        assert store.resolve(Collection.BRAND, path) == 16
        store.set_override("size/md", 24)
        assert store.resolve(Collection.BRAND, path) == 24

    def test_resolve_text(self, store):
        assert store.resolve_text("{brand.layers.layer-1.properties.padding}") == 16
        assert store.resolve_text("tokens.size.2x") == 24

    def test_resolve_text_rejects_literals(self, store):
        with pytest.raises(MalformedReference):
            store.resolve_text("Inter")

    def test_value_of_unknown(self, store):
        assert store.value_of("--tw-nope") is None


class TestOverrides:
    def test_override_notifies_minimal_changed_set(self, store, events):
        store.set_override("size/md", 24)
        assert len(events) == 1
        assert set(events[0].changed_variable_names) == {
            SIZE_MD,
            LIGHT_PADDING,
            BUTTON_PADDING,
            ELEVATION.format(level=4, output="y-offset"),
        }
        assert store.value_of(BUTTON_PADDING) == 24

    def test_no_event_when_nothing_changes(self, store, events):
        store.set_override("size/md", 16)
        assert events == []

    def test_clear_override_reverts(self, store, events):
        store.set_override("size/md", 24)
        store.clear_override("size/md")
        assert store.value_of(LIGHT_PADDING) == 16
        assert len(events) == 2
        assert events[1].touches(LIGHT_PADDING)

    def test_clear_overrides_is_one_pass(self, store, events):
        store.set_override("size/md", 24)
        store.set_override("size/1x", 10)
        events.clear()
        store.clear_overrides(["size/md", "size/1x"])
        assert len(events) == 1
        assert SIZE_MD in events[0].changed_variable_names
        assert "--tw-tokens-size-1x" in events[0].changed_variable_names

    def test_clear_all_overrides(self, store):
        store.set_override("size/md", 24)
        store.set_override("size/1x", 10)
        store.clear_overrides()
        assert store.overrides.get_all() == {}
        assert store.value_of(SIZE_MD) == 16

    def test_unsubscribe(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        store.set_override("size/md", 24)
        assert received == []

    def test_store_is_idle_when_notifying(self, store):
        states = []
        store.subscribe(lambda event: states.append(store.state))
        store.set_override("size/md", 24)
        assert states == [StoreState.IDLE]


class TestDocuments:
    def test_set_document_re_resolves(self, store, events, tokens_doc):
        tokens_doc["tokens"]["size"]["md"]["$value"] = 20
        store.set_document("tokens", tokens_doc)
        assert store.value_of(LIGHT_PADDING) == 20
        assert events[0].touches(SIZE_MD)

    def test_cycle_keeps_previous_value(self, tokens_doc, caplog):
        store = ThemeStore(tokens=tokens_doc, brand={"x": {"$value": "{tokens.size.md}"}})
        received = []
        store.subscribe(received.append)

        with caplog.at_level(logging.ERROR):
            store.set_document(
                Collection.BRAND,
                {"x": {"$value": "{brand.y}"}, "y": {"$value": "{brand.x}"}},
            )

        assert store.value_of("--tw-brand-x") == 16
        assert "--tw-brand-y" not in store
        assert received == []
        assert "Cyclic reference" in caplog.text

    def test_unresolved_keeps_previous_value(self, store, tokens_doc, caplog):
        del tokens_doc["tokens"]["size"]["md"]
        with caplog.at_level(logging.WARNING):
            store.set_document("tokens", tokens_doc)
        assert store.value_of(LIGHT_PADDING) == 16
        assert SIZE_MD not in store
        assert "Unresolved path" in caplog.text

    def test_collision_rejects_document(self, store, tokens_doc):
        colliding = {"space": {"offsetX": {"$value": 1}, "offset-x": {"$value": 2}}}
        with pytest.raises(VariableNameCollision) as exc_info:
            store.set_document("tokens", colliding)
        assert "--tw-tokens-space-offset-x" in exc_info.value.collisions
        assert store.document("tokens") == tokens_doc
        assert store.value_of(SIZE_MD) == 16

    def test_document_returns_a_copy(self, store):
        document = store.document(Collection.TOKENS)
        document["tokens"]["size"]["md"]["$value"] = 1
        assert store.resolve(Collection.TOKENS, ("size", "md")) == 16


class TestModeAndSettings:
    def test_set_mode(self, store, events):
        store.set_mode("dark")
        assert store.value_of(BUTTON_PADDING) == 24
        assert events[0].changed_variable_names == (BUTTON_PADDING,)

    def test_set_elevation_settings(self, store):
        store.set_elevation_settings(ElevationSettings(scale_by_default=ScaleByDefault(blur=False)))
        assert store.value_of(ELEVATION.format(level=1, output="blur")) == "8px"

    def test_reset(self, store, events):
        store.set_override("size/md", 24)
        store.set_document("brand", {})
        events.clear()

        store.reset()

        assert len(events) == 1
        assert store.overrides.get_all() == {}
        assert store.value_of(LIGHT_PADDING) == 16
        assert store.value_of(SIZE_MD) == 16

    def test_close_detaches_from_overrides(self, store, events):
        store.close()
        store.overrides.set("size/md", 24)
        assert events == []
        assert store.value_of(SIZE_MD) == 16
