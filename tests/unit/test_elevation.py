"""Tests for elevation composition."""

from __future__ import annotations

import pytest

from themeweave.core.document_index import DocumentIndex
from themeweave.core.elevation import (
    ElevationComposer,
    format_px,
    read_elevation_specs,
    size_scale,
    step_token,
    to_number,
)
from themeweave.core.errors import UnresolvedPath
from themeweave.core.ir import (
    ElevationAxis,
    ElevationDirection,
    ElevationSettings,
    ScaleByDefault,
)
from themeweave.core.resolver import Resolver

SCALE = ["size/none", "size/0-5x", "size/1x", "size/1-5x", "size/2x", "size/3x", "size/md"]


class TestSizeScale:
    def test_ordered_by_name_then_value(self, index):
        assert size_scale(index) == SCALE

    def test_default_sits_between_half_and_one(self):
        tokens = {
            "size": {
                "2x": {"$value": 16},
                "1x": {"$value": 8},
                "default": {"$value": 8},
                "0-5x": {"$value": 4},
                "none": {"$value": 0},
            }
        }
        assert size_scale(DocumentIndex(tokens=tokens)) == [
            "size/none",
            "size/0-5x",
            "size/default",
            "size/1x",
            "size/2x",
        ]

    def test_name_beats_numeric_value(self):
        tokens = {"size": {"2x": {"$value": 4}, "1x": {"$value": 40}}}
        assert size_scale(DocumentIndex(tokens=tokens)) == ["size/1x", "size/2x"]

    def test_non_numeric_tokens_are_skipped(self):
        index = DocumentIndex(tokens={"size": {"auto": {"$value": "auto"}, "sm": {"$value": "4px"}}})
        assert size_scale(index) == ["size/sm"]

    def test_cyclic_size_tokens_are_skipped(self):
        tokens = {
            "size": {
                "a": {"$value": "{tokens.size.b}"},
                "b": {"$value": "{tokens.size.a}"},
                "1x": {"$value": 8},
            }
        }
        assert size_scale(DocumentIndex(tokens=tokens)) == ["size/1x"]

    def test_ties_keep_document_order(self):
        tokens = {"size": {"b": {"$value": 8}, "a": {"$value": 8}, "z": {"$value": 0}}}
        assert size_scale(DocumentIndex(tokens=tokens)) == ["size/z", "size/b", "size/a"]

    def test_step_token_clamps_at_top(self):
        assert step_token(SCALE, "size/none", 2) == "size/1x"
        assert step_token(SCALE, "size/2x", 4) == "size/md"
        assert step_token(SCALE, "size/unknown", 1) == "size/unknown"


class TestHelpers:
    def test_to_number(self):
        assert to_number(16) == 16.0
        assert to_number("12.5px") == 12.5
        assert to_number("auto") is None
        assert to_number(True) is None

    def test_format_px(self):
        assert format_px(4.0) == "4px"
        assert format_px(-2.5) == "-2.5px"


class TestReadSpecs:
    def test_levels_and_axes(self, index):
        specs = read_elevation_specs(index)
        assert sorted(specs) == [0, 1, 2, 3, 4]
        assert specs[1].axes[ElevationAxis.BLUR] == "{tokens.size.1x}"
        assert specs[1].axes[ElevationAxis.OFFSET_Y] == "{tokens.size.0-5x}"
        assert specs[3].axes[ElevationAxis.BLUR] is None

    def test_directions_default_from_level_one(self):
        brand = {
            "elevations": {
                "elevation-1": {"x-direction": {"$value": -1}, "y-direction": {"$value": 1}},
                "elevation-2": {"y-direction": {"$value": -1}},
            }
        }
        specs = read_elevation_specs(DocumentIndex(brand=brand))
        assert specs[1].direction == ElevationDirection(x="left", y="down")
        assert specs[2].direction == ElevationDirection(x="left", y="up")


class TestComposer:
    def test_blur_scales_from_level_zero_by_default(self, resolver):
        composer = ElevationComposer(resolver)
        blurs = [composer.axis_value(level, ElevationAxis.BLUR) for level in range(5)]
        assert blurs == [0, 4, 8, 12, 24]

    def test_unscaled_axis_uses_own_token(self, resolver):
        composer = ElevationComposer(resolver)
        offsets = [composer.axis_value(level, ElevationAxis.OFFSET_Y) for level in range(5)]
        assert offsets == [0, 4, 8, 12, 16]

    def test_scaling_disabled_uses_own_tokens(self, resolver):
        settings = ElevationSettings(scale_by_default=ScaleByDefault(blur=False))
        composer = ElevationComposer(resolver, settings)
        assert composer.axis_value(1, ElevationAxis.BLUR) == 8
        assert composer.axis_value(2, ElevationAxis.BLUR) == 16

    def test_missing_axis_is_zero(self, resolver):
        composer = ElevationComposer(resolver)
        assert composer.axis_value(3, ElevationAxis.SPREAD) == 0

    def test_scaled_values_clamp_and_stay_monotonic(self):
        tokens = {"size": {"sm": {"$value": 4}, "md": {"$value": 8}, "lg": {"$value": 16}}}
        brand = {
            "elevations": {
                f"elevation-{level}": {"blur": {"$value": "{tokens.size.md}"}} for level in range(5)
            }
        }
        composer = ElevationComposer(Resolver(DocumentIndex(tokens=tokens, brand=brand)))
        blurs = [composer.axis_value(level, ElevationAxis.BLUR) for level in range(5)]
        assert blurs == [8, 16, 16, 16, 16]
        assert blurs == sorted(blurs)

    def test_scaling_follows_overrides_but_not_order(self, index):
        composer = ElevationComposer(Resolver(index, {"size/1-5x": 100}))
        assert composer.scale == SCALE
        assert composer.axis_value(3, ElevationAxis.BLUR) == 100

    def test_direction_setting_negates_offsets(self, resolver):
        settings = ElevationSettings(directions={1: ElevationDirection(x="left", y="up")})
        composer = ElevationComposer(resolver, settings)
        assert composer.axis_value(1, ElevationAxis.OFFSET_Y) == -4
        assert composer.axis_value(2, ElevationAxis.OFFSET_Y) == 8

    def test_shadow_color_uses_token_variables(self, resolver):
        composer = ElevationComposer(resolver)
        assert composer.shadow_color(1) == (
            "color-mix(in srgb, var(--tw-tokens-color-black) "
            "calc(var(--tw-tokens-opacity-shadow) * 100%), transparent)"
        )

    def test_percentage_opacity_token(self, resolver):
        composer = ElevationComposer(resolver)
        assert "calc(var(--tw-tokens-opacity-strong) * 1%)" in composer.shadow_color(2)

    def test_literal_color_and_opacity(self):
        brand = {"elevations": {"elevation-0": {"color": "#000000", "opacity": 0.25}}}
        composer = ElevationComposer(Resolver(DocumentIndex(brand=brand)))
        assert composer.shadow_color(0) == "color-mix(in srgb, #000000 25%, transparent)"

    def test_missing_color_raises(self):
        brand = {"elevations": {"elevation-0": {"blur": 2}}}
        composer = ElevationComposer(Resolver(DocumentIndex(brand=brand)))
        with pytest.raises(UnresolvedPath):
            composer.shadow_color(0)

    def test_compose_level(self, resolver):
        level = ElevationComposer(resolver).compose(2)
        assert level.blur == 8
        assert level.offset_y == 8
        assert level.offset_x == 0
        assert level.axis_tokens[ElevationAxis.BLUR] == "size/1x"

    def test_output_path(self, resolver):
        composer = ElevationComposer(resolver)
        assert composer.output_path(1, "blur") == ("themes", "light", "elevations", "elevation-1", "blur")
