"""
Tests for the depth method catalogue and luminance depth estimation.
"""
import math

import numpy as np
import pytest

from chromadepth.depth import DepthEstimator, DepthMethod, estimate_depth
from chromadepth.depth.methods import (
    METHOD_CATALOGUE,
    MidasParams,
    build_params,
    coerce_number,
    list_methods,
)
from chromadepth.depth.raster import readonly_copy
from chromadepth.errors import RasterError


def solid(r, g, b, a=255, shape=(1, 1)):
    """Raster filled with one color."""
    raster = np.empty(shape + (4,), dtype=np.uint8)
    raster[...] = (r, g, b, a)
    return raster


def gray_of(depth):
    """Red channel of the top-left pixel."""
    return int(depth[0, 0, 0])


class TestCoerceNumber:
    """Test parameter value sanitizing."""

    def test_numbers_pass_through(self):
        """Test ints, floats and numpy scalars are kept."""
        assert coerce_number(3, 1.0) == 3.0
        assert coerce_number(0.25, 1.0) == 0.25
        assert coerce_number(np.float32(0.5), 1.0) == 0.5

    def test_zero_is_a_valid_value(self):
        """Test zero does not fall back to the default."""
        assert coerce_number(0, 0.6) == 0.0

    def test_numeric_strings_are_parsed(self):
        """Test strings like '0.7' are accepted."""
        assert coerce_number(" 0.7 ", 0.6) == 0.7

    @pytest.mark.parametrize("value", [None, "abc", "", True, False, float("nan"),
                                       float("inf"), -math.inf, [1], {"a": 1}])
    def test_invalid_values_use_default(self, value):
        """Test missing, non-numeric and non-finite values fall back."""
        assert coerce_number(value, 0.6) == 0.6


class TestBuildParams:
    """Test per-method parameter dataclasses."""

    def test_defaults(self):
        """Test every documented default."""
        assert build_params(DepthMethod.DEPTH_ANYTHING_V2).confidence == 0.5
        assert build_params(DepthMethod.MIDAS).alpha == 0.6
        assert build_params(DepthMethod.MARIGOLD).ensemble == 4
        assert build_params(DepthMethod.TFJS_DEPTH).focus == 0.8
        assert build_params(DepthMethod.DEPTH_PRO).sharpness == 1.0

    def test_unknown_keys_ignored(self):
        """Test keys that belong to no field are dropped."""
        params = build_params(DepthMethod.MIDAS, {"alpha": 0.9, "confidence": 0.1})
        assert params == MidasParams(alpha=0.9)

    def test_existing_instance_returned(self):
        """Test a ready-made dataclass is used as-is."""
        params = MidasParams(alpha=0.3)
        assert build_params(DepthMethod.MIDAS, params) is params

    def test_catalogue_defaults_match_dataclasses(self):
        """Test catalogue ParamSpec defaults agree with the dataclass defaults."""
        for info in list_methods():
            params = build_params(info.method)
            for spec in info.params:
                assert getattr(params, spec.name) == spec.default
                assert spec.minimum <= spec.default <= spec.maximum

    def test_catalogue_covers_all_methods(self):
        """Test every method has a catalogue entry with 1-3 parameters."""
        assert set(METHOD_CATALOGUE) == set(DepthMethod)
        for info in METHOD_CATALOGUE.values():
            assert 1 <= len(info.params) <= 3
            assert info.label and info.description


class TestMethodFormulas:
    """Test each heuristic against hand-computed values."""

    def test_midas_reference_pixel(self, single_pixel):
        """Test RGBA(200,100,50) with midas defaults gives 75 (74.52 rounded)."""
        depth = estimate_depth(single_pixel, "midas")
        assert depth[0, 0].tolist() == [75, 75, 75, 255]

    def test_depth_anything_v2(self):
        """Test 0.2/0.7/0.1 weights scaled by confidence."""
        assert gray_of(estimate_depth(solid(100, 100, 100), "depth-anything-v2")) == 50
        assert gray_of(estimate_depth(solid(0, 200, 0), "depth-anything-v2", {"confidence": 1.0})) == 140

    def test_tfjs_depth(self):
        """Test 0.1/0.8/0.1 weights scaled by focus."""
        assert gray_of(estimate_depth(solid(100, 100, 100), "tfjs-depth")) == 80
        assert gray_of(estimate_depth(solid(0, 100, 0), "tfjs-depth", {"focus": 1.0})) == 80

    def test_marigold(self):
        """Test luminance ** 1.2 scaled by ensemble / 4."""
        # 100 ** 1.2 = 251.19
        assert gray_of(estimate_depth(solid(100, 100, 100), "marigold")) == 251
        assert gray_of(estimate_depth(solid(100, 100, 100), "marigold", {"ensemble": 2})) == 126

    def test_marigold_clamps_bright_pixels(self):
        """Test marigold output above 255 is clamped."""
        assert gray_of(estimate_depth(solid(255, 255, 255), "marigold")) == 255

    def test_depth_pro(self):
        """Test luminance scaled by sharpness, capped at 255."""
        assert gray_of(estimate_depth(solid(100, 100, 100), "depth-pro")) == 100
        assert gray_of(estimate_depth(solid(255, 255, 255), "depth-pro", {"sharpness": 2.0})) == 255

    def test_enum_identifier(self, single_pixel):
        """Test DepthMethod members are accepted like their string values."""
        by_enum = estimate_depth(single_pixel, DepthMethod.MIDAS)
        by_name = estimate_depth(single_pixel, "midas")
        assert by_enum.tobytes() == by_name.tobytes()

    def test_unknown_method_uses_plain_luminance(self, single_pixel):
        """Test unknown identifiers fall back to 0.299/0.587/0.114 unscaled."""
        depth = estimate_depth(single_pixel, "no-such-model")
        assert gray_of(depth) == 124

    def test_empty_method_uses_plain_luminance(self, single_pixel):
        """Test an empty identifier behaves like an unknown one."""
        assert gray_of(estimate_depth(single_pixel, "")) == 124

    @pytest.mark.parametrize("alpha", [None, "oops", float("nan"), True])
    def test_invalid_param_uses_default(self, single_pixel, alpha):
        """Test an invalid parameter never reaches the formula."""
        depth = estimate_depth(single_pixel, "midas", {"alpha": alpha})
        assert gray_of(depth) == 75

    def test_zero_param_is_respected(self, single_pixel):
        """Test alpha=0 produces black rather than the default scaling."""
        assert gray_of(estimate_depth(single_pixel, "midas", {"alpha": 0})) == 0

    def test_out_of_range_params_are_clamped_in_output(self, single_pixel):
        """Test huge and negative scales end up at 255 and 0."""
        assert gray_of(estimate_depth(single_pixel, "midas", {"alpha": 100})) == 255
        assert gray_of(estimate_depth(single_pixel, "midas", {"alpha": -1})) == 0


class TestDepthInvariants:
    """Test properties that hold for every method."""

    @pytest.mark.parametrize("method", [m.value for m in DepthMethod] + ["unknown"])
    def test_monochrome_and_alpha_preserved(self, random_source, method):
        """Test R == G == B, values in range and alpha untouched."""
        depth = estimate_depth(random_source, method)

        assert depth.shape == random_source.shape
        assert depth.dtype == np.uint8
        np.testing.assert_array_equal(depth[..., 0], depth[..., 1])
        np.testing.assert_array_equal(depth[..., 1], depth[..., 2])
        np.testing.assert_array_equal(depth[..., 3], random_source[..., 3])

    @pytest.mark.parametrize("method", [m.value for m in DepthMethod])
    def test_deterministic(self, random_source, method):
        """Test identical inputs produce byte-identical output."""
        params = {"alpha": 0.7, "ensemble": 3}
        first = estimate_depth(random_source, method, params)
        second = estimate_depth(random_source.copy(), method, dict(params))
        assert first.tobytes() == second.tobytes()

    def test_source_not_modified(self, random_source):
        """Test the source buffer is left untouched."""
        before = random_source.copy()
        estimate_depth(random_source, "marigold")
        np.testing.assert_array_equal(random_source, before)


class TestRasterValidation:
    """Test rejection of unusable buffers."""

    @pytest.mark.parametrize("raster", [
        np.zeros((0, 4, 4), dtype=np.uint8),
        np.zeros((4, 0, 4), dtype=np.uint8),
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.zeros((4, 4), dtype=np.uint8),
        np.zeros((4, 4, 4), dtype=np.float32),
    ])
    def test_bad_rasters_raise(self, raster):
        """Test empty, wrong-shape and wrong-dtype arrays raise RasterError."""
        with pytest.raises(RasterError):
            estimate_depth(raster, "midas")

    def test_non_array_raises(self):
        """Test plain lists are rejected."""
        with pytest.raises(RasterError):
            estimate_depth([[[0, 0, 0, 255]]], "midas")

    def test_readonly_copy_is_detached(self, random_source):
        """Test readonly_copy returns an unwritable copy independent of its input."""
        copy = readonly_copy(random_source)
        random_source[...] = 0

        assert copy.any()
        assert not copy.flags.writeable
        with pytest.raises(ValueError):
            copy[0, 0, 0] = 1


class TestDepthEstimator:
    """Test the timing wrapper."""

    def test_compute_returns_result(self, single_pixel):
        """Test DepthResult carries the map, timing and method name."""
        result = DepthEstimator().compute(single_pixel, DepthMethod.MIDAS)

        assert result.method == "midas"
        assert result.computation_time_ms >= 0
        assert result.depth_map[0, 0, 0] == 75
