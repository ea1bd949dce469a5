"""Tests for softcheck.approx: tolerance helpers."""

from __future__ import annotations

import numpy as np
import pytest

from softcheck import set_config
from softcheck.approx import (
    abs_diff,
    equal_approx,
    reduce_all,
    shapes_compatible,
    signed_diff,
    within_threshold,
)


class _Lanes:
    """Minimal aggregate exposing its own all() reduction."""

    def __init__(self, *lanes):
        self.lanes = lanes

    def all(self):
        return all(self.lanes)


class TestReduceAll:
    def test_scalars_are_identity(self):
        assert reduce_all(True) is True
        assert reduce_all(False) is False
        assert reduce_all(np.bool_(True)) is True
        assert reduce_all(1) is True
        assert reduce_all(0) is False

    def test_arrays(self):
        assert reduce_all(np.array([True, True])) is True
        assert reduce_all(np.array([True, False])) is False
        assert reduce_all(np.array([], dtype=bool)) is True

    def test_custom_all(self):
        assert reduce_all(_Lanes(True, True)) is True
        assert reduce_all(_Lanes(True, False)) is False

    def test_nested_lists(self):
        assert reduce_all([True, [True, np.array([True])]]) is True
        assert reduce_all([True, [False]]) is False


class TestShapesCompatible:
    def test_broadcastable(self):
        assert shapes_compatible(np.ones((2, 3)), np.ones(3)) is True
        assert shapes_compatible([1, 2], 5) is True
        assert shapes_compatible(1.0, 2.0) is True

    def test_mismatched(self):
        assert shapes_compatible(np.ones(3), np.ones(2)) is False
        assert shapes_compatible([1, 2], [1, 2, 3]) is False

    def test_helpers_return_false(self):
        assert within_threshold(np.ones(3), np.ones(2), 1.0) is False
        assert equal_approx([1.0, 2.0], [1.0, 2.0, 3.0]) is False


class TestDiffs:
    def test_scalar_abs_diff(self):
        assert abs_diff(3, 5) == 2
        assert abs_diff(5.0, 5.2) == pytest.approx(0.2)

    def test_list_abs_diff(self):
        np.testing.assert_allclose(abs_diff([1, 2], [2, 0]), [1, 2])

    def test_signed_diff(self):
        assert signed_diff(1.0, 1.5) == -0.5
        np.testing.assert_allclose(signed_diff(np.array([2.0]), [0.5]), [1.5])


class TestWithinThreshold:
    def test_inclusive(self):
        assert within_threshold(5.0, 5.05, 0.1) is True
        assert within_threshold(5.0, 5.2, 0.1) is False
        assert within_threshold(1, 2, 1) is True

    def test_strict(self):
        assert within_threshold(1, 2, 1, strict=True) is False
        assert within_threshold([1.0, 2.0], [1.0, 2.05], 0.1, strict=True) is True

    def test_element_wise_eps(self):
        assert within_threshold([0.0, 0.0], [0.5, 2.0], np.array([1.0, 3.0])) is True


class TestEqualApprox:
    def test_relative_tolerance(self):
        assert equal_approx(1.0, 1.0009) is True
        assert equal_approx(1.0, 1.002) is False

    def test_scales_with_magnitude(self):
        assert equal_approx(1000.0, 1000.9) is True
        assert equal_approx(1e-6, 1.0009e-6) is True
        assert equal_approx(1e-6, 1.1e-6) is False

    def test_zero(self):
        assert equal_approx(0.0, 0.0) is True
        assert equal_approx(0.0, 1e-12) is False

    def test_symmetric(self):
        assert equal_approx(1.002, 1.0) == equal_approx(1.0, 1.002)

    def test_arrays_need_all_elements(self):
        a = np.array([1.0, 2.0, 3.0])
        assert equal_approx(a, a) is True
        assert equal_approx(a, [1.0, 2.0, 3.1]) is False

    def test_explicit_and_configured_tolerance(self):
        assert equal_approx(1.0, 1.002, rel_tol=0.01) is True
        set_config(approx_rel_tol=0.01)
        assert equal_approx(1.0, 1.002) is True

    def test_nan_never_equal(self):
        assert equal_approx(float("nan"), float("nan")) is False
