"""Tests for the lagged transforms."""
import numpy as np
import pytest
from numpy.testing import assert_array_equal, assert_allclose


class TestDiffs:
    def test_doubling_series(self):
        from stocks.lagged import diffs
        assert_array_equal(diffs([1, 2, 4, 8], 1), [1, 2, 4])

    def test_default_lag_is_one(self):
        from stocks.lagged import diffs
        assert_array_equal(diffs([1, 2, 4, 8]), [1, 2, 4])

    def test_lag_two(self):
        from stocks.lagged import diffs
        assert_array_equal(diffs([10, 5, 20], 2), [10])

    def test_length_and_elements(self):
        from stocks.lagged import diffs
        np.random.seed(42)
        x = np.random.randn(50)
        for lag in range(1, 50):
            y = diffs(x, lag)
            assert len(y) == 50 - lag
            assert_array_equal(y, x[lag:] - x[:-lag])

    def test_returns_float64(self):
        from stocks.lagged import diffs
        y = diffs([1, 2, 3])
        assert y.dtype == np.float64

    def test_input_not_mutated(self):
        from stocks.lagged import diffs
        x = np.array([3.0, 1.0, 4.0, 1.0, 5.0])
        before = x.copy()
        y = diffs(x, 2)
        assert_array_equal(x, before)
        y[0] = 99.0
        assert_array_equal(x, before)

    def test_nan_propagates(self):
        from stocks.lagged import diffs
        y = diffs([1.0, np.nan, 3.0, 4.0])
        assert np.isnan(y[0]) and np.isnan(y[1])
        assert y[2] == 1.0

    def test_accepts_pandas_series(self):
        import pandas as pd
        from stocks.lagged import diffs
        assert_array_equal(diffs(pd.Series([1.0, 3.0, 6.0])), [2.0, 3.0])

    def test_numpy_integer_lag(self):
        from stocks.lagged import diffs
        assert_array_equal(diffs([1, 2, 4], np.int64(1)), [1, 2])


class TestProportional:
    def test_doubling_series(self):
        from stocks.lagged import pdiffs, pchanges
        assert_array_equal(pdiffs([1, 2, 4, 8], 1), [1, 1, 1])
        assert_array_equal(pchanges([1, 2, 4, 8], 1), [100, 100, 100])

    def test_lag_two(self):
        from stocks.lagged import pdiffs, pchanges
        assert_array_equal(pdiffs([10, 5, 20], 2), [1])
        assert_array_equal(pchanges([10, 5, 20], 2), [100])

    def test_division_by_zero_is_infinite(self):
        from stocks.lagged import pdiffs
        y = pdiffs([5, 0, 5], 1)
        assert y[0] == -1.0
        assert np.isposinf(y[1])

    def test_zero_over_zero_is_nan(self):
        from stocks.lagged import pdiffs
        y = pdiffs([0.0, 0.0])
        assert np.isnan(y[0])

    def test_no_runtime_warning(self):
        import warnings
        from stocks.lagged import pdiffs, pchanges, ratios
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            pdiffs([0.0, 0.0, 1.0])
            pchanges([0.0, 0.0, 1.0])
            ratios([0.0, 0.0, 1.0])

    def test_pchanges_is_scaled_pdiffs(self):
        from stocks.lagged import pdiffs, pchanges
        np.random.seed(7)
        x = np.random.rand(40) + 0.5
        for lag in (1, 3, 10):
            assert_array_equal(pchanges(x, lag), 100 * pdiffs(x, lag))


class TestRatios:
    def test_doubling_series(self):
        from stocks.lagged import ratios
        assert_array_equal(ratios([1, 2, 4, 8]), [2, 2, 2])

    def test_elements(self):
        from stocks.lagged import ratios
        x = np.array([2.0, 3.0, 1.5, 6.0])
        assert_array_equal(ratios(x), x[1:] / x[:-1])

    def test_ratio_is_one_plus_pdiff(self):
        from stocks.lagged import pdiffs, ratios
        np.random.seed(3)
        x = np.random.rand(30) + 1.0
        assert_allclose(ratios(x), pdiffs(x, 1) + 1, rtol=1e-12)

    def test_single_element_rejected(self):
        from stocks.lagged import InvalidArgument, ratios
        with pytest.raises(InvalidArgument):
            ratios([1.0])


class TestInvalidLag:
    @pytest.mark.parametrize('name', ['diffs', 'pdiffs', 'pchanges'])
    def test_lag_equal_to_length(self, name):
        from stocks import lagged
        with pytest.raises(lagged.InvalidArgument):
            getattr(lagged, name)([1.0, 2.0, 3.0], 3)

    @pytest.mark.parametrize('name', ['diffs', 'pdiffs', 'pchanges'])
    def test_empty_input(self, name):
        from stocks import lagged
        with pytest.raises(lagged.InvalidArgument):
            getattr(lagged, name)([], 1)

    @pytest.mark.parametrize('lag', [0, -1])
    def test_non_positive_lag(self, lag):
        from stocks.lagged import InvalidArgument, diffs
        with pytest.raises(InvalidArgument):
            diffs([1.0, 2.0, 3.0], lag)

    @pytest.mark.parametrize('lag', [1.5, '1', True])
    def test_non_integer_lag(self, lag):
        from stocks.lagged import InvalidArgument, diffs
        with pytest.raises(InvalidArgument):
            diffs([1.0, 2.0, 3.0], lag)

    def test_matrix_rejected(self):
        from stocks.lagged import InvalidArgument, diffs
        with pytest.raises(InvalidArgument):
            diffs(np.ones((3, 2)))

    def test_is_value_error(self):
        from stocks.lagged import diffs
        with pytest.raises(ValueError, match='out of range'):
            diffs([1.0], 1)
