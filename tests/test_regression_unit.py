import math

import numpy as np
import pytest
from scipy import stats as scipy_stats

from solver import regression
from solver.errors import DegenerateInput, MalformedSample


class TestLinearRegression:
    def test_perfect_line(self):
        result = regression.linear_regression([(1, 2), (2, 4), (3, 6)])
        assert result["coefficients"]["slope"] == pytest.approx(2)
        assert result["coefficients"]["intercept"] == pytest.approx(0, abs=1e-12)
        assert result["metrics"]["correlation"] == pytest.approx(1)
        assert result["metrics"]["r_squared"] == pytest.approx(1)
        assert result["metrics"]["mse"] == pytest.approx(0, abs=1e-20)
        assert result["equation"] == "y = 2.0000x + 0.0000"
        assert result["summary"] == {"data_points": 3, "mean_x": 2, "mean_y": 4}

    def test_accepts_point_mappings(self):
        points = [{"x": 1, "y": 1}, {"x": 2, "y": 3}, {"x": 3, "y": 2}, {"x": 4, "y": 5}]
        result = regression.linear_regression(points)
        fit = np.polyfit([1, 2, 3, 4], [1, 3, 2, 5], 1)
        assert result["coefficients"]["slope"] == pytest.approx(fit[0])
        assert result["coefficients"]["intercept"] == pytest.approx(fit[1])

    def test_error_metrics_come_from_residuals(self):
        result = regression.linear_regression([(0, 1), (1, 1), (2, 4), (3, 4)])
        residuals = np.array([p["residual"] for p in result["predictions"]])
        assert result["metrics"]["mse"] == pytest.approx(np.mean(residuals ** 2))
        assert result["metrics"]["rmse"] == pytest.approx(math.sqrt(result["metrics"]["mse"]))
        assert result["metrics"]["mae"] == pytest.approx(np.mean(np.abs(residuals)))
        for p in result["predictions"]:
            assert p["residual"] == pytest.approx(p["y_actual"] - p["y_predicted"])

    @pytest.mark.parametrize("x", [2, 0.1, 0.3, 1e-3])
    def test_identical_x_is_degenerate(self, x):
        with pytest.raises(DegenerateInput):
            regression.linear_regression([(x, 1), (x, 5), (x, 9)])

    def test_constant_float_y_is_degenerate(self):
        with pytest.raises(DegenerateInput):
            regression.linear_regression([(1, 0.1), (2, 0.1), (3, 0.1)])

    def test_incomplete_point(self):
        with pytest.raises(MalformedSample):
            regression.linear_regression([{"x": 1}, {"x": 2, "y": 3}])

    def test_needs_two_points(self):
        with pytest.raises(MalformedSample):
            regression.linear_regression([(1, 1)])


class TestCorrelation:
    def test_matches_numpy(self):
        x = [170, 175, 180, 165, 185]
        y = [65, 70, 80, 60, 85]
        assert regression.correlation(x, y) == pytest.approx(np.corrcoef(x, y)[0, 1])

    def test_perfect_negative(self):
        assert regression.correlation([1, 2, 3], [9, 6, 3]) == pytest.approx(-1)

    def test_spearman_uses_ranks(self):
        x = [1, 2, 3, 4, 5]
        y = [1, 4, 9, 16, 100]
        assert regression.correlation(x, y, method="spearman") == pytest.approx(1)
        expected = scipy_stats.spearmanr([3, 1, 2, 5, 4], [10, 20, 20, 40, 30])[0]
        got = regression.correlation([3, 1, 2, 5, 4], [10, 20, 20, 40, 30], method="spearman")
        assert got == pytest.approx(expected)

    @pytest.mark.parametrize("constant", [[4, 4, 4], [0.1, 0.1, 0.1], [0.3, 0.3, 0.3]])
    @pytest.mark.parametrize("method", ["pearson", "spearman"])
    def test_zero_variance_is_degenerate(self, constant, method):
        with pytest.raises(DegenerateInput):
            regression.correlation([1, 2, 3], constant, method=method)
        with pytest.raises(DegenerateInput):
            regression.correlation(constant, [1, 2, 3], method=method)

    def test_length_mismatch(self):
        with pytest.raises(MalformedSample):
            regression.correlation([1, 2, 3], [1, 2])

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown correlation method"):
            regression.correlation([1, 2], [2, 1], method="kendall")


class TestPValue:
    def test_matches_scipy_pearsonr(self):
        x = [170, 175, 180, 165, 185, 172]
        y = [65, 70, 80, 60, 85, 75]
        r, expected = scipy_stats.pearsonr(x, y)
        assert regression.p_value(r, len(x)) == pytest.approx(expected)

    def test_edge_cases(self):
        assert regression.p_value(0.5, 2) is None
        assert regression.p_value(1.0, 10) == 0.0
        assert regression.p_value(0.0, 10) == pytest.approx(1.0)


class TestCorrelationMatrix:
    def test_structure_and_diagonal(self):
        datasets = {
            "height": [170, 175, 180, 165, 185],
            "weight": [65, 70, 80, 60, 85],
            "shoe": [40, 38, 41, 44, 39],
        }
        result = regression.correlation_matrix(datasets)
        matrix = result["correlation_matrix"]
        for name in datasets:
            assert matrix[name][name] == 1.0
            assert result["p_values"][name][name] == 0.0
        assert matrix["height"]["weight"] == matrix["weight"]["height"]
        assert result["variables"] == ["height", "weight", "shoe"]
        assert result["sample_size"] == 5
        assert set(result["interpretation"]) == {"height_weight", "height_shoe", "weight_shoe"}

        pair = result["interpretation"]["height_weight"]
        assert pair["strength"] == "strong"
        assert pair["direction"] == "positive"
        assert pair["description"] == "Strong positive correlation between height and weight"

    def test_diagonal_is_fixed_even_for_identical_columns(self):
        result = regression.correlation_matrix({"a": [1, 2, 3], "b": [1, 2, 3]})
        assert result["correlation_matrix"]["a"]["a"] == 1.0
        assert result["correlation_matrix"]["a"]["b"] == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "r,strength,direction",
        [(0.1, "weak", "positive"), (-0.29, "weak", "negative"), (0.3, "moderate", "positive"),
         (-0.69, "moderate", "negative"), (0.7, "strong", "positive"), (-1.0, "strong", "negative")],
    )
    def test_interpretation_thresholds(self, r, strength, direction):
        assert regression.interpret_correlation(r) == {"strength": strength, "direction": direction}

    def test_requires_two_variables(self):
        with pytest.raises(MalformedSample):
            regression.correlation_matrix({"only": [1, 2, 3]})

    def test_requires_equal_lengths(self):
        with pytest.raises(MalformedSample):
            regression.correlation_matrix({"a": [1, 2, 3], "b": [1, 2]})
