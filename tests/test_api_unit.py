import pytest
from fastapi.testclient import TestClient

import main as entry
from backend.app.config import settings
from backend.app.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


# ── Equations ───────────────────────────────────────────────────────────

class TestEquationRoutes:
    def test_linear(self, client):
        response = client.post("/api/equations/linear", json={"a": 2, "b": -6})
        assert response.status_code == 200
        body = response.json()
        assert body["x"] == 3
        assert body["equation"] == "2x - 6 = 0"
        assert body["steps"][0]["step_number"] == 1
        assert "timestamp" in body

    def test_linear_zero_coefficient_is_400(self, client):
        response = client.post("/api/equations/linear", json={"a": 0, "b": 4})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid coefficient"

    def test_linear_missing_field_is_422(self, client):
        response = client.post("/api/equations/linear", json={"a": 1})
        assert response.status_code == 422

    def test_quadratic(self, client):
        response = client.post("/api/equations/quadratic", json={"a": 1, "b": -5, "c": 6})
        body = response.json()
        assert body["type"] == "two_real"
        assert body["solutions"] == [2, 3]
        assert body["discriminant"] == 1

    def test_quadratic_complex(self, client):
        body = client.post("/api/equations/quadratic", json={"a": 1, "b": 0, "c": 4}).json()
        assert body["type"] == "complex"
        assert body["solutions"] == [{"real": 0, "imag": 2}, {"real": 0, "imag": -2}]
        assert body["verification"] is None

    def test_system(self, client):
        payload = {"eq1": {"a": 2, "b": 3, "c": 7}, "eq2": {"a": 1, "b": -1, "c": 1}}
        body = client.post("/api/equations/system", json=payload).json()
        assert body["x"] == pytest.approx(2)
        assert body["y"] == pytest.approx(1)
        assert body["equations"] == ["2x + 3y = 7", "x - y = 1"]

    def test_singular_system_is_400(self, client):
        payload = {"eq1": {"a": 1, "b": 1, "c": 2}, "eq2": {"a": 2, "b": 2, "c": 4}}
        response = client.post("/api/equations/system", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "System has no unique solution"

    def test_parse(self, client):
        body = client.post("/api/equations/parse", json={"equation": "x² - 5x + 6 = 0"}).json()
        assert body["type"] == "quadratic"
        assert body["coefficients"] == {"a": 1, "b": -5, "c": 6}
        assert body["original"] == "x² - 5x + 6 = 0"

    def test_parse_failure_carries_suggestions(self, client):
        response = client.post("/api/equations/parse", json={"equation": "y = mx + b"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid equation format"
        assert len(body["suggestions"]) > 0

    def test_parse_rejects_overlong_input(self, client):
        response = client.post("/api/equations/parse", json={"equation": "x" * 500})
        assert response.status_code == 422


# ── Statistics ──────────────────────────────────────────────────────────

class TestStatisticsRoutes:
    def test_regression(self, client):
        data = [{"x": 1, "y": 2}, {"x": 2, "y": 4}, {"x": 3, "y": 6}]
        body = client.post("/api/ml/regression/linear", json={"data": data}).json()
        assert body["coefficients"]["slope"] == pytest.approx(2)
        assert body["metrics"]["r_squared"] == pytest.approx(1)
        assert len(body["predictions"]) == 3

    def test_regression_identical_x_is_400(self, client):
        data = [{"x": 1, "y": 2}, {"x": 1, "y": 4}]
        response = client.post("/api/ml/regression/linear", json={"data": data})
        assert response.status_code == 400
        assert response.json()["error"] == "Degenerate input"

    def test_regression_needs_two_points(self, client):
        response = client.post("/api/ml/regression/linear", json={"data": [{"x": 1, "y": 2}]})
        assert response.status_code == 422

    def test_descriptive(self, client):
        values = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
        body = client.post("/api/ml/stats/descriptive", json={"values": values}).json()
        assert body["original_data"] == values
        assert body["statistics"]["mean"] == 5.5
        assert body["statistics"]["quartiles"]["iqr"] == 5
        assert set(body["distribution"]) == {"skewness", "kurtosis"}
        assert "distribution" not in body["statistics"]

    def test_descriptive_empty_is_422(self, client):
        response = client.post("/api/ml/stats/descriptive", json={"values": []})
        assert response.status_code == 422

    def test_normalize(self, client):
        payload = {"data": [1, 2, 3, 4, 5], "method": "minmax"}
        body = client.post("/api/ml/normalize", json=payload).json()
        assert body["normalized_data"] == pytest.approx([0, 0.25, 0.5, 0.75, 1])
        assert body["parameters"] == {"min": 1, "max": 5, "range": 4}

    def test_normalize_unknown_method(self, client):
        response = client.post("/api/ml/normalize", json={"data": [1, 2], "method": "log"})
        assert response.status_code == 400
        assert response.json()["available_methods"] == ["zscore", "minmax", "robust"]

    @pytest.mark.parametrize("data", [[3, 3, 3], [0.1, 0.1, 0.1]])
    def test_normalize_constant_data_is_400(self, client, data):
        response = client.post("/api/ml/normalize", json={"data": data})
        assert response.status_code == 400
        assert response.json()["error"] == "Degenerate input"

    def test_correlation(self, client):
        datasets = {"height": [170, 175, 180, 165, 185], "weight": [65, 70, 80, 60, 85]}
        body = client.post("/api/ml/correlation", json={"datasets": datasets}).json()
        assert body["correlation_matrix"]["height"]["height"] == 1.0
        assert body["interpretation"]["height_weight"]["strength"] == "strong"
        assert body["method"] == "pearson"

    def test_correlation_variable_size_is_bounded(self, client):
        too_long = [float(i) for i in range(settings.MAX_DATASET_SIZE + 1)]
        response = client.post(
            "/api/ml/correlation", json={"datasets": {"a": too_long, "b": too_long}})
        assert response.status_code == 422

        response = client.post(
            "/api/ml/correlation", json={"datasets": {"a": [1], "b": [2]}})
        assert response.status_code == 422

    def test_correlation_mismatched_lengths_is_400(self, client):
        datasets = {"a": [1, 2, 3], "b": [1, 2]}
        response = client.post("/api/ml/correlation", json={"datasets": datasets})
        assert response.status_code == 400
        assert response.json()["error"] == "Malformed sample"


# ── Calculator ──────────────────────────────────────────────────────────

class TestCalculatorRoutes:
    def test_calculate(self, client):
        body = client.post("/api/calculate", json={"expression": "sin(pi/2) + cos(0)"}).json()
        assert body["result"] == pytest.approx(2)
        assert body["type"] == "number"

    def test_calculate_division_by_zero_is_400(self, client):
        response = client.post("/api/calculate", json={"expression": "1/0"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"

    def test_functions_catalog(self, client):
        body = client.get("/api/calculate/functions").json()
        assert {"basic", "trigonometric", "logarithmic", "constants", "examples"} <= set(body)

    def test_validate(self, client):
        assert client.post("/api/calculate/validate", json={"expression": "2+2"}).json()["valid"] is True
        assert client.post("/api/calculate/validate", json={"expression": "2 $"}).json()["valid"] is False


def test_main_entry_serves_app(monkeypatch) -> None:
    called = {}

    def fake_run(target, **kwargs):
        called["target"] = target
        called.update(kwargs)

    monkeypatch.setattr(entry.uvicorn, "run", fake_run)
    entry.main()
    assert called["target"] == "backend.app.main:app"
    assert called["port"] == entry.settings.PORT
