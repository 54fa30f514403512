import pytest
from fastapi.testclient import TestClient

from seismic_ttf.api.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setenv("TTF_PREDICTION_LOG", str(tmp_path / "predictions.jsonl"))
    return tmp_path / "predictions.jsonl"


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_predict_smoke(_log_to_tmp):
    r = client.post("/predict", json={"csv": "a\n1.0\n2.0\n3.0\n4.0\n5.0\n", "include_signal": True})
    assert r.status_code == 200
    body = r.json()
    assert body["n_samples"] == 5
    assert body["signal"] == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert body["features"]["energy"] == 55.0
    assert 0.8 * 30.4055 <= body["time_to_failure"] <= 1.2 * 30.4055
    assert _log_to_tmp.exists()


def test_predict_seeded_is_reproducible():
    payload = {"csv": "1\n2\n3\n", "seed": 11}
    a = client.post("/predict", json=payload).json()
    b = client.post("/predict", json=payload).json()
    assert a["time_to_failure"] == b["time_to_failure"]
    assert a["signal"] is None


def test_predict_parse_error_is_422():
    r = client.post("/predict", json={"csv": "1.0\nbad\n2.0\n"})
    assert r.status_code == 422
    body = r.json()
    assert body["kind"] == "non_numeric"
    assert body["detail"].startswith("Invalid data format: File contains non-numeric values")


def test_upload_csv():
    files = {"file": ("seg_0620e6.csv", b"acoustic_data\n4\n6\n", "text/csv")}
    r = client.post("/predict/upload", files=files, params={"seed": 3})
    assert r.status_code == 200
    assert r.json()["features"]["mean"] == 5.0


def test_upload_empty_csv_is_422():
    files = {"file": ("seg_000000.csv", b"acoustic_data\n", "text/csv")}
    r = client.post("/predict/upload", files=files)
    assert r.status_code == 422
    assert r.json() == {"detail": "Empty data: No valid signal values found", "kind": "empty"}


def test_upload_rejects_non_csv():
    files = {"file": ("trace.txt", b"1\n2\n", "text/plain")}
    r = client.post("/predict/upload", files=files)
    assert r.status_code == 415


def test_predict_includes_interpretation():
    body = client.post("/predict", json={"csv": "1\n2\n3\n", "seed": 4}).json()
    s = body["interpretation"]
    ttf = body["time_to_failure"]
    assert s["risk_level"] in {"Critical", "High", "Moderate", "Low"}
    assert s["ci_lower"] == pytest.approx(max(0.0, ttf - 1.96 * 0.1 * ttf))
    assert s["ci_upper"] == pytest.approx(ttf + 1.96 * 0.1 * ttf)


def test_echoed_signal_is_downsampled():
    csv = "v\n" + "\n".join(str(i) for i in range(2500))
    body = client.post("/predict", json={"csv": csv, "include_signal": True}).json()
    assert body["n_samples"] == 2500
    assert body["signal"] == [float(i) for i in range(0, 2500, 3)]

    body = client.post("/predict", json={"csv": csv, "include_signal": True, "max_points": None}).json()
    assert len(body["signal"]) == 2500


def test_upload_max_points():
    data = ("acoustic_data\n" + "\n".join(str(i) for i in range(10))).encode()
    files = {"file": ("seg_00000a.csv", data, "text/csv")}
    r = client.post("/predict/upload", files=files, params={"include_signal": True, "max_points": 4})
    assert r.status_code == 200
    # ceil(10 / 4) = 3
    assert r.json()["signal"] == [0.0, 3.0, 6.0, 9.0]


def test_event_log_line_has_risk_level(_log_to_tmp):
    import json

    client.post("/predict", json={"csv": "1\n2\n"})
    rec = json.loads(_log_to_tmp.read_text(encoding="utf-8").splitlines()[-1])
    assert rec["outputs"]["risk_level"] in {"Critical", "High", "Moderate", "Low"}
