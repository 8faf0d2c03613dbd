"""
API tests — health check, cylinder listing, usage calculation.
"""

import http.client
import importlib.util
import json
import threading
from http.server import HTTPServer
from pathlib import Path

import pytest

SERVERLESS_USAGE = Path(__file__).resolve().parent.parent / "api" / "calculate" / "usage.py"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "System Online"


def test_list_cylinders_in_catalog_order(client):
    response = client.get("/cylinders")
    assert response.status_code == 200
    cylinders = response.json()
    assert len(cylinders) == 10
    assert cylinders[0]["gas_type"] == "3 in 1 (O2,LEL,CO)"
    assert cylinders[0]["display_name"] == "3-in-1 Gas Mixture"
    assert cylinders[0]["components"] == ["O2", "LEL", "CO"]
    assert cylinders[-1]["gas_type"] == "Chlorine (Cl2)"


def test_get_cylinder(client):
    response = client.get("/cylinders/Ammonia (NH3)")
    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "Ammonia"
    assert body["properties_summary"] == (
        "Bump Test Time: 1 min | Calibration Time: 3 min | Flow Rate: 0.5 LPM"
    )


def test_get_unknown_cylinder_returns_404(client):
    response = client.get("/cylinders/Unknown Gas (XX)")
    assert response.status_code == 404
    assert response.json()["detail"] == "Invalid gas type selected"


def test_calculate_usage(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Carbon Monoxide (CO)",
        "tests_per_month": "10",
        "calibrations_per_month": "4",
        "instruments": "2",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["usage_liters"] == 10.0
    assert body["formatted"] == "10 Liters"
    assert body["error"] is None
    assert body["input_echo"]["gas_type"] == "Carbon Monoxide (CO)"


def test_calculate_usage_accepts_json_numbers(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": 0,
        "calibrations_per_month": 1,
        "instruments": 1,
    })
    assert response.status_code == 200
    assert response.json()["usage_liters"] == 3.0


def test_calculate_usage_missing_field(client):
    response = client.post("/calculate/usage", json={
        "tests_per_month": "10",
        "calibrations_per_month": "4",
        "instruments": "2",
    })
    assert response.status_code == 422
    body = response.json()
    assert body["usage_liters"] is None
    assert body["error"] == {"kind": "missing_field", "message": "Please fill in all fields"}


def test_calculate_usage_invalid_number(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Ammonia (NH3)",
        "tests_per_month": "abc",
        "calibrations_per_month": "1",
        "instruments": "1",
    })
    assert response.status_code == 422
    assert response.json()["error"]["message"] == "Please enter valid numbers"


def test_calculate_usage_out_of_range(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Ammonia (NH3)",
        "tests_per_month": "1",
        "calibrations_per_month": "1",
        "instruments": "0",
    })
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "out_of_range"


def test_calculate_usage_permissive_setting(client, permissive):
    response = client.post("/calculate/usage", json={
        "gas_type": "Ammonia (NH3)",
        "tests_per_month": "1",
        "calibrations_per_month": "1",
        "instruments": "0",
    })
    assert response.status_code == 200
    assert response.json()["formatted"] == "0 Liters"


def test_calculate_usage_huge_count_is_out_of_range(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": "1" + "0" * 27,
        "calibrations_per_month": "1",
        "instruments": "1",
    })
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "out_of_range"


def test_calculate_usage_huge_json_number_is_out_of_range(client, permissive):
    response = client.post("/calculate/usage", json={
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": 10 ** 30,
        "calibrations_per_month": 1,
        "instruments": 1,
    })
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "out_of_range"


def test_calculate_usage_json_float_uses_integer_part(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": 1.5,
        "calibrations_per_month": "1",
        "instruments": "1",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["usage_liters"] == 4.5
    assert body["input_echo"]["tests_per_month"] == "1.5"


def test_calculate_usage_json_bool_is_invalid_number(client):
    response = client.post("/calculate/usage", json={
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": True,
        "calibrations_per_month": "1",
        "instruments": "1",
    })
    assert response.status_code == 422
    body = response.json()
    assert body["usage_liters"] is None
    assert body["error"] == {"kind": "invalid_number", "message": "Please enter valid numbers"}


# === Serverless handler (api/calculate/usage.py) ===

@pytest.fixture
def serverless_server():
    spec = importlib.util.spec_from_file_location("serverless_usage", SERVERLESS_USAGE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    server = HTTPServer(("127.0.0.1", 0), module.handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


def _post(server, body: bytes, headers=None):
    conn = http.client.HTTPConnection("127.0.0.1", server.server_address[1])
    try:
        conn.request("POST", "/api/calculate/usage", body=body,
                     headers={"Content-Type": "application/json", **(headers or {})})
        response = conn.getresponse()
        return response.status, json.loads(response.read())
    finally:
        conn.close()


def test_serverless_usage(serverless_server):
    status, body = _post(serverless_server, json.dumps({
        "gas_type": "Carbon Monoxide (CO)",
        "tests_per_month": "10",
        "calibrations_per_month": "4",
        "instruments": "2",
    }).encode())
    assert status == 200
    assert body["usage_liters"] == 10.0


def test_serverless_usage_unknown_gas(serverless_server):
    status, body = _post(serverless_server, json.dumps({
        "gas_type": "Unknown Gas (XX)",
        "tests_per_month": "1",
        "calibrations_per_month": "1",
        "instruments": "1",
    }).encode())
    assert status == 422
    assert body["error"]["kind"] == "unknown_gas_type"


def test_serverless_malformed_json(serverless_server):
    status, body = _post(serverless_server, b"{not json")
    assert status == 400
    assert "error" in body


def test_serverless_bad_content_length(serverless_server):
    status, body = _post(serverless_server, b"", headers={"Content-Length": "abc"})
    assert status == 400
    assert "error" in body


def test_serverless_huge_count(serverless_server):
    status, body = _post(serverless_server, json.dumps({
        "gas_type": "Chlorine (Cl2)",
        "tests_per_month": "1" + "0" * 400,
        "calibrations_per_month": "1",
        "instruments": "1",
    }).encode())
    assert status == 422
    assert body["error"]["kind"] == "out_of_range"
