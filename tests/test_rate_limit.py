"""Rate limit: /discounts/validate 10/minute (test ortamı) aşılınca 429 döner."""
from fastapi.testclient import TestClient


def test_validate_200_then_429(client: TestClient):
    body = {"code": "NOPE", "orderAmount": 100}
    for i in range(10):
        r = client.post("/discounts/validate", json=body)
        assert r.status_code == 200, f"Request {i+1} should be 200"
    r = client.post("/discounts/validate", json=body)
    assert r.status_code == 429
    j = r.json()
    assert j.get("status_code") == 429
    assert "error" in j
