def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metrics_endpoint_is_exposed(client):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "apidrift_comparisons" in resp.text
