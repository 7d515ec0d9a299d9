"""Integration tests for metrics endpoint."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/products")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "freshmarket_http_requests_total" in body
    assert 'path="/products"' in body


def test_metrics_use_route_templates(client):
    client.get("/products/some-id")
    body = client.get("/metrics").content.decode()
    assert 'path="/products/{product_id}"' in body
    assert 'path="/products/some-id"' not in body
