"""
HTTP API round trips through FastAPI's TestClient.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from fastapi.testclient import TestClient
from receiptsieve.main import app
import pytest


AMAZON_EMAIL = {
    "text": "Order #112-1234567-1234567\nBilling address\nOrder Total: $52.30\n",
    "subject": "Your Amazon.com order #112-1234567-1234567",
    "sender": "Amazon.com <auto-confirm@amazon.com>",
    "date": "Mon, 23 Jun 2025 10:00:00 +0000",
    "message_id": "<api-test-00000001@amazon.com>",
}


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        test_client.delete("/filter/cache")
        yield test_client


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestExtractAndClassify:

    def test_extract(self, client):
        response = client.post("/extract", json={"text": "Joe's Pizza Restaurant\nTotal $10.00"})
        assert response.status_code == 200

        data = response.json()
        assert data["amount"] == "10.00"
        assert data["amount_source"] == "high"
        assert data["vendor"] == "Joe's pizza"

    def test_extract_rejects_malformed_body(self, client):
        response = client.post("/extract", json={"subject": ["not", "a", "string"]})
        assert response.status_code == 422

    def test_classify_unsubscribe(self, client):
        response = client.post("/classify", json={
            "sender": "news@shop.com",
            "subject": "Click to unsubscribe",
            "body": "Order Total: $10.00",
        })
        data = response.json()
        assert data["is_receipt"] is False
        assert data["score"] == 0
        assert data["match_type"] == "rejected"


class TestFilter:

    def test_second_delivery_is_duplicate(self, client):
        first = client.post("/filter", json=AMAZON_EMAIL).json()
        second = client.post("/filter", json=AMAZON_EMAIL).json()

        assert first["duplicate"] is False
        assert first["classification"]["is_receipt"] is True
        assert first["classification"]["vendor"] == "Amazon"
        assert second["duplicate"] is True
        assert second["reason"] == "duplicate"
        assert second["classification"] is None
        assert first["fingerprint"] == second["fingerprint"]

    def test_batch(self, client):
        newsletter = dict(AMAZON_EMAIL, subject="Our newsletter", message_id="<api-test-00000002@amazon.com>")
        response = client.post("/filter/batch", json=[AMAZON_EMAIL, newsletter])
        assert response.status_code == 200

        data = response.json()
        assert data["total_documents"] == 2
        assert data["receipts_detected"] == 1
        assert data["results"][0]["vendor"] == "Amazon"
        assert data["cache_stats"]["size"] == 2

    def test_empty_batch_rejected(self, client):
        response = client.post("/filter/batch", json=[])
        assert response.status_code == 400

    def test_stats_and_clear(self, client):
        client.post("/filter", json=AMAZON_EMAIL)
        assert client.get("/filter/stats").json()["size"] == 1

        response = client.delete("/filter/cache")
        assert response.json()["success"] is True
        assert client.get("/filter/stats").json()["size"] == 0
