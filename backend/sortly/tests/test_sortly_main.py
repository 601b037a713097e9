from __future__ import annotations

import base64
import zlib

import pytest
from fastapi.testclient import TestClient

from sortly import main as sortly_main


@pytest.fixture
def client():
    with TestClient(sortly_main.app) as test_client:
        yield test_client


@pytest.mark.asyncio
async def test_sortly_root_and_health() -> None:
    root = await sortly_main.root()
    assert root["service"] == "sortly"
    assert root["status"] == "running"

    health = await sortly_main.health_check()
    assert health["status"] == "success"
    assert health["data"]["status"] == "healthy"


def test_paste_sort_share_open_flow(client: TestClient) -> None:
    parsed = client.post("/api/v1/sortly/parse", json={"text": "Fruit\tQty\npear\t10\napple\t2\nfig\tn/a"})
    assert parsed.status_code == 200
    dataset = parsed.json()["dataset"]
    assert parsed.json()["delimiter"] == "\t"
    assert dataset["sortRules"] == [{"column": "Fruit", "direction": "asc", "type": "alpha"}]

    rules = [{"column": "Qty", "direction": "desc", "type": "numeric"}]
    shared = client.post(
        "/api/v1/sortly/share",
        json={"columns": dataset["columns"], "rows": dataset["rows"], "sortRules": rules},
    )
    assert shared.status_code == 200
    token = shared.json()["token"]
    assert shared.json()["url"].endswith(f"/s/{token}")

    opened = client.get(f"/api/v1/sortly/s/{token}")
    assert opened.status_code == 200
    body = opened.json()
    assert [row["Fruit"] for row in body["rows"]] == ["fig", "pear", "apple"]
    assert body["sortRules"] == rules


def test_invalid_share_link(client: TestClient) -> None:
    response = client.get("/api/v1/sortly/s/bm90LWEtdG9rZW4")

    assert response.status_code == 400
    assert response.json()["detail"] == "This link is invalid or the data could not be decoded."


def test_deeply_nested_share_link_is_400(client: TestClient) -> None:
    nested = zlib.compress(b"[" * 200_000 + b"]" * 200_000)
    token = base64.urlsafe_b64encode(nested).decode("ascii").rstrip("=")

    response = client.get(f"/api/v1/sortly/s/{token}")

    assert response.status_code == 400
    assert response.json()["detail"] == "This link is invalid or the data could not be decoded."


def test_empty_paste_is_422(client: TestClient) -> None:
    response = client.post("/api/v1/sortly/parse", json={"text": "   "})

    assert response.status_code == 422


def test_history_lifecycle(client: TestClient) -> None:
    client.delete("/api/v1/sortly/history")
    dataset = client.post("/api/v1/sortly/parse", json={"text": "a b"}).json()["dataset"]

    saved = client.post("/api/v1/sortly/history", json={"dataset": dataset})
    assert saved.status_code == 201
    assert saved.json()["label"].startswith("Sort — ")

    listed = client.get("/api/v1/sortly/history").json()
    assert [entry["id"] for entry in listed] == [dataset["id"]]

    assert client.delete(f"/api/v1/sortly/history/{dataset['id']}").status_code == 200
    assert client.get("/api/v1/sortly/history").json() == []
