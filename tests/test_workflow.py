import csv
import io
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cost_center_report.application import ReportService, configure_report_service, reset_report_state
from cost_center_report.core.errors import DatasetNotLoaded, NetworkError, StaleResponseError
from cost_center_report.core.sample import sample_document
from cost_center_report.infrastructure import (
    CredentialStore,
    GitHubBillingClient,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)

EXAMPLE = {
    "costCenters": [
        {"id": "A", "name": "Zeta", "state": "active", "resources": [{"type": "Org", "name": "o1"}]},
        {"id": "B", "name": "Alpha", "state": "active", "resources": []},
        {"id": "C", "name": "Old", "state": "deleted", "resources": []},
    ]
}

FIXED_NOW = datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc)


class FakeGitHub:
    """Serves canned responses for the billing endpoint."""

    def __init__(self) -> None:
        self.status = 200
        self.body: object = EXAMPLE
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


@pytest.fixture(autouse=True)
def reset_state():
    reset_report_state()
    yield
    reset_report_state()


@pytest.fixture()
def github():
    return FakeGitHub()


@pytest.fixture()
def service(github):
    billing = GitHubBillingClient(http_client=httpx.Client(transport=httpx.MockTransport(github)))
    instance = ReportService(CredentialStore(InMemoryKeyValueStore()), billing, clock=lambda: FIXED_NOW)
    configure_report_service(instance)
    yield instance
    configure_report_service(None)


@pytest.fixture()
def client(service, tmp_path, monkeypatch):
    monkeypatch.setenv("COST_CENTER_DATA_ROOT", str(tmp_path))
    from cost_center_report.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _upload(client, document, filename="cost-centers.json", content_type="application/json"):
    payload = document if isinstance(document, bytes) else json.dumps(document).encode("utf-8")
    return client.post(
        "/api/dataset/upload",
        files={"files": (filename, io.BytesIO(payload), content_type)},
    )


def test_upload_filter_and_export_workflow(client):
    # 1. no dataset yet
    assert client.get("/api/dataset").status_code == 404

    # 2. upload
    response = _upload(client, EXAMPLE)
    assert response.status_code == 200
    assert response.json()["summary"] == {
        "totalActive": 2,
        "totalDeleted": 1,
        "totalOrganizations": 1,
        "totalRepositories": 0,
        "totalMembers": 0,
        "unclassifiedCostCenters": 0,
        "unclassifiedResources": 0,
    }

    overview = client.get("/api/dataset").json()
    assert overview["source"] == "upload"
    assert overview["filename"] == "cost-centers.json"
    assert overview["loaded_at"] == FIXED_NOW.isoformat()
    assert [row["name"] for row in overview["deletedCostCenters"]] == ["Old"]

    # 3. table view sorted by name
    listing = client.get("/api/dataset/cost-centers").json()
    assert [row["name"] for row in listing["items"]] == ["Alpha", "Zeta"]
    assert listing["has_active_filters"] is False
    assert listing["items"][1]["resourceCounts"] == {"orgs": 1, "repos": 0, "members": 0}

    # 4. search through resource names
    listing = client.get("/api/dataset/cost-centers", params={"search": "O1"}).json()
    assert [row["id"] for row in listing["items"]] == ["A"]
    assert listing["filtered"] == 1
    assert listing["total"] == 2
    assert listing["has_active_filters"] is True

    # 5. expanded detail
    detail = client.get("/api/dataset/cost-centers/A").json()
    assert detail["resourcesByType"]["orgs"] == [{"type": "Org", "name": "o1"}]
    assert detail["resourcesByType"]["repos"] == []
    assert client.get("/api/dataset/cost-centers/missing").status_code == 404

    # 6. exports
    exported = client.get("/api/dataset/export", params={"format": "json"})
    assert exported.status_code == 200
    assert 'filename="cost-center-report-2025-06-01.json"' in exported.headers["content-disposition"]
    report = exported.json()
    assert report["generatedAt"] == FIXED_NOW.isoformat()
    assert [item["id"] for item in report["costCenters"]] == ["A", "B", "C"]

    exported = client.get("/api/dataset/export", params={"format": "csv"})
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("text/csv")
    rows = list(csv.reader(io.StringIO(exported.text)))
    assert rows[0][0] == "Cost Center Name"
    assert len(rows) == 4

    # 7. exported JSON uploads cleanly again
    response = _upload(client, report)
    assert response.status_code == 200
    assert response.json()["summary"]["totalActive"] == 2


def test_filter_parameters_are_validated(client):
    _upload(client, sample_document())
    response = client.get("/api/dataset/cost-centers", params={"resource_type": "Team"})
    assert response.status_code == 422

    response = client.get(
        "/api/dataset/cost-centers",
        params={"resource_type": "Repo", "has_resources": "with-resources", "sort_by": "repos"},
    )
    names = [row["name"] for row in response.json()["items"]]
    assert names[0] == "Engineering Hub"
    assert "ServiceID_1234567" not in names


def test_invalid_documents_clear_the_dataset(client):
    assert _upload(client, EXAMPLE).status_code == 200

    broken = {"costCenters": [EXAMPLE["costCenters"][0], {"id": "X", "name": "Broken", "state": "active"}]}
    response = _upload(client, broken)
    assert response.status_code == 422
    assert response.json()["detail"]["index"] == 1
    assert client.get("/api/dataset").status_code == 404

    response = _upload(client, b"{oops")
    assert response.status_code == 400
    assert "Invalid JSON" in response.json()["detail"]


def test_non_json_upload_is_rejected(client):
    response = _upload(client, b"name,id\n", filename="report.csv", content_type="text/csv")
    assert response.status_code == 400
    assert response.json()["detail"] == "Please drop a JSON file"


def test_example_dataset(client):
    response = client.post("/api/dataset/example")
    assert response.status_code == 200
    assert response.json()["summary"]["totalActive"] == 8

    assert client.delete("/api/dataset").status_code == 200
    assert client.get("/api/dataset").status_code == 404


def test_config_and_remote_fetch(client, github):
    response = client.post("/api/dataset/fetch")
    assert response.status_code == 400
    assert "configure your GitHub API token" in response.json()["detail"]

    response = client.put("/api/config", json={"token": " ", "enterprise": "octo"})
    assert response.status_code == 400
    assert response.json()["detail"] == "GitHub Personal Access Token is required"

    response = client.put("/api/config", json={"token": "ghp_abcdefghijkl", "enterprise": "octo"})
    assert response.status_code == 200
    status = response.json()
    assert status["configured"] is True
    assert status["enterprise"] == "octo"
    assert "abcdefgh" not in status["token"]

    response = client.post("/api/dataset/fetch")
    assert response.status_code == 200
    assert response.json()["summary"]["totalActive"] == 2
    assert github.requests[-1].headers["authorization"] == "token ghp_abcdefghijkl"
    assert client.get("/api/dataset").json()["source"] == "api"

    github.status = 403
    response = client.post("/api/dataset/fetch")
    assert response.status_code == 502
    assert response.json()["detail"]["kind"] == "forbidden"
    assert client.get("/api/dataset").status_code == 404

    assert client.delete("/api/config").json()["configured"] is False


def test_save_config_and_fetch(client, github):
    github.body = sample_document()["costCenters"]
    response = client.put("/api/config", json={"token": "tok", "enterprise": "octo", "fetch": True})
    assert response.status_code == 200
    assert response.json()["summary"]["totalDeleted"] == 3


def test_stale_fetch_does_not_overwrite_newer_dataset(service, github):
    service.save_config("tok", "octo")

    def slow_github(request: httpx.Request) -> httpx.Response:
        # a newer upload lands while this request is still in flight
        service.load_upload("newer.json", json.dumps(sample_document()).encode("utf-8"))
        return httpx.Response(200, json=EXAMPLE)

    service._billing_client = GitHubBillingClient(http_client=httpx.Client(transport=httpx.MockTransport(slow_github)))

    with pytest.raises(StaleResponseError):
        service.fetch_remote()

    assert service.overview()["filename"] == "newer.json"
    assert service.current().summary.total_active == 8


def test_credentials_persist_in_json_file(tmp_path):
    path = tmp_path / "kv.json"
    store = CredentialStore(JsonFileKeyValueStore(path))
    store.save(" tok ", " octo ")

    reloaded = CredentialStore(JsonFileKeyValueStore(path)).load()
    assert reloaded is not None
    assert (reloaded.token, reloaded.enterprise) == ("tok", "octo")
    assert "github-api-config" in json.loads(path.read_text(encoding="utf-8"))

    store.clear()
    assert CredentialStore(JsonFileKeyValueStore(path)).load() is None


def test_superseded_failing_fetch_keeps_newer_dataset(service):
    service.save_config("tok", "octo")

    def forbidden_github(request: httpx.Request) -> httpx.Response:
        service.load_upload("newer.json", json.dumps(EXAMPLE).encode("utf-8"))
        return httpx.Response(403, json={"message": "Forbidden"})

    service._billing_client = GitHubBillingClient(http_client=httpx.Client(transport=httpx.MockTransport(forbidden_github)))

    with pytest.raises(NetworkError) as excinfo:
        service.fetch_remote()
    assert excinfo.value.kind == NetworkError.FORBIDDEN

    overview = service.overview()
    assert (overview["source"], overview["filename"]) == ("upload", "newer.json")
    assert overview["loaded_at"] == FIXED_NOW.isoformat()
    assert service.current().summary.total_active == 2


def test_reset_clears_dataset_and_supersedes_inflight_fetch(service):
    service.save_config("tok", "octo")
    service.load_example()

    def resetting_github(request: httpx.Request) -> httpx.Response:
        reset_report_state()
        return httpx.Response(200, json=EXAMPLE)

    service._billing_client = GitHubBillingClient(http_client=httpx.Client(transport=httpx.MockTransport(resetting_github)))

    with pytest.raises(StaleResponseError):
        service.fetch_remote()
    with pytest.raises(DatasetNotLoaded):
        service.current()


def test_app_shutdown_closes_billing_client(tmp_path, monkeypatch):
    monkeypatch.setenv("COST_CENTER_DATA_ROOT", str(tmp_path))
    billing = GitHubBillingClient()
    configure_report_service(ReportService(CredentialStore(InMemoryKeyValueStore()), billing))
    from cost_center_report.app import create_app

    try:
        with TestClient(create_app()) as test_client:
            assert test_client.get("/api/config").json()["configured"] is False
            assert not billing._client.is_closed
        assert billing._client.is_closed
    finally:
        configure_report_service(None)
