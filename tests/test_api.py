"""HTTP job API, with jobs executed inline instead of on the thread pool.

Run:
    pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

import app as api
from stringart.errors import ImageLoadError

JOB_QUERY = {"hooks": 8, "strings": 5, "size": 32, "snapshotEvery": 0}


class InlineExecutor:
    def submit(self, fn, *args, **kwargs):
        fn(*args, **kwargs)


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(api, "JOBS_ROOT", str(tmp_path / "jobs"))
    monkeypatch.setattr(api, "EXECUTOR", InlineExecutor())
    return TestClient(api.app)


def upload(client, cross_image, params=None):
    with open(cross_image, "rb") as f:
        return client.post(
            "/redeem-upload",
            params=params or JOB_QUERY,
            files={"file": ("cross.png", f, "image/png")},
        )


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["defaults"]["hooks"] > 0


def test_upload_runs_job(client, cross_image):
    response = upload(client, cross_image)
    assert response.status_code == 200
    job = response.json()
    assert job["status"] == "queued"

    status = client.get(f"/status/{job['jobId']}").json()
    assert status["status"] == "done", status["error"]
    assert status["resultImageUrl"] == f"/files/{job['jobId']}/string_art_result.png"
    assert status["resultTimelapseUrl"] is None

    path = client.get(status["resultPathUrl"]).json()
    assert path["hooks"] == 8
    assert len(path["path"]) == 6
    assert path["path"][0] == 0

    csv = client.get(status["resultCsvUrl"])
    assert csv.status_code == 200
    assert csv.text.startswith("step,from_hook,to_hook")
    assert client.get(status["resultPdfUrl"]).status_code == 200


def test_upload_rejects_non_image(client):
    response = client.post(
        "/redeem-upload", files={"file": ("notes.txt", b"hello", "text/plain")}
    )
    assert response.status_code == 400


def test_upload_rejects_bad_params(client, cross_image):
    response = upload(client, cross_image, {**JOB_QUERY, "hooks": 0})
    assert response.status_code == 422


def test_broken_image_marks_job_failed(client):
    response = client.post(
        "/redeem-upload",
        params=JOB_QUERY,
        files={"file": ("broken.png", b"", "image/png")},
    )
    job_id = response.json()["jobId"]
    status = client.get(f"/status/{job_id}").json()
    assert status["status"] == "error"
    assert status["error"]
    assert client.get(f"/jobs/{job_id}/path").status_code == 409


def test_redeem_from_url(client, cross_image, monkeypatch):
    def fake_fetch(url, dest_path):
        with open(cross_image, "rb") as src, open(dest_path, "wb") as dst:
            dst.write(src.read())
        return dest_path

    monkeypatch.setattr(api, "fetch_image", fake_fetch)
    response = client.post(
        "/redeem",
        json={"imageUrl": "https://example.com/cross.png",
              "params": {"hooks": 8, "strings": 3, "size": 32, "snapshotEvery": 0}},
    )
    job_id = response.json()["jobId"]
    assert client.get(f"/status/{job_id}").json()["status"] == "done"
    assert len(client.get(f"/jobs/{job_id}/path").json()["path"]) == 4


def test_redeem_download_failure(client, monkeypatch):
    def failing_fetch(url, dest_path):
        raise ImageLoadError(f"could not download {url}")

    monkeypatch.setattr(api, "fetch_image", failing_fetch)
    response = client.post("/redeem", json={"imageUrl": "https://example.com/x.png"})
    assert response.status_code == 200
    assert response.json()["status"] == "error"


def test_cancel_finished_job_conflicts(client, cross_image):
    job_id = upload(client, cross_image).json()["jobId"]
    assert client.post(f"/jobs/{job_id}/cancel").status_code == 409


def test_cancelled_job_status(client, cross_image, tmp_path):
    job_id = "cancelme"
    event = api.CANCEL_EVENTS.setdefault(job_id, api.threading.Event())
    event.set()
    api.generate_string_art_assets(
        cross_image, job_id,
        api.JobParams(hooks=8, strings=5, size=32, snapshotEvery=0),
    )
    status = client.get(f"/status/{job_id}").json()
    assert status["status"] == "cancelled"
    assert job_id not in api.CANCEL_EVENTS


def test_unknown_job(client):
    assert client.get("/status/doesnotexist").status_code == 404


def test_file_outside_job_dir(client, cross_image):
    job_id = upload(client, cross_image).json()["jobId"]
    assert client.get(f"/files/{job_id}/missing.png").status_code == 404
    assert client.get(f"/files/{job_id}/..%2Fstatus.json").status_code == 404
