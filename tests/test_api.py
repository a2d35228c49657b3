"""End-to-end tests through the FastAPI app with a fake Loops.so client."""

import time

import pytest
from fastapi.testclient import TestClient

from loops_panel.main import app

from conftest import upstream_error, use_fake_client


def wait_for_job(api, job_id, statuses=("completed", "stopped", "paused"), attempts=200):
    for _ in range(attempts):
        job = api.get(f"/api/import-jobs/{job_id}").json()
        if job["status"] in statuses:
            return job
        time.sleep(0.01)
    pytest.fail(f"job {job_id} never reached {statuses}")


@pytest.fixture
def account_id(api):
    response = api.post("/api/accounts", json={"name": "Main", "apiKey": "key-abcdef"})
    assert response.status_code == 200
    return response.json()["id"]


class TestAccounts:
    def test_create_and_list_masks_key(self, api, account_id):
        accounts = api.get("/api/accounts").json()

        assert len(accounts) == 1
        assert accounts[0]["id"] == account_id
        assert accounts[0]["apiKeyHint"] == "...cdef"
        assert "apiKey" not in accounts[0]

    def test_same_credentials_map_to_same_account(self, api, account_id):
        again = api.post("/api/accounts", json={"name": "Main", "apiKey": "key-abcdef"}).json()
        assert again["id"] == account_id
        assert len(api.get("/api/accounts").json()) == 1

    def test_missing_name_is_validation_error(self, api):
        response = api.post("/api/accounts", json={"apiKey": "k"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"
        assert response.json()["errors"]

    def test_test_connection(self, api, account_id):
        response = api.get(f"/api/accounts/{account_id}/test-connection")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_unknown_account(self, api):
        assert api.get("/api/accounts/nope/test-connection").status_code == 404


class TestBulkImport:
    def test_submit_returns_202_and_job_completes(self, api, account_id, fake_client):
        response = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["a@x.com", "b@x.com"], "accountId": account_id, "delay": 0},
        )

        assert response.status_code == 202
        body = response.json()
        assert body["success"] is True
        job = wait_for_job(api, body["jobId"])

        assert job["status"] == "completed"
        assert job["processedEmails"] == 2
        assert job["totalEmails"] == 2
        assert [(e["email"], e["status"]) for e in job["logs"]] == [("a@x.com", "success"), ("b@x.com", "success")]
        assert job["completedAt"] is not None

    def test_partial_failure(self, api, account_id, fake_client):
        fake_client.failures["b@x.com"] = upstream_error("b@x.com", "duplicate")
        job_id = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["a@x.com", "b@x.com", "c@x.com"], "accountId": account_id, "delay": 0},
        ).json()["jobId"]

        job = wait_for_job(api, job_id)

        assert job["status"] == "completed"
        assert job["processedEmails"] == 3
        assert [e["status"] for e in job["logs"]] == ["success", "failed", "success"]
        assert "duplicate" in job["logs"][1]["message"]

        contacts = api.get("/api/contacts", params={"accountId": account_id}).json()
        assert sorted(c["email"] for c in contacts) == ["a@x.com", "c@x.com"]

    def test_invalid_email_rejected_before_job_created(self, api, account_id):
        response = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["not-an-email"], "accountId": account_id, "delay": 0},
        )

        assert response.status_code == 400
        assert api.get("/api/import-jobs").json() == []

    def test_negative_delay_rejected(self, api, account_id):
        response = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["a@x.com"], "accountId": account_id, "delay": -1},
        )
        assert response.status_code == 400

    def test_unknown_account_rejected(self, api):
        response = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["a@x.com"], "accountId": "nope", "delay": 0},
        )
        assert response.status_code == 404
        assert api.get("/api/import-jobs").json() == []

    def test_inactive_account_rejected(self, api, account_id):
        api.patch(f"/api/accounts/{account_id}", json={"isActive": False})
        response = api.post(
            "/api/loops/import-contacts",
            json={"emails": ["a@x.com"], "accountId": account_id, "delay": 0},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_list_jobs_filtered_by_account(self, api, account_id):
        job_id = api.post(
            "/api/loops/import-contacts",
            json={"emails": [], "accountId": account_id, "delay": 0},
        ).json()["jobId"]
        wait_for_job(api, job_id)

        assert [j["id"] for j in api.get("/api/import-jobs", params={"accountId": account_id}).json()] == [job_id]
        assert api.get("/api/import-jobs", params={"accountId": "other"}).json() == []


class TestJobControlEndpoint:
    def test_unknown_job_is_404(self, api):
        response = api.post("/api/jobs/control", json={"jobId": "missing", "action": "pause"})
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_unknown_job_status_is_404(self, api):
        assert api.get("/api/import-jobs/missing").status_code == 404

    def test_invalid_action(self, api):
        response = api.post("/api/jobs/control", json={"jobId": "x", "action": "restart"})
        assert response.status_code == 400

    def test_pause_resume_stop(self, api, account_id):
        emails = [f"user{i}@x.com" for i in range(5)]
        job_id = api.post(
            "/api/loops/import-contacts",
            json={"emails": emails, "accountId": account_id, "delay": 300},
        ).json()["jobId"]

        for _ in range(200):
            if api.get(f"/api/import-jobs/{job_id}").json()["processedEmails"] >= 1:
                break
            time.sleep(0.01)

        paused = api.post("/api/jobs/control", json={"jobId": job_id, "action": "pause"}).json()
        assert paused["status"] == "paused"
        job = wait_for_job(api, job_id, statuses=("paused",))
        time.sleep(0.4)
        still = api.get(f"/api/import-jobs/{job_id}").json()
        assert still["status"] == "paused"
        assert still["processedEmails"] == len(still["logs"]) == 1

        resumed = api.post("/api/jobs/control", json={"jobId": job_id, "action": "resume"}).json()
        assert resumed["status"] == "running"

        stopped = api.post("/api/jobs/control", json={"jobId": job_id, "action": "stop"}).json()
        assert stopped["status"] == "stopped"
        job = wait_for_job(api, job_id, statuses=("stopped",))
        assert job["processedEmails"] == len(job["logs"])
        assert job["logs"][0] == still["logs"][0]

        response = api.post("/api/jobs/control", json={"jobId": job_id, "action": "resume"})
        assert response.status_code == 409
        assert api.get(f"/api/import-jobs/{job_id}").json()["status"] == "stopped"


class TestSingleContact:
    def test_import_contact(self, api, account_id, fake_client):
        response = api.post("/api/loops/import-contact", json={"email": "a@x.com", "accountId": account_id})

        assert response.status_code == 200
        assert response.json()["message"] == "Contact a@x.com successfully added."
        assert fake_client.created == ["a@x.com"]

    def test_upstream_failure_is_reported(self, api, account_id, fake_client):
        fake_client.failures["a@x.com"] = upstream_error("a@x.com", "duplicate")
        response = api.post("/api/loops/import-contact", json={"email": "a@x.com", "accountId": account_id})

        assert response.status_code == 502
        assert "duplicate" in response.json()["message"]
        assert api.get("/api/contacts").json() == []

    def test_find_and_delete(self, api, account_id):
        api.post("/api/loops/import-contact", json={"email": "a@x.com", "accountId": account_id})

        found = api.get("/api/loops/contacts/find", params={"accountId": account_id, "email": "a@x.com"})
        assert found.json() == [{"email": "a@x.com", "subscribed": True}]

        deleted = api.post("/api/loops/contacts/delete", json={"email": "a@x.com", "accountId": account_id})
        assert deleted.json()["success"] is True
        assert api.get("/api/contacts").json() == []


class TestSendEmail:
    def payload(self, account_id, recipients):
        return {
            "recipients": recipients,
            "subject": "Hello",
            "htmlContent": "<p>Hi</p>",
            "accountId": account_id,
        }

    def test_all_sent(self, api, account_id, fake_client):
        response = api.post("/api/loops/send-email", json=self.payload(account_id, ["a@x.com", "b@x.com"]))

        assert response.status_code == 200
        assert response.json()["message"] == "Email sent successfully to 2 recipients."
        assert [p["to"] for p in fake_client.sent] == ["a@x.com", "b@x.com"]
        logs = api.get("/api/email-logs", params={"accountId": account_id}).json()
        assert logs[0]["status"] == "completed"

    def test_partial_failure(self, api, account_id, fake_client):
        fake_client.failures["b@x.com"] = upstream_error("b@x.com", "bounced")
        response = api.post("/api/loops/send-email", json=self.payload(account_id, ["a@x.com", "b@x.com"]))

        body = response.json()
        assert response.status_code == 200
        assert body["recipients"] == 1
        assert body["failed"] == 1
        assert body["errors"][0]["recipient"] == "b@x.com"
        assert api.get("/api/email-logs").json()[0]["status"] == "failed_partial"

    def test_everything_failed(self, api, account_id, fake_client):
        fake_client.failures["a@x.com"] = upstream_error("a@x.com")
        response = api.post("/api/loops/send-email", json=self.payload(account_id, ["a@x.com"]))

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert api.get("/api/email-logs").json()[0]["status"] == "failed"


def test_health(api):
    assert api.get("/health").json() == {"status": "healthy"}


def test_swapping_in_fake_client_closes_startup_client(fake_client):
    with TestClient(app) as client:
        startup_client = app.state.loops_client
        use_fake_client(client, fake_client)

        assert startup_client.is_closed
        assert app.state.loops_client is fake_client

    assert fake_client.closed
