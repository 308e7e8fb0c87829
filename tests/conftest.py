"""Shared fixtures: a testing app on in-memory SQLite and Drive test doubles."""

from concurrent.futures import Executor, Future

import pytest
import retry.api

from claimdesk import create_app, db
from claimdesk.services.credential_store import InMemoryCredentialStore
from claimdesk.services.drive_service import DriveUploader
from claimdesk.services.export_service import DriveExporter
from claimdesk.services.upload_log import UploadLog


class ImmediateExecutor(Executor):
    """Runs submitted work inline so background exports finish before asserts."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as error:
            future.set_exception(error)
        return future


class FakeDriveClient:
    """Stands in for DriveClient; each create_file call consumes one outcome."""

    def __init__(self, outcomes, refresh_token="refresh-1"):
        self.outcomes = list(outcomes)
        self.created = []
        self.payloads = []
        self.refreshes = 0
        self.fresh_checks = 0
        self.access_token = "access-1"
        self.refresh_token = refresh_token

    @property
    def has_refresh_token(self):
        return bool(self.refresh_token)

    def ensure_fresh(self):
        self.fresh_checks += 1

    def refresh(self):
        self.refreshes += 1
        self.access_token = f"access-{self.refreshes + 1}"

    def create_file(self, name, payload):
        self.created.append(name)
        self.payloads.append(payload)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def token_fields(self):
        return {"access_token": self.access_token, "refresh_token": None, "expiry": None}


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {
        "DRIVE_TOKENS_PATH": str(tmp_path / "drive_tokens.json"),
        "DRIVE_UPLOAD_LOG_PATH": str(tmp_path / "drive_upload.log"),
    })
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sleeps(monkeypatch):
    """Backoff delays requested by the retry loop, without actually sleeping."""
    recorded = []
    monkeypatch.setattr(retry.api.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def upload_log(tmp_path):
    return UploadLog(str(tmp_path / "upload.log"))


@pytest.fixture
def make_uploader(upload_log):
    def factory(outcomes, bundle=None, refresh_token="refresh-1"):
        fake = FakeDriveClient(outcomes, refresh_token=refresh_token)
        store = InMemoryCredentialStore(bundle)
        uploader = DriveUploader(
            credential_store=store,
            upload_log=upload_log,
            client_factory=lambda stored_bundle: fake,
            max_attempts=3,
            backoff_base=1.0,
            backoff_factor=2,
        )
        return uploader, fake, store
    return factory


@pytest.fixture
def install_exporter(app, make_uploader):
    """Replace the app's Drive exporter with one backed by a fake client."""
    def install(outcomes, bundle=None):
        uploader, fake, store = make_uploader(outcomes, bundle=bundle)
        app.extensions["drive_exporter"] = DriveExporter(uploader, executor=ImmediateExecutor())
        return fake, store
    return install


@pytest.fixture
def make_client(client):
    def create(**overrides):
        payload = {
            "name": "John Smith",
            "email": "john@example.com",
            "phone": "0712345678",
            "company": "Acme Insurance",
            "premium": 1200,
            "premiumPaid": 200,
        }
        payload.update(overrides)
        response = client.post("/api/clients", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return create
