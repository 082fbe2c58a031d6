"""
Integration tests for the registration flow.

Tests the full registration flow through the API with the real
dependency wiring, an in-memory record store and the console notifier.
The pincode is read from the notification log, as an applicant would
read it from their inbox.
"""

import logging
import re
from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from patient_registration.adapters.notifier.console import ConsoleNotifier
from patient_registration.adapters.store.memory import InMemoryRecordStore
from patient_registration.adapters.store.postgres import PostgresRecordStore
from patient_registration.api.main import app
from patient_registration.config.settings import get_settings
from patient_registration.domain.model import RegistrationStatus

JANE = {
    "patient": {
        "bsn": "123",
        "full_name": "Jane Doe",
        "address": {"postal_code": "1234AB", "house_number": 7},
        "contact": {"email_address": "jane@x.com"},
    }
}


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def client(store: InMemoryRecordStore) -> TestClient:
    """Create test client with in-memory collaborators in app state."""
    app.state.store = store
    app.state.notifier = ConsoleNotifier()
    app.state.pool = None
    return TestClient(app)


def register(client: TestClient, caplog: pytest.LogCaptureFixture) -> tuple[str, int]:
    """Start a registration and return (patient_uid, emailed pincode)."""
    caplog.clear()
    with caplog.at_level(logging.INFO):
        response = client.post("/v1/registrations", json=JANE)
    assert response.status_code == 201

    match = re.search(r"\[NOTIFICATION\] To: jane@x.com .*pincode (\d+)", caplog.text)
    assert match is not None, caplog.text
    return response.json()["patient_uid"], int(match.group(1))


class TestRegisterFlow:
    """Integration tests for the two-phase flow."""

    def test_register_creates_pending_record(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        patient_uid, pincode = register(client, caplog)

        record = store.get(patient_uid)
        assert record.status == RegistrationStatus.PENDING
        assert record.pincode == pincode
        assert record.personal_data.full_name == "Jane Doe"
        assert record.personal_data.address.house_number == 7

    def test_emailed_pincode_completes_registration(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        patient_uid, pincode = register(client, caplog)

        response = client.post(f"/v1/registrations/{patient_uid}/complete", json={"pincode": pincode})

        assert response.status_code == 200
        assert response.json() == {"status": "REGISTRATION_CONFIRMED"}
        assert store.get(patient_uid).status == RegistrationStatus.REGISTERED
        assert store.get(patient_uid).pincode is None

    def test_wrong_then_right_pincode(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        patient_uid, pincode = register(client, caplog)
        wrong = pincode + 1 if pincode < 99999 else pincode - 1

        response = client.post(f"/v1/registrations/{patient_uid}/complete", json={"pincode": wrong})
        assert response.status_code == 401
        assert store.get(patient_uid).failed_attempts == 1

        response = client.post(f"/v1/registrations/{patient_uid}/complete", json={"pincode": pincode})
        assert response.status_code == 200

    def test_completed_registration_cannot_be_reused(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        patient_uid, pincode = register(client, caplog)
        client.post(f"/v1/registrations/{patient_uid}/complete", json={"pincode": pincode})

        response = client.post(f"/v1/registrations/{patient_uid}/complete", json={"pincode": pincode})

        assert response.status_code == 404

    def test_five_wrong_pincodes_block(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        patient_uid, pincode = register(client, caplog)
        wrong = pincode + 1 if pincode < 99999 else pincode - 1
        url = f"/v1/registrations/{patient_uid}/complete"

        statuses = [client.post(url, json={"pincode": wrong}).status_code for _ in range(5)]
        assert statuses == [401] * 5
        assert store.get(patient_uid).status == RegistrationStatus.BLOCKED

        response = client.post(url, json={"pincode": pincode})
        assert response.status_code == 403
        assert response.json() == {"detail": "Registration blocked"}

    def test_missing_name_rejected_without_notification(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        payload = {"patient": {**JANE["patient"], "full_name": ""}}

        with caplog.at_level(logging.INFO):
            response = client.post("/v1/registrations", json=payload)

        assert response.status_code == 400
        assert "[NOTIFICATION]" not in caplog.text
        assert len(store) == 0

    @pytest.mark.parametrize(
        "payload",
        [
            {"patient": {**JANE["patient"], "contact": {"email_address": ""}}},
            {"patient": {k: v for k, v in JANE["patient"].items() if k != "bsn"}},
            {"patient": {k: v for k, v in JANE["patient"].items() if k != "contact"}},
            {"patient": {k: v for k, v in JANE["patient"].items() if k != "full_name"}},
            {},
        ],
        ids=["empty-email", "missing-bsn", "missing-contact", "missing-name", "missing-patient"],
    )
    def test_absent_mandatory_field_is_invalid_input(
        self,
        client: TestClient,
        store: InMemoryRecordStore,
        caplog: pytest.LogCaptureFixture,
        payload: dict,
    ) -> None:
        """Absent or empty mandatory fields give 400, with nothing sent or stored."""
        with caplog.at_level(logging.INFO):
            response = client.post("/v1/registrations", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid request")
        assert "[NOTIFICATION]" not in caplog.text
        assert len(store) == 0

    def test_malformed_email_is_validation_error(self, client: TestClient, store: InMemoryRecordStore) -> None:
        payload = {"patient": {**JANE["patient"], "contact": {"email_address": "not-an-email"}}}

        response = client.post("/v1/registrations", json=payload)

        assert response.status_code == 422
        assert len(store) == 0

    def test_house_number_overflow_sends_nothing(
        self, client: TestClient, store: InMemoryRecordStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A house number the database column cannot hold is rejected before the pincode is emailed."""
        payload = {"patient": {**JANE["patient"], "address": {"postal_code": "1234AB", "house_number": 10**12}}}

        with caplog.at_level(logging.INFO):
            response = client.post("/v1/registrations", json=payload)

        assert response.status_code == 422
        assert "[NOTIFICATION]" not in caplog.text
        assert len(store) == 0

    def test_unknown_uid_returns_404(self, client: TestClient) -> None:
        response = client.post("/v1/registrations/unknown/complete", json={"pincode": 12345})
        assert response.status_code == 404

    def test_non_positive_pincode_returns_400(self, client: TestClient) -> None:
        response = client.post("/v1/registrations/unknown/complete", json={"pincode": 0})
        assert response.status_code == 400

    def test_health_without_database(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestLifespan:
    """Application startup with the in-memory backend."""

    @pytest.fixture
    def memory_settings(self, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("NOTIFIER_BACKEND", "console")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_startup_builds_memory_store(self, memory_settings: None) -> None:
        with TestClient(app) as client:
            assert isinstance(app.state.store, InMemoryRecordStore)
            assert isinstance(app.state.notifier, ConsoleNotifier)
            assert app.state.pool is None
            assert client.get("/health").status_code == 200

    def test_startup_opens_connection_pool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The postgres backend opens its pool explicitly and closes it on shutdown."""
        monkeypatch.setenv("STORE_BACKEND", "postgres")
        get_settings.cache_clear()
        try:
            with (
                patch("patient_registration.api.main.ConnectionPool") as pool_cls,
                patch("patient_registration.api.main.run_migrations") as migrations,
            ):
                with TestClient(app):
                    assert isinstance(app.state.store, PostgresRecordStore)

            assert pool_cls.call_args.kwargs["open"] is True
            migrations.assert_called_once_with(pool_cls.return_value)
            pool_cls.return_value.close.assert_called_once()
        finally:
            get_settings.cache_clear()
