"""Tests for the scheduled job endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from academy.core.schemas_mastery import ClearanceLevel, MasterySweepSummary, MasteryUpdate
from academy.core.schemas_recognitions import RecognitionSweepSummary
from academy.main import app

client = TestClient(app)


@pytest.fixture
def cron_secret():
    settings = MagicMock(CRON_SECRET="s3cret")
    with patch("academy.core.auth_middleware.get_settings", return_value=settings):
        yield "s3cret"


@pytest.fixture
def mock_mastery_sweep():
    with patch("academy.api.cron.run_mastery_sweep") as mock:
        yield mock


@pytest.fixture
def mock_recognition_sweep():
    with patch("academy.api.cron.run_recognition_sweep") as mock:
        yield mock


class TestCronAuth:
    def test_rejects_missing_secret(self, cron_secret, mock_mastery_sweep):
        response = client.get("/v1/cron/mastery-update")

        assert response.status_code == 401
        mock_mastery_sweep.assert_not_called()

    def test_rejects_wrong_secret(self, cron_secret, mock_mastery_sweep):
        response = client.get(
            "/v1/cron/mastery-update", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_accepts_secret(self, cron_secret, mock_mastery_sweep):
        mock_mastery_sweep.return_value = MasterySweepSummary(processed=0, updated=0)

        response = client.get(
            "/v1/cron/mastery-update", headers={"Authorization": f"Bearer {cron_secret}"}
        )
        assert response.status_code == 200

    def test_open_without_configured_secret(self, mock_mastery_sweep):
        mock_mastery_sweep.return_value = MasterySweepSummary(processed=0, updated=0)
        settings = MagicMock(CRON_SECRET=None)
        with patch("academy.core.auth_middleware.get_settings", return_value=settings):
            response = client.get("/v1/cron/mastery-update")

        assert response.status_code == 200


class TestMasteryUpdate:
    def test_returns_summary(self, mock_mastery_sweep):
        mock_mastery_sweep.return_value = MasterySweepSummary(
            processed=3,
            updated=1,
            updates=[
                MasteryUpdate(
                    participant_id="p-1",
                    old_level=1,
                    new_level=2,
                    new_clearance=ClearanceLevel.FIELD_TRAINEE,
                )
            ],
        )
        with patch("academy.core.auth_middleware.get_settings", return_value=MagicMock(CRON_SECRET=None)):
            response = client.get("/v1/cron/mastery-update")

        data = response.json()
        assert data["success"] is True
        assert data["processed"] == 3
        assert data["updated"] == 1
        assert data["updates"][0]["new_clearance"] == "FIELD_TRAINEE"

    def test_total_failure_is_500(self, mock_mastery_sweep):
        mock_mastery_sweep.side_effect = Exception("db down")
        with patch("academy.core.auth_middleware.get_settings", return_value=MagicMock(CRON_SECRET=None)):
            response = client.get("/v1/cron/mastery-update")

        assert response.status_code == 500


class TestRecognitions:
    def test_returns_summary(self, mock_recognition_sweep):
        mock_recognition_sweep.return_value = RecognitionSweepSummary(total_awarded=2)
        with patch("academy.core.auth_middleware.get_settings", return_value=MagicMock(CRON_SECRET=None)):
            response = client.get("/v1/cron/recognitions")

        assert response.status_code == 200
        assert response.json()["total_awarded"] == 2
