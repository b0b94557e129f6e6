"""
HTTP API tests - binding, envelopes and status codes for every route.
"""

import csv
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from fieldaudit.api.main import build_pipeline, create_app
from fieldaudit.core.pipeline import ValidationPipeline

VALID_UUID = "550e8400-e29b-41d4-a716-446655440000"

NOT_VALID = {"isOK": False, "msg": "request not valid"}
JSON_NOT_VALID = {"isOK": False, "msg": "json not valid"}
INTERNAL = {"isOK": False, "msg": "internal server error"}


@pytest.fixture
def audit_path(tmp_path):
    return tmp_path / "validation_errors.csv"


@pytest.fixture
def test_client(audit_path):
    """Create a test client around a pipeline writing to a temporary store."""
    return TestClient(create_app(build_pipeline(str(audit_path))))


def _data_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))[1:]


class TestFavoriteEndpoint:
    """Test POST /api/v1/favorite."""

    def test_valid_request(self, test_client, audit_path):
        response = test_client.post("/api/v1/favorite", json={"favNum": 42, "userId": VALID_UUID})
        assert response.status_code == 200
        assert response.json() == {"isOK": True}
        assert not audit_path.exists()

    def test_zero_fav_num_is_not_valid(self, test_client, audit_path):
        response = test_client.post("/api/v1/favorite", json={"favNum": 0, "userId": VALID_UUID})
        assert response.status_code == 400
        assert response.json() == NOT_VALID
        assert [row[1:] for row in _data_rows(audit_path)] == [["FavoriteNumRequest.fav_num", "gt"]]

    def test_bad_uuid_is_not_valid(self, test_client, audit_path):
        response = test_client.post("/api/v1/favorite", json={"favNum": 42, "userId": "not-a-uuid"})
        assert response.status_code == 400
        assert response.json() == NOT_VALID
        assert [row[1:] for row in _data_rows(audit_path)] == [["FavoriteNumRequest.user_id", "uuid_rfc4122"]]

    def test_uuid_with_trailing_newline_is_not_valid(self, test_client, audit_path):
        response = test_client.post("/api/v1/favorite", json={"favNum": 42, "userId": VALID_UUID + "\n"})
        assert response.status_code == 400
        assert response.json() == NOT_VALID
        assert [row[1:] for row in _data_rows(audit_path)] == [["FavoriteNumRequest.user_id", "uuid_rfc4122"]]

    def test_largest_int64_binds(self, test_client):
        response = test_client.post("/api/v1/favorite", json={"favNum": 2 ** 63 - 1, "userId": VALID_UUID})
        assert response.status_code == 200

    def test_field_detail_never_leaks(self, test_client):
        response = test_client.post("/api/v1/favorite", json={"favNum": 0, "userId": "nope"})
        assert "fav_num" not in response.text
        assert "uuid" not in response.text

    def test_empty_body_fails_required(self, test_client, audit_path):
        """Test that an empty body binds as all-absent and fails validation."""
        response = test_client.post("/api/v1/favorite")
        assert response.status_code == 400
        assert response.json() == NOT_VALID
        assert [row[2] for row in _data_rows(audit_path)] == ["required", "required"]

    def test_unknown_keys_are_ignored(self, test_client):
        response = test_client.post(
            "/api/v1/favorite", json={"favNum": 7, "userId": VALID_UUID, "extra": "ignored"}
        )
        assert response.status_code == 200


class TestMalformedInput:
    """Test bodies rejected before validation."""

    @pytest.mark.parametrize("body", ["{not json", "[1, 2, 3]", "\"text\"", "42"])
    def test_unparseable_or_non_object_body(self, test_client, audit_path, body):
        response = test_client.post(
            "/api/v1/favorite", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == JSON_NOT_VALID
        assert not audit_path.exists()

    @pytest.mark.parametrize("payload", [
        {"favNum": "42", "userId": VALID_UUID},
        {"favNum": 4.5, "userId": VALID_UUID},
        {"favNum": 42, "userId": 123},
        {"favNum": 10 ** 30, "userId": VALID_UUID},
        {"favNum": -(2 ** 63) - 1, "userId": VALID_UUID},
    ])
    def test_type_mismatch_is_json_not_valid(self, test_client, audit_path, payload):
        response = test_client.post("/api/v1/favorite", json=payload)
        assert response.status_code == 400
        assert response.json() == JSON_NOT_VALID
        assert not audit_path.exists()


class TestOtherRoutes:
    """Test the pet name, Thai CID and cat guess routes."""

    @pytest.mark.parametrize("path,payload", [
        ("/api/v1/pet-name", {"petName": "Mochi", "ownerId": VALID_UUID}),
        ("/api/v1/thai-cid", {"citizenId": "1103700012345", "fullName": "Somchai Jaidee"}),
        ("/api/v1/guess-cat", {"guessName": "Whiskers", "userId": VALID_UUID, "attempts": 2}),
    ])
    def test_valid_requests(self, test_client, path, payload):
        response = test_client.post(path, json=payload)
        assert response.status_code == 200
        assert response.json() == {"isOK": True}

    @pytest.mark.parametrize("path,payload,expected", [
        ("/api/v1/pet-name", {"petName": "M", "ownerId": VALID_UUID}, ["PetNameRequest.pet_name", "min"]),
        ("/api/v1/thai-cid", {"citizenId": "123", "fullName": "Somchai"}, ["ThaiCIDRequest.citizen_id", "len"]),
        ("/api/v1/guess-cat", {"guessName": "Tom", "userId": VALID_UUID, "attempts": 5}, ["GuessCatNameRequest.attempts", "lte"]),
    ])
    def test_invalid_requests_are_audited(self, test_client, audit_path, path, payload, expected):
        response = test_client.post(path, json=payload)
        assert response.status_code == 400
        assert response.json() == NOT_VALID
        assert [row[1:] for row in _data_rows(audit_path)] == [expected]


class TestInternalErrors:
    """Test internal failures map to 500."""

    def test_unwritable_audit_store(self, tmp_path):
        client = TestClient(create_app(build_pipeline(str(tmp_path))))
        response = client.post("/api/v1/favorite", json={"favNum": 0, "userId": VALID_UUID})
        assert response.status_code == 500
        assert response.json() == INTERNAL

    def test_unwritable_store_does_not_affect_valid_requests(self, tmp_path):
        client = TestClient(create_app(build_pipeline(str(tmp_path))))
        response = client.post("/api/v1/favorite", json={"favNum": 1, "userId": VALID_UUID})
        assert response.status_code == 200

    def test_unhandled_exception_uses_internal_envelope(self):
        pipeline = MagicMock(spec=ValidationPipeline)
        pipeline.run.side_effect = RuntimeError("unexpected")
        client = TestClient(create_app(pipeline), raise_server_exceptions=False)

        response = client.post("/api/v1/favorite", json={"favNum": 1, "userId": VALID_UUID})

        assert response.status_code == 500
        assert response.json() == INTERNAL


class TestHealth:
    """Test GET /health."""

    def test_health_reports_store_path(self, test_client, audit_path):
        response = test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["audit_log_path"] == str(audit_path)
