"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from coopvote.services.result import ErrorCode, ServiceError, ServiceResult


class TestServiceResult:
    def test_success(self) -> None:
        result = ServiceResult.success("create_proposal", {"id": 1})
        assert result.ok is True
        assert result.data == {"id": 1}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure(self) -> None:
        result = ServiceResult.failure(
            "cast_vote", ErrorCode.ALREADY_VOTED, "member already voted", member_id=3
        )
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "ALREADY_VOTED"
        assert result.error.detail == {"member_id": 3}

    def test_json_serialization(self) -> None:
        result = ServiceResult.success(
            "list_votes", {"items": []}, warnings=["limit capped at 100"]
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["op"] == "list_votes"
        assert parsed["warnings"] == ["limit capped at 100"]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        assert ServiceError(code="NOT_FOUND", message="bad").detail == {}

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.INVALID_INPUT, "invalid_input"),
            (ErrorCode.NOT_FOUND, "not_found"),
            (ErrorCode.ALREADY_VOTED, "conflict"),
            (ErrorCode.PROPOSAL_CLOSED, "conflict"),
            (ErrorCode.ALREADY_CLOSED, "conflict"),
            (ErrorCode.MEMBER_EXISTS, "conflict"),
            (ErrorCode.STORAGE_FAILURE, "storage"),
        ],
    )
    def test_category(self, code: ErrorCode, category: str) -> None:
        assert ServiceError(code=code.value, message="m").category == category
