"""Tests for the invalidation controller."""

from __future__ import annotations

import logging

import pytest

from sleuth.analysis.redaction import TRUNCATION_MARKER
from sleuth.cache.invalidation import InvalidationController
from sleuth.cache.result_cache import ResultCache
from sleuth.core.exceptions import InvalidRequestError, UnauthorizedError
from tests.fakes import MemoryCacheBackend


@pytest.fixture
def cache():
    return ResultCache(MemoryCacheBackend())


@pytest.fixture
def controller(cache):
    return InvalidationController(cache)


class TestExecute:
    def test_file_type_csv(self, controller, cache):
        cache.store("a,b\n1,2", 10, "csv", {"status": "ok"}, "r")
        result = controller.execute({"scope": "file_type", "file_type": "csv"}, "req-1")
        assert result.success is True
        assert result.file_type == "csv"
        assert result.deleted_entries == 1

    def test_file_type_with_nothing_cached(self, controller):
        result = controller.execute({"scope": "file_type", "file_type": "csv"}, "req-1")
        assert result.deleted_entries == 0

    def test_invalid_file_type_named(self, controller):
        with pytest.raises(InvalidRequestError, match="Invalid file_type: ini"):
            controller.execute({"scope": "file_type", "file_type": "ini"}, "req-1")

    def test_all(self, controller, cache):
        cache.store("x", 10, "json", {"status": "ok"}, "r")
        result = controller.execute({"scope": "all"}, "req-1")
        assert result.scope == "all"
        assert result.deleted_entries == 1

    def test_version(self, controller, cache):
        result = controller.execute({"scope": "version", "type": "model", "version": "v2"}, "req-1")
        assert result.version_updated.type == "model"
        assert result.version_updated.version == "v2"
        assert cache.current_versions()["model_version"] == "v2"
        assert result.deleted_entries is None

    def test_version_log_uses_configured_length(self, cache, caplog):
        controller = InvalidationController(cache, log_max_length=5)
        with caplog.at_level(logging.INFO, logger="sleuth.cache.invalidation"):
            controller.execute({"scope": "version", "type": "rag", "version": "release 2 final"}, "req-1")
        [line] = [r.getMessage() for r in caplog.records if r.name == "sleuth.cache.invalidation"]
        assert line.endswith("version=relea" + TRUNCATION_MARKER)
        assert cache.current_versions()["rag_version"] == "release 2 final"

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ([], "Invalid request body"),
            ({}, "Missing required field: scope"),
            ({"scope": "everything"}, "Invalid scope: everything"),
            ({"scope": "file_type"}, "Missing required field: file_type"),
            ({"scope": "version", "type": "model"}, "Missing required fields: type and version"),
            ({"scope": "version", "type": "model", "version": "  "}, "Missing required fields"),
            ({"scope": "version", "type": "prompt", "version": "1"}, "Invalid type: prompt"),
        ],
    )
    def test_rejects_bad_commands(self, controller, payload, message):
        with pytest.raises(InvalidRequestError) as exc_info:
            controller.execute(payload, "req-1")
        assert exc_info.value.message.startswith(message)
        assert exc_info.value.fix


class TestAuthorize:
    def test_open_when_no_key(self, controller):
        assert controller.is_open
        controller.authorize(None)

    def test_matching_key(self, cache):
        InvalidationController(cache, admin_api_key="s3cret").authorize("s3cret")

    @pytest.mark.parametrize("provided", [None, "", "wrong"])
    def test_rejects_wrong_key(self, cache, provided):
        with pytest.raises(UnauthorizedError):
            InvalidationController(cache, admin_api_key="s3cret").authorize(provided)
