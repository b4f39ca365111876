"""Tests for the HTTP API: provider configuration, MOCK_MODE and DEBUG."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from conftest import FIXTURES_DIR

SAMPLE_SRT = (FIXTURES_DIR / "sample.srt").read_bytes()


@pytest.fixture
def _clean_env(monkeypatch):
    """Default provider (wordlist) with the bundled word list."""
    for name in ("MOCK_MODE", "DEBUG", "COMMONNESS_PROVIDER", "WORDLIST_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def _mock_mode(monkeypatch):
    monkeypatch.setenv("MOCK_MODE", "1")
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def _debug_mode(monkeypatch):
    monkeypatch.setenv("MOCK_MODE", "1")
    monkeypatch.setenv("DEBUG", "1")


def _client():
    # Re-import to pick up env changes
    import importlib
    import main as main_mod
    importlib.reload(main_mod)
    return TestClient(main_mod.app)


def _upload(client, name="sample.srt", content=SAMPLE_SRT):
    return client.post("/sequences", files={"file": (name, content, "application/x-subrip")})


class TestHealth:
    def test_health_reports_provider(self, _clean_env):
        resp = _client().get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["mode"] == "real"
        assert body["commonness_provider"] == "wordlist"
        assert body["has_wordlist"] is True

    def test_health_in_mock_mode(self, _mock_mode):
        body = _client().get("/health").json()
        assert body["mode"] == "mock"
        assert body["mock_mode"] is True


class TestSequencesEndpoint:
    def test_returns_sequences_with_word_list(self, _clean_env):
        resp = _upload(_client())
        assert resp.status_code == 200
        body = resp.json()
        assert body["mode"] == "real"
        assert body["debug"] is None
        assert len(body["sequences"]) == 1

        seq = body["sequences"][0]
        assert seq["keyword"] == "pickle"
        assert len(seq["triplets"]) == 3
        for triplet in seq["triplets"]:
            for key in ("frame1", "frame2", "frame3", "span", "keyword"):
                assert key in triplet
            assert triplet["frame1"]["start"] < triplet["frame3"]["end"]

    def test_works_in_mock_mode(self, _mock_mode):
        resp = _upload(_client())
        assert resp.status_code == 200
        body = resp.json()
        assert body["mode"] == "mock"
        assert [s["keyword"] for s in body["sequences"]] == ["pickle"]

    def test_no_sequences_is_not_an_error(self, _mock_mode):
        content = b"1\n00:00:00,000 --> 00:00:01,000\nHello.\n"
        resp = _upload(_client(), content=content)
        assert resp.status_code == 200
        assert resp.json()["sequences"] == []

    def test_rejects_other_extensions(self, _mock_mode):
        resp = _upload(_client(), name="notes.txt")
        assert resp.status_code == 400
        assert ".srt" in resp.json()["detail"]

    def test_rejects_empty_file(self, _mock_mode):
        resp = _upload(_client(), content=b"")
        assert resp.status_code == 400

    def test_rejects_non_utf8(self, _mock_mode):
        resp = _upload(_client(), content=b"\xff\xfe\x00bad")
        assert resp.status_code == 400
        assert "UTF-8" in resp.json()["detail"]


class TestProviderConfig:
    def test_missing_word_list_returns_501(self, _clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("WORDLIST_PATH", str(tmp_path / "missing.txt"))
        resp = _upload(_client())
        assert resp.status_code == 501
        assert "WORDLIST_PATH" in resp.json()["detail"]

    def test_unknown_provider_returns_501(self, _clean_env, monkeypatch):
        monkeypatch.setenv("COMMONNESS_PROVIDER", "thesaurus")
        resp = _upload(_client())
        assert resp.status_code == 501
        assert "COMMONNESS_PROVIDER" in resp.json()["detail"]

    def test_custom_word_list(self, _clean_env, monkeypatch, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("PICKLE;12\n", encoding="utf-8")
        monkeypatch.setenv("WORDLIST_PATH", str(path))
        resp = _upload(_client())
        assert resp.status_code == 200
        assert len(resp.json()["sequences"]) == 1


class TestDebugMode:
    def test_debug_included(self, _debug_mode):
        resp = _upload(_client())
        assert resp.status_code == 200
        debug = resp.json()["debug"]
        assert debug is not None
        assert debug["num_records"] == 11
        assert debug["num_first_triplets"] == 1
        assert debug["num_raw_sequences"] == 5

    def test_debug_absent_by_default(self, _mock_mode):
        resp = _upload(_client())
        assert resp.json()["debug"] is None


class TestOracleReuse:
    def test_word_list_oracle_shared_across_requests(self, _clean_env):
        client = _client()
        import main as main_mod

        assert _upload(client).status_code == 200
        assert _upload(client).status_code == 200

        info = main_mod._oracle_for.cache_info()
        assert (info.misses, info.hits) == (1, 1)
        oracle = main_mod._oracle_for("wordlist", str(FIXTURES_DIR / "wordlist.txt"))
        assert oracle._counts is not None
