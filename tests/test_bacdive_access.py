"""Credentials and the per-species query wrapper (no network)."""

import pytest
import requests

import bacdive_access
from bacdive_access import QueryResult, make_query, read_credentials, retrieve_species


class TestReadCredentials:

    def test_info_file(self, tmp_path):
        info = tmp_path / ".bacdive_info"
        info.write_text("someone@example.org\nsecret\n")
        assert read_credentials(str(info)) == ("someone@example.org", "secret")

    def test_info_file_too_short(self, tmp_path):
        info = tmp_path / ".bacdive_info"
        info.write_text("someone@example.org\n")
        with pytest.raises(ValueError):
            read_credentials(str(info))

    def test_environment_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BACDIVE_EMAIL", "env@example.org")
        monkeypatch.setenv("BACDIVE_PASSWORD", "pw")
        assert read_credentials(str(tmp_path / "missing")) == ("env@example.org", "pw")

    def test_no_credentials(self, tmp_path, monkeypatch):
        monkeypatch.delenv("BACDIVE_EMAIL", raising=False)
        monkeypatch.delenv("BACDIVE_PASSWORD", raising=False)
        with pytest.raises(ValueError):
            read_credentials(str(tmp_path / "missing"))


class TestStartClient:

    def test_sets_search_type(self, tmp_path, monkeypatch, fake_client_factory):
        created = {}

        def fake_ctor(email, pw):
            created["args"] = (email, pw)
            return fake_client_factory({})

        monkeypatch.setattr(bacdive_access.bacdive, "BacdiveClient", fake_ctor)
        info = tmp_path / ".bacdive_info"
        info.write_text("someone@example.org\nsecret\n")

        client = bacdive_access.start_client(str(info), searchtype="exact")
        assert created["args"] == ("someone@example.org", "secret")
        assert client.searchtype == "exact"


class TestRetrieveSpecies:

    def test_hits(self, fake_client_factory, ecoli_record):
        client = fake_client_factory({"Escherichia coli": [ecoli_record, {"other": 1}]})
        result = retrieve_species(client, "Escherichia coli", sleep=0)
        assert result.ok
        assert result.records == [ecoli_record, {"other": 1}]
        assert client.searches == ["Escherichia coli"]

    def test_no_hits(self, fake_client_factory):
        result = retrieve_species(fake_client_factory({}), "Nothing here", sleep=0)
        assert result == QueryResult.found("Nothing here", [])

    @pytest.mark.parametrize("exc", [requests.Timeout("timed out"), KeyError("results")])
    def test_errors_become_failures(self, fake_client_factory, exc):
        client = fake_client_factory({"Broken": exc})
        result = retrieve_species(client, "Broken", sleep=0)
        assert not result.ok
        assert result.records == []
        assert type(exc).__name__ in result.error

    def test_sleeps_after_each_query(self, fake_client_factory, monkeypatch):
        naps = []
        monkeypatch.setattr(bacdive_access.time, "sleep", naps.append)
        query = make_query(fake_client_factory({"Broken": requests.ConnectionError("down")}), sleep=0.1)
        query("A a")
        query("Broken")
        assert naps == [0.1, 0.1]
