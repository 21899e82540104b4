"""Tests for emlp CLI commands."""

import json

import pytest
from click.testing import CliRunner

from emlprovider.cli import main
from emlprovider.config import load_config

from conftest import ACCOUNT_UUID


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Create an initialized project in a temp directory."""
    monkeypatch.delenv("EML_ROOT", raising=False)
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(main, ["init"])
    assert result.exit_code == 0
    assert (tmp_path / ".eml" / "config.yaml").exists()
    return tmp_path


@pytest.fixture
def seeded(root, store, monkeypatch):
    """The conftest project (one account, seeded) as cwd."""
    monkeypatch.delenv("EML_ROOT", raising=False)
    monkeypatch.chdir(root)
    return root


class TestInit:
    def test_init(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["init"])
        assert result.exit_code == 0
        assert "Initialized" in result.output
        assert (tmp_path / ".eml" / "accounts").is_dir()
        config = (tmp_path / ".eml" / "config.yaml").read_text()
        assert "authority: eml.provider" in config

    def test_init_authority(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["init", "-A", "org.example.mail"])
        assert result.exit_code == 0
        assert load_config(tmp_path).authority == "org.example.mail"

    def test_init_already_exists(self, runner, project):
        result = runner.invoke(main, ["init"])
        assert result.exit_code == 0
        assert "Already initialized" in result.output

    def test_requires_init(self, runner, tmp_path, monkeypatch):
        monkeypatch.delenv("EML_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["account", "ls"])
        assert result.exit_code == 1


class TestAccount:
    def test_account_add(self, runner, project):
        result = runner.invoke(main, ["account", "add", "Work"])
        assert result.exit_code == 0
        assert "saved" in result.output
        config = load_config(project)
        [acct] = config.accounts.values()
        assert acct.name == "Work"
        assert (project / ".eml" / "accounts" / f"{acct.uuid}.db").exists()

    def test_account_add_with_uuid(self, runner, project):
        result = runner.invoke(main, ["a", "a", "Work", "-u", "u-1"])
        assert result.exit_code == 0
        assert "u-1" in result.output
        result = runner.invoke(main, ["account", "add", "Again", "-u", "u-1"])
        assert result.exit_code == 1

    def test_account_add_custom_database(self, runner, project):
        result = runner.invoke(main, ["account", "add", "Home", "-u", "h", "-d", "dbs/home.db"])
        assert result.exit_code == 0
        assert (project / ".eml" / "dbs" / "home.db").exists()

    def test_account_ls_empty(self, runner, project):
        result = runner.invoke(main, ["account", "ls"])
        assert result.exit_code == 0
        assert "No accounts configured" in result.output

    def test_account_ls(self, runner, project):
        runner.invoke(main, ["account", "add", "Work", "-u", "u-1"])
        result = runner.invoke(main, ["account", "ls"])
        assert result.exit_code == 0
        assert "u-1" in result.output
        assert "Work" in result.output

    def test_account_rm(self, runner, project):
        runner.invoke(main, ["account", "add", "Work", "-u", "u-1"])
        result = runner.invoke(main, ["account", "rm", "u-1", "-D"])
        assert result.exit_code == 0
        assert "removed" in result.output
        assert load_config(project).accounts == {}
        assert not (project / ".eml" / "accounts" / "u-1.db").exists()

    def test_account_rm_not_found(self, runner, project):
        result = runner.invoke(main, ["account", "rm", "nonexistent"])
        assert result.exit_code == 1


class TestQuery:
    def test_uri(self, runner, seeded):
        result = runner.invoke(main, ["uri", ACCOUNT_UUID])
        assert result.exit_code == 0
        assert result.output.strip() == f"content://eml.provider/account/{ACCOUNT_UUID}/messages"

    def test_uri_unknown_account(self, runner, seeded):
        result = runner.invoke(main, ["uri", "nope"])
        assert result.exit_code == 1

    def test_query_json(self, runner, seeded, uri):
        result = runner.invoke(main, ["query", uri, "-c", "id", "-c", "subject", "-s", "id", "-j"])
        assert result.exit_code == 0
        rows = [json.loads(line) for line in result.output.splitlines()]
        assert [r["subject"] for r in rows] == [
            "Hello from Alice",
            "Re: Hello from Alice",
            "Quarterly report",
            "Lunch?",
        ]

    def test_query_where(self, runner, seeded, uri):
        result = runner.invoke(main, ["q", uri, "-c", "subject", "-w", "folder_id = ?", "-a", "2", "-j"])
        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 2

    def test_query_table(self, runner, seeded, uri):
        result = runner.invoke(main, ["query", uri, "-c", "id", "-c", "subject"])
        assert result.exit_code == 0
        assert "_id" in result.output
        assert "4 row(s)" in result.output

    def test_query_unknown_uri(self, runner, seeded):
        result = runner.invoke(main, ["query", "content://eml.provider/nothing"])
        assert result.exit_code == 1

    def test_query_unknown_account(self, runner, seeded):
        result = runner.invoke(main, ["query", "content://eml.provider/account/nope/messages"])
        assert result.exit_code == 1

    def test_query_bad_selection(self, runner, seeded, uri):
        result = runner.invoke(main, ["query", uri, "-w", "nosuchcol = 1"])
        assert result.exit_code == 1
        assert "no such column" in result.output
        # The registry is closed, so the store can be reopened and queried again
        result = runner.invoke(main, ["query", uri, "-j"])
        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 4
