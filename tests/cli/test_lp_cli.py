"""
Operator CLI tests (scripts/lp_cli.py) against a throwaway SQLite file.
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from lp_kernel.db.engine import reset_engine
from lp_kernel.logging_config import configure_logging, reset_logging
from scripts.lp_cli import main


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'lp.db'}"
    assert main(["--db-url", url, "init-db"]) == 0
    yield url
    reset_engine()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _run(capsys, *argv) -> tuple[int, dict | None, str]:
    capsys.readouterr()
    code = main(list(argv))
    captured = capsys.readouterr()
    document = json.loads(captured.out) if captured.out.strip() else None
    return code, document, captured.err


def _error(err: str) -> dict:
    return json.loads(err.strip().splitlines()[-1])


class TestHistoryCommand:

    def test_empty_subject(self, capsys, db_url):
        code, document, _ = _run(capsys, "--db-url", db_url, "history", "nobody")

        assert code == 0
        assert document["subjectId"] == "nobody"
        assert document["rangeStart"] == "N/A"
        assert document["history"] == []
        assert document["pointCount"] == 0
        assert document["currentBalance"] == "0.00000000"

    def test_after_mint_and_burn(self, capsys, db_url):
        _, minted, _ = _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "4", "--amount", "100")
        token_id = minted["token"]["tokenId"]
        _run(capsys, "--db-url", db_url, "burn", "user-1", "--token-id", token_id, "--amount", "25")

        end = (datetime.now(timezone.utc) + timedelta(days=8)).strftime("%Y-%m-%dT%H:%M:%SZ")

        code, document, _ = _run(
            capsys, "--db-url", db_url, "history", "user-1", "--interval", "weekly", "--end-date", end
        )

        assert code == 0
        assert document["granularity"] == "weekly"
        assert document["pointCount"] == len(document["history"]) >= 1
        assert document["history"][-1]["balance"] == "75.00000000"
        assert document["currentBalance"] == "75.00000000"

    def test_inverted_range(self, capsys, db_url):
        code, document, err = _run(
            capsys,
            "--db-url", db_url,
            "history", "user-1",
            "--start-date", "2025-02-01T00:00:00Z",
            "--end-date", "2025-01-01T00:00:00Z",
        )

        assert code == 2
        assert document is None
        assert _error(err)["error"] == "INVALID_RANGE"

    def test_unknown_interval(self, capsys, db_url):
        code, _, err = _run(capsys, "--db-url", db_url, "history", "user-1", "--interval", "hourly")

        assert code == 2
        assert _error(err)["error"] == "UNKNOWN_GRANULARITY"


class TestTokenCommands:

    def test_tokens_listing(self, capsys, db_url):
        _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "1", "--amount", "1.5")
        _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "2", "--amount", "2")

        code, document, _ = _run(capsys, "--db-url", db_url, "tokens", "user-1")

        assert code == 0
        assert [t["poolId"] for t in document["tokens"]] == [1, 2]
        assert document["currentBalance"] == "3.50000000"

    def test_full_burn(self, capsys, db_url):
        _, minted, _ = _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "1", "--amount", "10")

        code, document, _ = _run(
            capsys, "--db-url", db_url, "burn", "user-1",
            "--token-id", minted["token"]["tokenId"], "--amount", "10",
        )

        assert code == 0
        assert document["fullyBurned"] is True
        assert document["remaining"] == "0.00000000"

    def test_burn_unknown_token(self, capsys, db_url):
        code, _, err = _run(capsys, "--db-url", db_url, "burn", "user-1", "--token-id", "nope", "--amount", "1")

        assert code == 2
        assert _error(err) == {"error": "TOKEN_NOT_FOUND", "message": "Token not found: nope"}

    def test_invalid_mint_amount(self, capsys, db_url):
        code, _, err = _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "1", "--amount", "-3")

        assert code == 2
        assert _error(err)["error"] == "INVALID_AMOUNT"


class TestEventsCommand:

    def test_paginated_newest_first(self, capsys, db_url):
        for amount in ("1", "2", "3"):
            _run(capsys, "--db-url", db_url, "mint", "user-1", "--pool-id", "1", "--amount", amount)

        code, document, _ = _run(capsys, "--db-url", db_url, "events", "--kind", "mint", "--limit", "2")

        assert code == 0
        assert document["total"] == 3
        assert document["totalPages"] == 2
        assert len(document["items"]) == 2

    def test_invalid_page(self, capsys, db_url):
        code, _, err = _run(capsys, "--db-url", db_url, "events", "--page", "0")

        assert code == 2
        assert _error(err)["error"] == "INVALID_PAGINATION"


class TestConfiguration:

    def test_bad_config_file(self, capsys, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("version: 1\n")

        code = main(["--config", str(path), "--db-url", "sqlite://", "init-db"])

        assert code == 1
        assert "Invalid configuration" in capsys.readouterr().err
