"""Tests for the `index` and `query` CLI commands and the root group."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from helpcenter_rag.cli.index import index
from helpcenter_rag.cli.main import main
from helpcenter_rag.cli.query import query


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.list_indexes = AsyncMock(return_value=["helpcenter_docs"])
    store.index_info = AsyncMock(
        return_value={"name": "helpcenter_docs", "exists": True, "num_docs": 42}
    )
    store.close = AsyncMock()
    with patch("helpcenter_rag.core.vector_store.VectorStore", return_value=store):
        yield store


class TestMainCLI:
    def test_lists_subcommands(self, cli_runner):
        result = cli_runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("pipeline", "index", "query"):
            assert command in result.output

    def test_unknown_command(self, cli_runner):
        result = cli_runner.invoke(main, ["nope"])
        assert result.exit_code != 0


class TestIndexCLI:
    def test_list_displays_indices(self, cli_runner, mock_store):
        result = cli_runner.invoke(index, ["list"])

        assert result.exit_code == 0
        assert "helpcenter_docs" in result.output
        assert "42" in result.output
        mock_store.close.assert_awaited_once()

    def test_list_json(self, cli_runner, mock_store):
        result = cli_runner.invoke(index, ["list", "--json"])

        assert result.exit_code == 0
        assert '"num_docs": 42' in result.output

    def test_recreate_aborts_without_confirmation(self, cli_runner, mock_store):
        with patch(
            "helpcenter_rag.core.vector_store.recreate_docs_index", new_callable=AsyncMock
        ) as mock_recreate:
            result = cli_runner.invoke(index, ["recreate"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        mock_recreate.assert_not_awaited()

    def test_recreate_with_yes(self, cli_runner, mock_store):
        with patch(
            "helpcenter_rag.core.vector_store.recreate_docs_index", new_callable=AsyncMock
        ) as mock_recreate:
            result = cli_runner.invoke(index, ["recreate", "-y"])

        assert result.exit_code == 0
        mock_recreate.assert_awaited_once_with(mock_store)
        assert "Recreated index" in result.output


class TestQueryCLI:
    def test_search_table(self, cli_runner):
        payload = {
            "query": "změna hesla",
            "index_name": "helpcenter_docs",
            "timestamp": "2024-05-01T10:00:00+00:00",
            "results_count": 1,
            "results": [
                {
                    "title": "Heslo",
                    "source": "https://x/1",
                    "section": "Účet",
                    "text": "Postup",
                    "score": 0.91234,
                }
            ],
        }
        with patch(
            "helpcenter_rag.cli.query.search_docs_helper",
            new_callable=AsyncMock,
            return_value=payload,
        ) as mock_search:
            result = cli_runner.invoke(query, ["search", "změna", "hesla", "--limit", "3"])

        assert result.exit_code == 0
        mock_search.assert_awaited_once_with("změna hesla", limit=3, index_name=None)
        assert "Heslo" in result.output
        assert "0.912" in result.output

    def test_search_without_results(self, cli_runner):
        payload = {"query": "x", "index_name": "d", "timestamp": "", "results_count": 0, "results": []}
        with patch(
            "helpcenter_rag.cli.query.search_docs_helper",
            new_callable=AsyncMock,
            return_value=payload,
        ):
            result = cli_runner.invoke(query, ["search", "x"])

        assert result.exit_code == 0
        assert "No results found" in result.output
