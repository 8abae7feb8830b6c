"""Tests for the `pipeline` CLI commands."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from helpcenter_rag.cli.pipeline import pipeline
from helpcenter_rag.core.errors import MissingInputError


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_orchestrator():
    orchestrator = MagicMock()
    with patch("helpcenter_rag.cli.pipeline.PipelineOrchestrator", return_value=orchestrator) as cls:
        orchestrator.cls = cls
        yield orchestrator


class TestPipelineCLI:
    def test_help_lists_commands(self, cli_runner):
        result = cli_runner.invoke(pipeline, ["--help"])

        assert result.exit_code == 0
        for command in ("scrape-page", "scrape", "embed", "full", "status"):
            assert command in result.output

    def test_scrape_page(self, cli_runner, mock_orchestrator):
        mock_orchestrator.run_scrape_page = AsyncMock(
            return_value={"processed": 2, "files": ["heslo.md", "platby.md"]}
        )

        result = cli_runner.invoke(
            pipeline,
            [
                "scrape-page",
                "--index-url",
                "https://x/support/solutions/folders/1",
                "--base-url",
                "https://x",
            ],
        )

        assert result.exit_code == 0
        assert "Processed 2 articles" in result.output
        assert "heslo.md" in result.output
        mock_orchestrator.run_scrape_page.assert_awaited_once_with(
            "https://x/support/solutions/folders/1", "https://x"
        )

    def test_scrape_page_requires_options(self, cli_runner):
        result = cli_runner.invoke(pipeline, ["scrape-page", "--index-url", "https://x/f/1"])

        assert result.exit_code != 0
        assert "--base-url" in result.output

    def test_scrape_splits_url_list(self, cli_runner, mock_orchestrator):
        mock_orchestrator.run_scraping_pipeline = AsyncMock(
            return_value={
                "total_processed": 1,
                "all_files": ["heslo.md"],
                "pages": [
                    {"index_url": "https://x/f/1", "processed": 1, "files": ["heslo.md"]},
                    {"index_url": "https://x/f/2", "processed": 0, "files": [], "error": "HTTP 500"},
                ],
            }
        )

        result = cli_runner.invoke(
            pipeline, ["scrape", "--index-urls", "https://x/f/1, https://x/f/2", "--output-dir", "out"]
        )

        assert result.exit_code == 0
        mock_orchestrator.run_scraping_pipeline.assert_awaited_once_with(
            ["https://x/f/1", "https://x/f/2"]
        )
        mock_orchestrator.cls.assert_called_once_with("out")
        assert "Total articles: 1" in result.output
        assert "HTTP 500" in result.output

    def test_embed(self, cli_runner, mock_orchestrator):
        mock_orchestrator.run_embed_pipeline = AsyncMock(
            return_value={
                "index_name": "helpcenter_docs",
                "files_processed": 3,
                "batches": 2,
                "total_chunks": 14,
                "total_embedded": 12,
            }
        )

        result = cli_runner.invoke(pipeline, ["embed"])

        assert result.exit_code == 0
        assert "Chunks created: 14" in result.output
        assert "Chunks embedded: 12" in result.output

    def test_embed_failure_is_reported(self, cli_runner, mock_orchestrator):
        mock_orchestrator.run_embed_pipeline = AsyncMock(
            side_effect=MissingInputError("No Markdown files found")
        )

        result = cli_runner.invoke(pipeline, ["embed"])

        assert result.exit_code != 0
        assert "Embedding failed: No Markdown files found" in result.output
        assert isinstance(result.exception, MissingInputError)

    def test_full(self, cli_runner, mock_orchestrator):
        mock_orchestrator.run_full_pipeline = AsyncMock(
            return_value={"total_processed": 5, "total_chunks": 20, "total_embedded": 18}
        )

        result = cli_runner.invoke(pipeline, ["full"])

        assert result.exit_code == 0
        mock_orchestrator.run_full_pipeline.assert_awaited_once_with(None)
        assert "Scraping: 5 articles" in result.output
        assert "18 of 20 chunks" in result.output

    def test_status_json(self, cli_runner, mock_orchestrator):
        mock_orchestrator.get_pipeline_status = AsyncMock(
            return_value={
                "output_dir": "output/docs",
                "output_dir_exists": True,
                "markdown_files": 4,
                "index_name": "helpcenter_docs",
                "index": {"name": "helpcenter_docs", "exists": True, "num_docs": 9},
            }
        )

        result = cli_runner.invoke(pipeline, ["status", "--json"])

        assert result.exit_code == 0
        assert '"markdown_files": 4' in result.output

    def test_status_with_index_error(self, cli_runner, mock_orchestrator):
        mock_orchestrator.get_pipeline_status = AsyncMock(
            return_value={
                "output_dir": "output/docs",
                "output_dir_exists": False,
                "markdown_files": 0,
                "index_name": "helpcenter_docs",
                "index": {"name": "helpcenter_docs", "error": "connection refused"},
            }
        )

        result = cli_runner.invoke(pipeline, ["status"])

        assert result.exit_code == 0
        assert "does not exist yet" in result.output
        assert "connection refused" in result.output
