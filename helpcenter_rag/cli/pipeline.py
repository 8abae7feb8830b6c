"""CLI commands for the scrape and embed pipeline."""

import asyncio
import json
from typing import List, Optional

import click

from ..pipelines.orchestrator import PipelineOrchestrator


def _split_urls(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [url.strip() for url in value.split(",") if url.strip()]


@click.group()
def pipeline():
    """Data pipeline commands for scraping and embedding."""
    pass


@pipeline.command("scrape-page")
@click.option("--index-url", required=True, help="Help-center index page to scrape")
@click.option("--base-url", required=True, help="Base URL used to resolve relative links")
@click.option("--output-dir", default=None, help="Directory for Markdown articles")
def scrape_page(index_url: str, base_url: str, output_dir: Optional[str]):
    """Scrape every article linked from a single index page."""
    click.echo(f"🔍 Scraping index page: {index_url}")

    async def run_scrape_page():
        orchestrator = PipelineOrchestrator(output_dir)
        try:
            result = await orchestrator.run_scrape_page(index_url, base_url)
        except Exception as e:
            click.echo(f"❌ Scraping failed: {e}")
            raise

        click.echo(f"✅ Processed {result['processed']} articles")
        for filename in result["files"]:
            click.echo(f"   📄 {filename}")
        return result

    return asyncio.run(run_scrape_page())


@pipeline.command()
@click.option("--index-urls", help="Comma-separated index pages (defaults to INDEX_URLS)")
@click.option("--output-dir", default=None, help="Directory for Markdown articles")
def scrape(index_urls: Optional[str], output_dir: Optional[str]):
    """Scrape many index pages, at most two at a time."""
    click.echo("🔍 Starting scraping pipeline...")

    async def run_scraping():
        orchestrator = PipelineOrchestrator(output_dir)
        try:
            results = await orchestrator.run_scraping_pipeline(_split_urls(index_urls))
        except Exception as e:
            click.echo(f"❌ Scraping failed: {e}")
            raise

        click.echo("✅ Scraping completed!")
        click.echo(f"   Total articles: {results['total_processed']}")
        for page in results["pages"]:
            if page.get("error"):
                click.echo(f"   ❌ {page['index_url']}: {page['error']}")
            else:
                click.echo(f"   ✅ {page['index_url']}: {page['processed']} articles")
        return results

    return asyncio.run(run_scraping())


@pipeline.command()
@click.option("--output-dir", default=None, help="Directory holding the Markdown articles")
def embed(output_dir: Optional[str]):
    """Rebuild the vector index from every Markdown file in the output directory."""
    click.echo("📥 Starting embedding pipeline...")

    async def run_embedding():
        orchestrator = PipelineOrchestrator(output_dir)
        try:
            results = await orchestrator.run_embed_pipeline()
        except Exception as e:
            click.echo(f"❌ Embedding failed: {e}")
            raise

        click.echo("✅ Embedding completed!")
        click.echo(f"   Index: {results['index_name']}")
        click.echo(f"   Files processed: {results['files_processed']}")
        click.echo(f"   Chunks created: {results['total_chunks']}")
        click.echo(f"   Chunks embedded: {results['total_embedded']}")
        return results

    return asyncio.run(run_embedding())


@pipeline.command()
@click.option("--index-urls", help="Comma-separated index pages (defaults to INDEX_URLS)")
@click.option("--output-dir", default=None, help="Directory for Markdown articles")
def full(index_urls: Optional[str], output_dir: Optional[str]):
    """Run the complete pipeline: scraping + embedding."""
    click.echo("🚀 Starting full pipeline (scraping + embedding)...")

    async def run_full_pipeline():
        orchestrator = PipelineOrchestrator(output_dir)
        try:
            results = await orchestrator.run_full_pipeline(_split_urls(index_urls))
        except Exception as e:
            click.echo(f"❌ Full pipeline failed: {e}")
            raise

        click.echo("✅ Full pipeline completed!")
        click.echo(f"   📥 Scraping: {results['total_processed']} articles")
        click.echo(
            f"   🔢 Embedding: {results['total_embedded']} of {results['total_chunks']} chunks"
        )
        return results

    return asyncio.run(run_full_pipeline())


@pipeline.command()
@click.option("--output-dir", default=None, help="Directory holding the Markdown articles")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def status(output_dir: Optional[str], as_json: bool):
    """Show the article directory and vector index state."""

    async def get_status():
        orchestrator = PipelineOrchestrator(output_dir)
        result = await orchestrator.get_pipeline_status()

        if as_json:
            click.echo(json.dumps(result, indent=2))
            return result

        click.echo("📊 Pipeline status")
        click.echo(f"   Output directory: {result['output_dir']}")
        if result["output_dir_exists"]:
            click.echo(f"   Markdown files: {result['markdown_files']}")
        else:
            click.echo("   ⚠️  Output directory does not exist yet")

        index_state = result["index"]
        if "error" in index_state:
            click.echo(f"   ❌ Index {result['index_name']}: {index_state['error']}")
        elif index_state["exists"]:
            click.echo(f"   ✅ Index {result['index_name']}: {index_state['num_docs']} chunks")
        else:
            click.echo(f"   ❌ Index {result['index_name']} does not exist")
        return result

    return asyncio.run(get_status())
