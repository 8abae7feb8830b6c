"""Query CLI commands for the documentation index."""

from __future__ import annotations

import asyncio
import json as _json

import click
from rich.console import Console
from rich.table import Table

from helpcenter_rag.core.knowledge_helpers import search_docs_helper


@click.group()
def query():
    """Query the documentation index."""
    pass


@query.command("search")
@click.argument("text", nargs=-1, required=True)
@click.option("--limit", "-l", default=5, help="Number of results to return")
@click.option("--index-name", default=None, help="Index to search (defaults to DOCS_INDEX_NAME)")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def query_search(text, limit: int, index_name, as_json: bool):
    """Find the chunks most similar to TEXT."""

    async def _run():
        result = await search_docs_helper(" ".join(text), limit=limit, index_name=index_name)

        if as_json:
            print(_json.dumps(result, indent=2, ensure_ascii=False))
            return

        console = Console()
        if not result["results"]:
            console.print("[yellow]No results found.[/yellow]")
            return

        table = Table(title=f"Results for: {result['query']}")
        table.add_column("Score", no_wrap=True)
        table.add_column("Title")
        table.add_column("Section")
        table.add_column("Source")
        for doc in result["results"]:
            table.add_row(f"{doc['score']:.3f}", doc["title"], doc["section"], doc["source"])
        console.print(table)

    asyncio.run(_run())
