"""Index management CLI commands."""

from __future__ import annotations

import asyncio
import json as _json

import click
from rich.console import Console
from rich.table import Table


@click.group()
def index():
    """RediSearch index management commands."""
    pass


@index.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def index_list(as_json: bool):
    """List all search indices and their document counts."""

    async def _run():
        from helpcenter_rag.core.vector_store import VectorStore

        console = Console()
        store = VectorStore()
        try:
            results = []
            for name in sorted(await store.list_indexes()):
                try:
                    results.append(await store.index_info(name))
                except Exception as e:
                    results.append({"name": name, "exists": True, "error": str(e)})
        finally:
            await store.close()

        if as_json:
            print(_json.dumps(results, indent=2))
            return

        table = Table(title="RediSearch Indices")
        table.add_column("Index Name", no_wrap=True)
        table.add_column("Documents", no_wrap=True)

        for r in results:
            docs = f"Error: {r['error']}" if r.get("error") else str(r.get("num_docs", 0))
            table.add_row(r["name"], docs)

        console.print(table)

    asyncio.run(_run())


@index.command("recreate")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
def index_recreate(yes: bool):
    """Drop and recreate the documentation index.

    Useful when the schema or embedding dimension changed. WARNING: every
    indexed chunk is deleted; run ``pipeline embed`` afterwards.
    """

    async def _run():
        from helpcenter_rag.core.config import settings
        from helpcenter_rag.core.vector_store import VectorStore, recreate_docs_index

        console = Console()

        if not yes:
            console.print(
                f"[yellow]Warning:[/yellow] This will drop {settings.docs_index_name} "
                "and all indexed chunks."
            )
            if not click.confirm("Continue?"):
                console.print("Aborted.")
                return

        store = VectorStore()
        try:
            await recreate_docs_index(store)
        finally:
            await store.close()
        console.print(f"[green]✅ Recreated index {settings.docs_index_name}[/green]")

    asyncio.run(_run())
