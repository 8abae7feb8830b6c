"""CLI interface for the help-center RAG pipeline."""

import importlib
import logging

import click

from helpcenter_rag.core.config import settings

# Map command names to their module:attribute for lazy import
_COMMANDS = {
    "pipeline": "helpcenter_rag.cli.pipeline:pipeline",
    "index": "helpcenter_rag.cli.index:index",
    "query": "helpcenter_rag.cli.query:query",
}


class LazyGroup(click.Group):
    """
    Lazy loading of CLI commands to avoid hard dependencies at top level.

    Scraping never needs the embedding stack, so subcommand modules are only
    imported when invoked.
    """

    def list_commands(self, ctx):
        # Keep stable ordering for help output
        return list(_COMMANDS.keys())

    def get_command(self, ctx, name):
        target = _COMMANDS.get(name)
        if not target:
            return None
        module_path, attr = target.split(":", 1)
        mod = importlib.import_module(module_path)
        return getattr(mod, attr)


@click.command(cls=LazyGroup)
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
def main(log_level):
    """Help-center scraper and RAG indexer CLI."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


if __name__ == "__main__":
    main()
