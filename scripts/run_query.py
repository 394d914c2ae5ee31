"""Runs one evidence cycle from the terminal.

Usage:
    python scripts/run_query.py "capital of France"
    python scripts/run_query.py --json "rust async runtimes"
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown

from citesearch.errors import CitesearchError
from citesearch.log import setup_logging
from citesearch.pipeline.run import pipeline
from citesearch.rendering.citations import to_markdown


def run(query: str, as_json: bool) -> int:
    console = Console()
    try:
        result = asyncio.run(pipeline.answer(query))
    except CitesearchError as e:
        console.print(f"[red]{e.user_message}[/red]")
        console.print(f"[dim]{e.details}[/dim]")
        return 1

    if as_json:
        print(result.model_dump_json(by_alias=True, indent=2))
        return 0

    console.print(Markdown(to_markdown(result.rendered)))
    console.print()
    for source in result.sources:
        console.print(f"[bold][{source.id}][/bold] {source.title} [dim]({source.origin_tag})[/dim]\n    {source.url}")
    if result.rendered.unresolved:
        console.print(f"[yellow]Unresolved citations: {', '.join(result.rendered.unresolved)}[/yellow]")
    return 0


if __name__ == "__main__":
    load_dotenv()
    setup_logging()
    parser = argparse.ArgumentParser(description="Ask a question answered from cited web evidence.")
    parser.add_argument("query")
    parser.add_argument("--json", action="store_true", help="print the response contract as JSON")
    args = parser.parse_args()
    sys.exit(run(args.query, args.json))
