"""Documentation command implementations"""

from typing import Optional

import click

from serviceagent.docs import DocumentationCatalog


@click.command()
@click.argument("query")
@click.option("--docs", "docs_path", help="Path to a documentation YAML file")
def search(query: str, docs_path: Optional[str]):
    """Search documentation sections for QUERY"""
    try:
        catalog = DocumentationCatalog().initialize(docs_path)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))

    results = catalog.search(query)
    if not results:
        click.echo(f"No documentation found for '{query}'")
        return

    for section in results:
        click.echo(f"{section.title} ({section.id})")
        click.echo(f"  {section.content}")
        for subsection in section.subsections:
            click.echo(f"  - {subsection.title}")
