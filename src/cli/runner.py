# src/cli/runner.py

"""Headless CLI runner built on the async aggregator."""

import json
import logging
import sys
from decimal import Decimal

from rich.console import Console
from rich.table import Table

from src.models.product import Product
from src.services.aggregator import Aggregator

logger = logging.getLogger("price_compare.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _format_price(value: Decimal | None) -> str:
    """Render a price the way the storefronts show it."""
    if value is None:
        return "—"
    text = f"{value:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout, cheapest first."""
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=60)
    table.add_column("Price", justify="right", style="green", no_wrap=True)
    table.add_column("Was", justify="right", style="dim", no_wrap=True)
    table.add_column("Market", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, p in enumerate(sorted(products, key=lambda p: p.price), 1):
        table.add_row(
            str(idx),
            p.name[:60],
            _format_price(p.price),
            _format_price(p.original_price if p.has_discount else None),
            p.market,
            p.url,
        )

    Console().print(table)


def _emit(products: list[Product], output_format: str) -> None:
    if output_format == "table":
        _print_table(products)
        return
    json.dump(
        [p.to_dict() for p in products],
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")


async def cli_search(
    term: str,
    market: str | None,
    output_format: str,
    aggregator: Aggregator | None = None,
) -> int:
    """Run a search and return an exit code (0=found, 1=nothing)."""
    agg = aggregator if aggregator is not None else Aggregator()
    try:
        if market is None:
            _err.print(
                f"[bold]Searching:[/bold] {term}  "
                f"[dim]markets={', '.join(agg.list_markets())}[/dim]"
            )
            products = await agg.search_all(term)
        else:
            known = {m.casefold() for m in agg.list_markets()}
            if market.strip().casefold() not in known:
                _err.print(f"[red]Unknown market: {market}[/red]")
                _err.print(
                    f"[dim]Available: {', '.join(agg.list_markets())}[/dim]"
                )
            _err.print(
                f"[bold]Searching:[/bold] {term}  [dim]market={market}[/dim]"
            )
            products = await agg.search_by_market(term, market)
    finally:
        await agg.close()

    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    discounted = sum(1 for p in products if p.has_discount)
    _err.print(
        f"[green]✓ {len(products)} products"
        f" ({discounted} on sale)[/green]"
    )
    _emit(products, output_format)
    return 0


def list_markets(
    output_format: str,
    aggregator: Aggregator | None = None,
) -> int:
    """Print the registered market names."""
    agg = aggregator if aggregator is not None else Aggregator()
    markets = agg.list_markets()
    if output_format == "table":
        table = Table(title="Markets", title_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Market", style="magenta")
        for idx, name in enumerate(markets, 1):
            table.add_row(str(idx), name)
        Console().print(table)
    else:
        json.dump(markets, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")
    return 0


def run_server(host: str, port: int) -> int:
    """Serve the HTTP API with uvicorn until interrupted."""
    import uvicorn

    from src.api.server import create_app

    _err.print(f"[bold]Serving API on[/bold] http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")
    return 0
