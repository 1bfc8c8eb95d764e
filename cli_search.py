"""Terminal client that reuses the in-process search logic."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Iterable, List

from search_gateway.errors import SearchGatewayError
from search_gateway.models import TransformedProduct
from search_gateway.search import search_products
from search_gateway.upstream import get_upstream_client
from search_gateway.validation import validate

GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


async def perform_query(query: str, page: int = 1) -> List[TransformedProduct]:
    request = validate(query, page)
    return await search_products(get_upstream_client(), request)


def pretty_print_response(query: str, page: int, products: List[TransformedProduct]) -> None:
    print(f"Query: {query} | page: {page} | results: {len(products)}")
    for idx, item in enumerate(products, start=1):
        print(f"  {idx:02d}. {GREEN}{item.final_price:.2f}{RESET} | {item.title} | {item.description}")


def run_query(query: str, page: int) -> bool:
    try:
        products = asyncio.run(perform_query(query, page))
    except SearchGatewayError as exc:
        print(f"{RED}{exc.http_status}{RESET} {exc.message}")
        return False
    pretty_print_response(query, page, products)
    return True


def batch_mode(file_path: Path, page: int) -> bool:
    ok = True
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            ok = run_query(query, page) and ok
    return ok


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the product search gateway")
    parser.add_argument("query", nargs="?", help="Query string (3-10 characters)")
    parser.add_argument("--page", type=int, default=1, help="1-based result page")
    parser.add_argument("--batch", type=Path, help="File with queries to execute line by line")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.batch:
        return 0 if batch_mode(args.batch, args.page) else 1
    if args.query:
        return 0 if run_query(args.query, args.page) else 1
    parser.print_usage()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
