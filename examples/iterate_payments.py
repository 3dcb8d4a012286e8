#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import os

from lazyhal.client import create_client


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Iterate a paginated HAL resource")
    p.add_argument("resource", nargs="?", default="payments")
    p.add_argument("take", nargs="?", type=int, default=10)
    p.add_argument("--endpoint", default=os.environ.get("LAZYHAL_API_ENDPOINT", "https://api.mollie.com/v2/"))
    p.add_argument("--status", default=None, help="Only show items with this status")
    p.add_argument("--per-minute", type=float, default=None, help="Throttle iteration")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    api_key = os.environ["LAZYHAL_API_KEY"]

    async with create_client(
        api_endpoint=args.endpoint,
        api_key=api_key,
        version_strings=["LazyHalExample/0.1.0"],
    ) as client:
        items = client.resource(args.resource).iterate(values_per_minute=args.per_minute)
        if args.status:
            items = items.filter(lambda item: item.get("status") == args.status)

        print("=" * 65)
        print(f"Resource : {args.resource}")
        print(f"Take     : {args.take}")
        print("=" * 65)
        async for item in items.take(args.take):
            print(f"{item.get('id', '?'):20} | {item.get('status', '-'):12} | {item.get('createdAt', '')}")
        print("=" * 65)


if __name__ == "__main__":
    asyncio.run(main())
