#!/usr/bin/env python3
"""
Sync SDK usage examples for content-delivery.

Demonstrates a full initial sync, incremental syncs with a stored sync
token, filtered syncs, and resuming an interrupted sync.

Set CONTENT_DELIVERY_API_KEY, CONTENT_DELIVERY_DELIVERY_TOKEN and
CONTENT_DELIVERY_ENVIRONMENT before running.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from content_delivery import DeliveryError, PublishType, Stack, TransportError

TOKEN_FILE = Path(".sync_token")


async def initial_sync(stack: Stack):
    """Full sync of everything published in the environment."""
    print("=== Initial Sync ===")

    def show_page(page):
        print(f"  page: {len(page.items)} item(s), more={page.has_more}")

    try:
        result = await stack.sync(on_page=show_page)
        print(f"✓ {len(result.items)} item(s) in {result.page_count} page(s)")
        TOKEN_FILE.write_text(result.sync_token)
        print(f"✓ Sync token saved to {TOKEN_FILE}")
    except DeliveryError as e:
        print(f"❌ Sync failed ({e.kind.value}): {e}")


async def incremental_sync(stack: Stack):
    """Fetch only what changed since the stored sync token."""
    print("\n=== Incremental Sync ===")

    if not TOKEN_FILE.exists():
        print("⚠️  No stored sync token, run the initial sync first")
        return

    result = await stack.sync_token(TOKEN_FILE.read_text().strip())
    for item in result.items:
        print(f"  {item.get('type')}: {item.get('data', {}).get('uid')}")
    TOKEN_FILE.write_text(result.sync_token)
    print(f"✓ {len(result.items)} change(s)")


async def filtered_sync(stack: Stack):
    """Initial sync restricted to recent blog entries in one locale."""
    print("\n=== Filtered Sync ===")

    week_ago = datetime.now(timezone.utc) - timedelta(days=7)
    result = await stack.sync_with(
        content_type="blog",
        locale="en-us",
        from_date=week_ago,
        publish_type=PublishType.ENTRY_PUBLISHED,
    )
    print(json.dumps([item.get("data", {}).get("uid") for item in result.items]))


async def resumable_sync(stack: Stack):
    """Keep the last pagination token so an interrupted sync can resume."""
    print("\n=== Resumable Sync ===")

    last_token = None

    def remember(page):
        nonlocal last_token
        if page.pagination_token:
            last_token = page.pagination_token

    try:
        await stack.sync(on_page=remember)
    except TransportError as e:
        print(f"❌ Interrupted: {e}")
        if last_token:
            print("  resuming from last pagination token...")
            result = await stack.sync_pagination_token(last_token)
            print(f"✓ Resumed, sync token: {result.sync_token}")


async def main():
    async with Stack.from_settings() as stack:
        await initial_sync(stack)
        await incremental_sync(stack)
        await filtered_sync(stack)
        await resumable_sync(stack)


if __name__ == "__main__":
    asyncio.run(main())
