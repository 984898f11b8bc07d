#!/usr/bin/env python
"""Example: the asyncio client, including an interactive program.

Usage::

    python examples/async_local.py [host]
"""

from __future__ import annotations

import asyncio
import getpass
import os
import sys

from sessh import AsyncSesshClient


async def main() -> None:
    """Start ``top``, read the screen, quit it with a key press."""
    host = sys.argv[1] if len(sys.argv) > 1 else "localhost"
    user = getpass.getuser()

    print("=== Async Sessh Example ===")
    async with AsyncSesshClient(
        "local-async",
        f"{user}@{host}",
        sessh_bin=os.environ.get("SESSH_BIN"),
    ) as client:
        await client.run("top")
        await asyncio.sleep(1)

        pane = await client.pane(20)
        print("=== Current Screen ===")
        print(pane.output or "")

        await client.keys("q")
        status = await client.status()
        print(f"Master: {status.master}, Session: {status.session}")

    print("Example completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
