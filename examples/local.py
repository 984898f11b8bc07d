#!/usr/bin/env python
"""Example: drive a persistent session on localhost or a local VM.

Usage::

    python examples/local.py [host]

``SESSH_BIN`` may point at a sessh executable that is not on ``PATH``.
"""

from __future__ import annotations

import getpass
import os
import sys

from sessh import SesshClient


def main() -> None:
    """Open a session, run a few commands, print logs and status."""
    host = sys.argv[1] if len(sys.argv) > 1 else "localhost"
    user = getpass.getuser()

    print("=== Local Sessh Example ===")
    print(f"Host: {user}@{host}")
    print()

    client = SesshClient(
        "local-test",
        f"{user}@{host}",
        sessh_bin=os.environ.get("SESSH_BIN"),
    )

    print("Opening sessh session...")
    with client:
        print("Running commands...")
        client.run("echo 'Hello from sessh!'")
        client.run("pwd")
        client.run("whoami")
        client.run("cd /tmp && pwd && echo 'State persisted!'")

        print()
        print("=== Session Logs ===")
        logs = client.logs(50)
        print(logs.output or "")

        print()
        print("=== Session Status ===")
        status = client.status()
        print(f"Master: {status.master}, Session: {status.session}")

    print()
    print("Example completed successfully!")


if __name__ == "__main__":
    main()
