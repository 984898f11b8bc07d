#!/usr/bin/env python
"""Example: a session inside a throwaway Docker container reached on a port.

Usage::

    SSH_PORT=2222 python examples/docker_session.py

Needs ``docker`` and an ed25519 key in ``~/.ssh`` (one is generated if
missing). ``SESSH_BIN`` may point at a sessh executable that is not on
``PATH``. With ``OTEL_EXPORTER_OTLP_ENDPOINT`` set, spans are exported.
"""

from __future__ import annotations

import os
import pathlib
import shutil
import subprocess
import sys
import time

from sessh import SesshClient
from sessh.otel import configure_tracing

IMAGE = "ubuntu:22.04"
ALIAS = "docker-test"

CONTAINER_SCRIPT = """
apt-get update -qq && \\
apt-get install -y -qq openssh-server tmux && \\
mkdir -p /var/run/sshd /root/.ssh && \\
echo "$SSH_PUBKEY" > /root/.ssh/authorized_keys && \\
chmod 700 /root/.ssh && chmod 600 /root/.ssh/authorized_keys && \\
/usr/sbin/sshd -D
"""


def ensure_key() -> pathlib.Path:
    """Return the private key path, generating a key pair if needed."""
    key = pathlib.Path.home() / ".ssh" / "id_ed25519"
    if not key.exists():
        print("Generating SSH key...")
        key.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        subprocess.run(
            ["ssh-keygen", "-t", "ed25519", "-f", str(key), "-N", "", "-q"],
            check=True,
        )
    return key


def start_container(name: str, port: int, pubkey: str) -> None:
    """Run an Ubuntu container with sshd published on *port*."""
    subprocess.run(
        [
            "docker", "run", "-d", "--name", name,
            "-p", f"{port}:22",
            "-e", f"SSH_PUBKEY={pubkey}",
            IMAGE, "bash", "-c", CONTAINER_SCRIPT,
        ],
        check=True,
        capture_output=True,
    )


def wait_for_ssh(port: int, key: pathlib.Path, attempts: int = 30) -> None:
    """Poll until sshd in the container accepts the key."""
    for _ in range(attempts):
        probe = subprocess.run(
            [
                "ssh", "-o", "ConnectTimeout=2", "-o", "StrictHostKeyChecking=no",
                "-i", str(key), "-p", str(port), "root@localhost", "echo", "ready",
            ],
            capture_output=True,
        )
        if probe.returncode == 0:
            return
        time.sleep(2)
    raise TimeoutError(f"sshd on port {port} did not come up")


def run_session(client: SesshClient) -> None:
    """Open the session, run commands, print logs and status, close."""
    print("Opening sessh session...")
    with client:
        print("Running commands...")
        client.run("echo 'Hello from Docker container!'")
        client.run("which tmux")
        client.run("cd /tmp && pwd && echo 'State persisted across commands!'")

        print()
        print("=== Session Logs ===")
        print(client.logs(50).output or "")

        print()
        print("=== Session Status ===")
        status = client.status()
        print(f"Master: {status.master}, Session: {status.session}")


def main() -> None:
    """Start the container, drive a session in it, then remove it."""
    if shutil.which("docker") is None:
        sys.exit("Error: docker is required but not installed.")
    if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        configure_tracing("sessh-docker-example")

    port = int(os.environ.get("SSH_PORT", "2222"))
    name = f"sessh-test-{int(time.time())}"
    key = ensure_key()
    pubkey = key.with_suffix(".pub").read_text(encoding="utf-8").strip()

    print("=== Docker Sessh Example ===")
    print(f"Container: {name}")
    print()

    try:
        print("Starting Docker container with SSH server...")
        start_container(name, port, pubkey)
        print("Waiting for SSH server to be ready...")
        wait_for_ssh(port, key)

        run_session(
            SesshClient(
                ALIAS,
                "root@localhost",
                port,
                identity=str(key),
                sessh_bin=os.environ.get("SESSH_BIN"),
            ),
        )
        print()
        print("Example completed successfully!")
    finally:
        print("Cleaning up...")
        subprocess.run(["docker", "rm", "-f", name], capture_output=True)


if __name__ == "__main__":
    main()
