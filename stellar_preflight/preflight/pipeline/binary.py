"""CLI binary availability probe (``<cli> --version`` with a hard timeout)."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CliAvailability(BaseModel):
    """Outcome of probing the external CLI binary."""

    available: bool
    path: str
    version: str | None = None
    error: str | None = None
    timed_out: bool = False


def environment_with_path() -> dict[str, str]:
    """Copy the process environment with common CLI install dirs prepended to PATH."""
    env = dict(os.environ)
    home = Path.home()
    extra = [
        str(home / ".cargo" / "bin"),
        str(home / ".local" / "bin"),
        "/usr/local/bin",
        "/opt/homebrew/bin",
        "/opt/homebrew/sbin",
    ]
    current = env.get("PATH") or env.get("Path") or ""
    env["PATH"] = os.pathsep.join(p for p in [*extra, current] if p)
    return env


async def check_cli_availability(
    cli_path: str,
    timeout_s: float = 10.0,
    *,
    log: logging.Logger | None = None,
) -> CliAvailability:
    """Run ``<cli_path> --version``; a hung binary is killed after ``timeout_s``."""
    log = log or logger
    log.debug("Checking CLI availability at: %s", cli_path)

    try:
        process = await asyncio.create_subprocess_exec(
            cli_path,
            "--version",
            env=environment_with_path(),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        log.warning("CLI not found at '%s': %s", cli_path, exc)
        return CliAvailability(available=False, path=cli_path, error=str(exc))

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
    except asyncio.TimeoutError:
        with suppress(ProcessLookupError):
            process.kill()
        await process.communicate()
        log.warning("CLI at '%s' did not answer within %.1fs", cli_path, timeout_s)
        return CliAvailability(
            available=False,
            path=cli_path,
            error=f"timed out after {timeout_s:g}s",
            timed_out=True,
        )

    if process.returncode != 0:
        detail = stderr.decode(errors="replace").strip() or f"exit code {process.returncode}"
        log.warning("CLI at '%s' failed: %s", cli_path, detail)
        return CliAvailability(available=False, path=cli_path, error=detail)

    version = stdout.decode(errors="replace").strip()
    log.debug("CLI found: %s", version)
    return CliAvailability(available=True, path=cli_path, version=version)
