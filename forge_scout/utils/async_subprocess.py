"""Non-blocking invocation of the hosting CLIs (gh, glab, az, tea).

Each adapter's CLI tier goes through :func:`run_command`. Standard input is
closed, so a tool that stops to ask for credentials fails immediately
instead of hanging the event loop, and a timeout kills the child.

Example:
    >>> from forge_scout.utils.async_subprocess import run_command
    >>> out, err, code = await run_command("gh", "auth", "status", check=False, timeout=10)
"""

import asyncio
import subprocess
from pathlib import Path


async def run_command(
    *args: str,
    cwd: Path | str | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> tuple[str, str, int]:
    """Execute ``args`` directly (no shell) and collect its output.

    Args:
        *args: Executable name followed by its arguments.
        cwd: Directory to run in; the caller's cwd when omitted.
        check: Raise on a non-zero exit status.
        timeout: Seconds before the child is killed. ``None`` waits forever.

    Returns:
        ``(stdout, stderr, exit_code)``, both streams decoded as UTF-8 with
        undecodable bytes replaced.

    Raises:
        subprocess.CalledProcessError: ``check`` is set and the exit status
            is non-zero.
        TimeoutError: The deadline passed; the child has been reaped.
        FileNotFoundError: The executable is not on PATH.
        PermissionError: The executable is not runnable.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        raw_out, raw_err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        raise

    out = (raw_out or b"").decode("utf-8", errors="replace")
    err = (raw_err or b"").decode("utf-8", errors="replace")
    code = proc.returncode or 0

    if check and code != 0:
        raise subprocess.CalledProcessError(code, args, out, err)

    return out, err, code
