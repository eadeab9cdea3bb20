"""run external commands without blocking on their output pipes."""

import logging
import subprocess
import threading
import time
from typing import Callable, IO, List, Optional, Sequence

from ..domain.errors import ShellCommandError

logger = logging.getLogger(__name__)

LOG_INTERVAL = 5.0


class ShellRunner:
    """
    runs commands as literal argument vectors.

    stdout and stderr are drained on their own threads so a chatty child
    (wget, tar -v) never stalls on a full pipe. only one line per
    log_interval seconds per stream is logged.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        log_interval: float = LOG_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        args:
            timeout: seconds to wait for the command, None waits forever
            log_interval: minimum seconds between two logged output lines
            clock: monotonic time source
        """
        self.timeout = timeout
        self.log_interval = log_interval
        self.clock = clock

    def run(self, command: Sequence[str]) -> None:
        """run a command, raising ShellCommandError unless it exits with 0."""
        command = [str(arg) for arg in command]
        joined = " ".join(command)
        logger.info(f"Starting shell commands: {joined}")

        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise ShellCommandError(command, reason=str(e)) from e

        with process:
            drains = [
                threading.Thread(target=self.drain, args=(process.stdout, "stdout"), daemon=True),
                threading.Thread(target=self.drain, args=(process.stderr, "stderr"), daemon=True),
            ]
            for thread in drains:
                thread.start()

            try:
                returncode = process.wait(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
                raise ShellCommandError(command, reason=f"timed out after {self.timeout}s")
            finally:
                for thread in drains:
                    thread.join()

        if returncode != 0:
            raise ShellCommandError(command, returncode=returncode)
        logger.info(f"Complete shell commands: {joined}")

    def drain(self, stream: IO[str], name: str = "output") -> int:
        """read a stream until EOF, logging at most one line per interval. returns lines read."""
        count = 0
        last_logged = self.clock()
        try:
            for line in stream:
                count += 1
                now = self.clock()
                if now - last_logged > self.log_interval:
                    logger.info(f"[{name}] {line.rstrip()}")
                    last_logged = now
        except (OSError, ValueError) as e:
            logger.warning(f"Fail to print shell output: {e}")
        return count


def run_commands(runner: ShellRunner, commands: List[Sequence[str]]) -> None:
    """run commands in order, stopping at the first failure."""
    for command in commands:
        runner.run(command)
