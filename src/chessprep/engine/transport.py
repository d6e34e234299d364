"""Line-oriented pipe transport to an engine subprocess.

The engine is started with ordinary pipes (no PTY, so no echo and no CRLF
translation). Its standard output is read through pexpect's ``fdspawn``;
commands are written straight to its standard input. Standard error is
discarded so that diagnostics can never be mistaken for protocol lines.
"""

import shutil
import subprocess
from pathlib import Path

import pexpect
from loguru import logger
from pexpect.fdpexpect import fdspawn

from chessprep.engine.errors import EngineTimeoutError, SpawnError, TransportError

# A line ends at LF (optionally preceded by CR) or at end of stream
_LINE_PATTERNS = [r"\r?\n", pexpect.EOF]


class ProcessTransport:
    """Owns an engine subprocess and exposes line-based I/O on its pipes.

    Example:
        transport = ProcessTransport.spawn("/usr/local/bin/stockfish")
        transport.write_line("uci")
        line = transport.read_line()
        transport.close()
    """

    def __init__(
        self,
        proc: subprocess.Popen,
        command: list[str],
        *,
        timeout: float | None = None,
    ) -> None:
        """Wrap an already-started child process.

        Args:
            proc: The running process, with piped stdin and stdout.
            command: The argv used to start it (for logging and errors).
            timeout: Per-read inactivity timeout in seconds. None blocks
                until data or end of stream arrives.
        """
        self._proc: subprocess.Popen | None = proc
        self._reader = fdspawn(
            proc.stdout,
            timeout=timeout,
            encoding="utf-8",
            codec_errors="replace",
        )
        self.command = command
        self.timeout = timeout
        self._eof = False

    @classmethod
    def spawn(
        cls,
        engine_path: str | Path,
        args: list[str] | None = None,
        *,
        timeout: float | None = None,
    ) -> "ProcessTransport":
        """Start the engine executable with piped input and output.

        Args:
            engine_path: Path to the engine binary, or a command name to
                look up on PATH.
            args: Extra command-line arguments for the engine.
            timeout: Per-read inactivity timeout in seconds (None = block).

        Returns:
            A transport connected to the running process.

        Raises:
            SpawnError: If the process cannot be started.
        """
        # Bare command names such as "stockfish" are looked up on PATH
        executable = shutil.which(str(engine_path)) or str(engine_path)

        command = [executable, *(args or [])]
        logger.debug(f"Starting engine process: {' '.join(command)}")

        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                bufsize=0,
            )
        except OSError as e:
            raise SpawnError(engine_path, e.strerror or str(e)) from e

        logger.debug(f"Engine process started (pid={proc.pid})")
        return cls(proc, command, timeout=timeout)

    @property
    def pid(self) -> int | None:
        """Process id of the engine, or None once closed."""
        return self._proc.pid if self._proc is not None else None

    def is_alive(self) -> bool:
        """Return True while the engine process is running."""
        if self._proc is None:
            return False
        return self._proc.poll() is None

    def _require_proc(self) -> subprocess.Popen:
        if self._proc is None:
            raise TransportError("Engine process is not running")
        return self._proc

    def write_line(self, line: str) -> None:
        """Write one newline-terminated line to the engine.

        The pipe is unbuffered, so the engine sees the line immediately.

        Raises:
            TransportError: If the pipe is closed or the write fails.
        """
        proc = self._require_proc()
        try:
            proc.stdin.write(f"{line}\n".encode("utf-8"))
        except (OSError, ValueError) as e:
            raise TransportError(f"Failed to write to engine: {e}") from e

    def read_line(self) -> str | None:
        """Read one line of engine output.

        Returns:
            The line without its terminator, or None at end of stream.

        Raises:
            EngineTimeoutError: If a read timeout is set and expires.
            TransportError: If reading from the pipe fails.
        """
        if self._eof:
            return None

        self._require_proc()
        try:
            index = self._reader.expect(_LINE_PATTERNS, timeout=self.timeout)
        except pexpect.TIMEOUT as e:
            raise EngineTimeoutError(
                f"Engine produced no output for {self.timeout} seconds"
            ) from e
        except (OSError, pexpect.ExceptionPexpect) as e:
            raise TransportError(f"Failed to read from engine: {e}") from e

        text = self._reader.before or ""
        if index == 1:
            self._eof = True
            if not text:
                logger.trace("UCI recv: <EOF>")
                return None

        logger.trace(f"UCI recv: {text}")
        return text

    def close(self, quit_command: str | None = "quit", grace_period: float = 2.0) -> None:
        """Stop the engine and reap the process.

        Sends the quit command (best effort), closes stdin, waits up to
        ``grace_period`` seconds for a clean exit, then kills the process.
        Safe to call more than once.

        Args:
            quit_command: Command asking the engine to exit, or None to skip.
            grace_period: Seconds to wait before killing the process.
        """
        proc = self._proc
        if proc is None:
            return
        self._proc = None

        if quit_command is not None:
            try:
                proc.stdin.write(f"{quit_command}\n".encode("utf-8"))
            except (OSError, ValueError) as e:
                logger.debug(f"Could not send '{quit_command}' to engine: {e}")

        try:
            proc.stdin.close()
        except OSError:
            pass

        try:
            proc.wait(timeout=grace_period)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Engine (pid={proc.pid}) did not exit within {grace_period}s, killing it"
            )
            proc.kill()
            proc.wait()

        # The reader borrows this descriptor; the file object owns it
        proc.stdout.close()
        logger.debug(f"Engine process exited (pid={proc.pid}, code={proc.returncode})")
