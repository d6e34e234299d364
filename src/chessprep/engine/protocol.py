"""UCI command helpers: sending commands and waiting for acknowledgements.

There is no framing in UCI, so waiting for a reply means reading lines until
the expected token shows up. The wait is bounded by a line count rather
than a clock; it limits how much output a misbehaving engine can make us
consume, not how long we block.
"""

from loguru import logger

from chessprep.engine.errors import ProtocolError
from chessprep.engine.transport import ProcessTransport

DEFAULT_MAX_LINES = 20_000


def send_command(transport: ProcessTransport, command: str) -> None:
    """Send a single UCI command line to the engine."""
    logger.trace(f"UCI send: {command}")
    transport.write_line(command)


def wait_for_token(
    transport: ProcessTransport,
    token: str,
    max_lines: int = DEFAULT_MAX_LINES,
) -> None:
    """Read engine output until a line equal to ``token`` arrives.

    Args:
        transport: Connected engine transport.
        token: Expected line content, compared after stripping whitespace.
        max_lines: Maximum number of lines to read before giving up.

    Raises:
        ProtocolError: If the stream ends or the bound is exhausted first.
    """
    for _ in range(max_lines):
        line = transport.read_line()
        if line is None:
            raise ProtocolError(f"engine closed output while waiting for '{token}'")
        if line.strip() == token:
            return

    raise ProtocolError(f"did not receive '{token}' from engine")


def wait_ready(transport: ProcessTransport, max_lines: int = DEFAULT_MAX_LINES) -> None:
    """Synchronise with the engine via ``isready`` / ``readyok``."""
    send_command(transport, "isready")
    wait_for_token(transport, "readyok", max_lines)


def handshake(transport: ProcessTransport, max_lines: int = DEFAULT_MAX_LINES) -> None:
    """Perform the UCI startup handshake (``uci`` / ``uciok``, then readiness)."""
    send_command(transport, "uci")
    wait_for_token(transport, "uciok", max_lines)
    wait_ready(transport, max_lines)


def format_option_value(value: object) -> str:
    """Render an option value the way UCI expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_option(transport: ProcessTransport, name: str, value: object) -> None:
    """Send ``setoption``. Callers must follow up with :func:`wait_ready`."""
    send_command(transport, f"setoption name {name} value {format_option_value(value)}")
