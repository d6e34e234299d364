"""Parser for UCI ``info`` lines.

Engines stream progress as whitespace-separated keyword/value lists:

    info depth 16 seldepth 22 multipv 1 score cp 34 nodes 11111 pv e2e4 e7e5

The scanner below walks the tokens with a small keyword table. Each known
keyword consumes a fixed number of value tokens; unknown tokens are skipped
one at a time so that engine-specific extensions never break parsing.
``pv`` and ``string`` swallow the rest of the line.
"""

from collections.abc import Callable

from chessprep.engine.types import InfoLine

INFO_PREFIX = "info "


def _unsigned(token: str) -> int | None:
    try:
        value = int(token)
    except ValueError:
        return None
    return value if value >= 0 else None


def _signed(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def _set_depth(info: InfoLine, values: list[str]) -> None:
    value = _unsigned(values[0])
    if value is not None:
        info.depth = value


def _set_seldepth(info: InfoLine, values: list[str]) -> None:
    info.seldepth = _unsigned(values[0])


def _set_multipv(info: InfoLine, values: list[str]) -> None:
    value = _unsigned(values[0])
    if value is not None:
        info.multipv = value


def _set_nodes(info: InfoLine, values: list[str]) -> None:
    info.nodes = _unsigned(values[0])


def _set_nps(info: InfoLine, values: list[str]) -> None:
    info.nps = _unsigned(values[0])


def _set_time(info: InfoLine, values: list[str]) -> None:
    info.time_ms = _unsigned(values[0])


def _set_score(info: InfoLine, values: list[str]) -> None:
    kind, raw = values
    if kind == "cp":
        info.score_cp = _signed(raw)
    elif kind == "mate":
        info.score_mate = _signed(raw)


# keyword -> (number of value tokens, handler)
_KEYWORDS: dict[str, tuple[int, Callable[[InfoLine, list[str]], None]]] = {
    "depth": (1, _set_depth),
    "seldepth": (1, _set_seldepth),
    "multipv": (1, _set_multipv),
    "nodes": (1, _set_nodes),
    "nps": (1, _set_nps),
    "time": (1, _set_time),
    "score": (2, _set_score),
}

# Keywords after which the remainder of the line is a single value
_PV_KEYWORD = "pv"
_STRING_KEYWORD = "string"


def parse_info_line(line: str) -> InfoLine | None:
    """Parse one line of engine output.

    Args:
        line: A line of engine output with surrounding whitespace stripped.

    Returns:
        The extracted InfoLine, or None if the line is not an ``info`` line
        or carries no depth, score or principal variation.
    """
    if not line.startswith(INFO_PREFIX):
        return None

    tokens = line.split()
    info = InfoLine()

    index = 1
    while index < len(tokens):
        token = tokens[index]

        if token == _PV_KEYWORD:
            info.pv = tokens[index + 1 :]
            break
        if token == _STRING_KEYWORD:
            break

        entry = _KEYWORDS.get(token)
        if entry is None:
            index += 1
            continue

        arity, handler = entry
        values = tokens[index + 1 : index + 1 + arity]
        if len(values) == arity:
            handler(info, values)
        index += 1 + arity

    if info.is_empty:
        return None
    return info
