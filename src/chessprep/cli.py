"""Command-line interface for chessprep."""

import json
from dataclasses import asdict, replace
from pathlib import Path

import chess
import typer
from loguru import logger
from rich.console import Console
from rich.progress import track
from rich.table import Table

from chessprep import __version__
from chessprep.core.configs import AppConfig, EngineConfig
from chessprep.engine import AnalysisResult, EngineError, EngineSession, EngineSessionManager
from chessprep.positions import load_positions
from chessprep.utils import load_app_config, resolve_engine_path, setup_logging

app = typer.Typer(
    name="chessprep",
    help="chessprep: engine analysis for chess preparation",
    add_completion=False,
)
console = Console()


def format_score(score_cp: int | None, score_mate: int | None) -> str:
    """Render a score the way chess GUIs do (+0.34, #-3)."""
    if score_mate is not None:
        return f"#{score_mate}"
    if score_cp is not None:
        return f"{score_cp / 100:+.2f}"
    return "?"


def _setup(config_path: Path | None, verbose: bool, trace: bool) -> AppConfig:
    config = load_app_config(config_path)
    level = "DEBUG" if verbose else config.logging.level
    setup_logging(
        level,
        config.logging.file,
        config.logging.rotation,
        config.logging.retention,
        trace_protocol=trace,
    )
    return config


def _engine_config(config: AppConfig, engine: str | None) -> EngineConfig:
    path = resolve_engine_path(engine, config)
    if path is None:
        console.print(
            "[bold red]No engine found.[/bold red] Pass --engine, set engine.path "
            "in the config, set CHESSPREP_ENGINE, or put stockfish on PATH."
        )
        raise typer.Exit(code=2)
    return replace(config.engine, path=path)


def _print_result(result: AnalysisResult) -> None:
    table = Table(title=f"[bold]{result.fen}[/bold]")
    table.add_column("#", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Line")

    for line in result.lines:
        moves = line.san_pv or line.pv
        table.add_row(
            str(line.multipv_rank),
            str(line.depth),
            format_score(line.score_cp, line.score_mate),
            " ".join(moves),
        )

    console.print(table)
    console.print(f"Best move: [bold green]{result.best_move or '-'}[/bold green]")


@app.command()
def version() -> None:
    """Print version information."""
    console.print(f"[bold blue]chessprep[/bold blue] v{__version__}")


@app.command()
def analyze(
    fen: str = typer.Argument(chess.STARTING_FEN, help="Position to analyse (FEN)"),
    engine: str | None = typer.Option(None, "--engine", "-e", help="Engine executable"),
    depth: int = typer.Option(0, "--depth", "-d", help="Search depth (0 = default)"),
    multipv: int | None = typer.Option(None, "--multipv", "-m", help="Number of lines (1-10)"),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"
    ),
    white_perspective: bool = typer.Option(
        False, "--white-perspective", "-w", help="Report scores from white's side"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    trace: bool = typer.Option(False, "--trace", help="Log the raw UCI conversation"),
) -> None:
    """Analyse a single position."""
    app_config = _setup(config, verbose, trace)
    engine_config = _engine_config(app_config, engine)
    width = multipv if multipv is not None else engine_config.multipv

    try:
        with EngineSession.from_config(engine_config) as session:
            result = session.analyze_multipv(fen, depth, width)
    except EngineError as e:
        console.print(f"[bold red]Engine error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2) from e

    if white_perspective:
        result = result.white_perspective()

    if json_output:
        console.print_json(json.dumps(asdict(result)))
    else:
        _print_result(result)


@app.command()
def batch(
    positions_file: Path = typer.Argument(..., help="Positions to analyse (.fen, .epd or .pgn)"),
    engine: str | None = typer.Option(None, "--engine", "-e", help="Engine executable"),
    depth: int = typer.Option(0, "--depth", "-d", help="Search depth (0 = default)"),
    multipv: int | None = typer.Option(None, "--multipv", "-m", help="Number of lines (1-10)"),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write results as JSON lines"),
    max_positions: int | None = typer.Option(None, "--max-positions", help="Limit positions"),
    pgn_plies: int | None = typer.Option(None, "--pgn-plies", help="Plies to play from PGN games"),
    white_perspective: bool = typer.Option(
        False, "--white-perspective", "-w", help="Report scores from white's side"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Analyse every position in a file with one engine process."""
    app_config = _setup(config, verbose, trace=False)
    engine_config = _engine_config(app_config, engine)

    try:
        fens = load_positions(positions_file, max_positions=max_positions, pgn_plies=pgn_plies)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2) from e

    results: list[AnalysisResult] = []
    failures = 0

    with EngineSessionManager(engine_config) as manager:
        for fen in track(fens, description="Analysing", console=console):
            try:
                result = manager.analyze(fen, depth, multipv)
            except EngineError as e:
                # The manager restarts the engine on the next position
                logger.warning(f"Analysis failed for {fen}: {e}")
                failures += 1
                continue
            results.append(result.white_perspective() if white_perspective else result)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w") as f:
            for result in results:
                f.write(json.dumps(asdict(result)) + "\n")
        console.print(f"Wrote {len(results)} results to [cyan]{output}[/cyan]")
    else:
        summary = Table(title="Batch analysis")
        summary.add_column("FEN")
        summary.add_column("Best", justify="center")
        summary.add_column("Score", justify="right")
        summary.add_column("Depth", justify="right")
        for result in results:
            summary.add_row(
                result.fen,
                result.best_move or "-",
                format_score(result.score_cp, result.score_mate),
                str(result.depth),
            )
        console.print(summary)

    if failures:
        console.print(f"[yellow]{failures} position(s) failed[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
