from __future__ import annotations

import json
import pathlib
import warnings
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from digitspin._config import CONFIG_FILE, SpinSettings, load_settings
from digitspin.digits import digit_outline
from digitspin.io.stl import write_stl
from digitspin.modeling.csg import evaluate
from digitspin.modeling.extrude import extrude
from digitspin.pairs import PairPolicy, PairTable, rotate90
from digitspin.phase import Spin
from digitspin.preview import PreviewBackendError, SpinPreviewer
from digitspin.scene import build_switcher, build_table
from digitspin.validation import ValidationError

console = Console()
app = typer.Typer(help="Spin intersected digit solids that always read the right way round.")


def _settings(
    spin: Optional[str],
    step: Optional[float],
    policy: Optional[str],
    advance: Optional[str],
) -> SpinSettings:
    settings = load_settings()
    try:
        return SpinSettings(
            spin=Spin.from_name(spin) if spin else settings.spin,
            step_deg=step if step is not None else settings.step_deg,
            pair_policy=PairPolicy.from_name(policy) if policy else settings.pair_policy,
            advance=(advance or settings.advance).lower(),
            rotate_from=settings.rotate_from,
            rotate_to=settings.rotate_to,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_table_with_progress(settings: SpinSettings, workers: int) -> PairTable:
    with Progress(
        TextColumn("[bold blue]Intersecting"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("pairs", total=None)

        def report(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", RuntimeWarning)
            try:
                table = build_table(settings, workers=workers, progress=report)
            except ValidationError as exc:
                raise typer.BadParameter(str(exc)) from exc
    for warning in caught:
        console.print(f"[yellow]{warning.message}[/yellow]")
    return table


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


SpinOption = typer.Option(None, "--spin", help="clockwise or counterclockwise (default from config).")
StepOption = typer.Option(None, "--step", help="Degrees of rotation per tick.")
PolicyOption = typer.Option(None, "--policy", help="all-pairs or cyclic.")
AdvanceOption = typer.Option(None, "--advance", help="sequential or random.")


@app.command()
def preview(
    spin: Optional[str] = SpinOption,
    step: Optional[float] = StepOption,
    policy: Optional[str] = PolicyOption,
    advance: Optional[str] = AdvanceOption,
    workers: int = typer.Option(1, min=1, help="Threads used to build the pair table."),
    target_fps: int = typer.Option(60, min=1, max=240, help="Animation framerate."),
    ticks: Optional[int] = typer.Option(None, min=0, help="Stop after this many ticks."),
    off_screen: bool = typer.Option(False, "--off-screen", help="Render without opening a window."),
    screenshot: Optional[pathlib.Path] = typer.Option(
        None, "--screenshot", help="Save the final off-screen frame to this path."
    ),
    show_edges: bool = typer.Option(True, "--show-edges/--hide-edges", help="Toggle wireframe edges."),
) -> None:
    """
    Build the pair table and spin the intersected digits in a PyVista window.
    """

    settings = _settings(spin, step, policy, advance)
    console.rule("digitspin")
    console.print(
        f"[magenta]Spin {settings.spin.value}, {settings.step_deg:g}° per tick, "
        f"{settings.pair_policy.value} table and {settings.advance} advance.[/magenta]"
    )
    table = _build_table_with_progress(settings, workers)
    console.print(f"[green]Built {len(table)} solids from digits {', '.join(map(str, table.indices))}.[/green]")

    try:
        switcher = build_switcher(table, settings)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    previewer = SpinPreviewer(console=console)
    try:
        previewer.show(
            switcher,
            target_fps=target_fps,
            off_screen=off_screen,
            ticks=ticks,
            screenshot_path=screenshot,
            show_edges=show_edges,
        )
    except PreviewBackendError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"Stopped after {switcher.ticks} ticks and {switcher.swaps} swaps.")


@app.command()
def export(
    digit: int = typer.Argument(..., min=0, max=9, help="Base digit."),
    partner: Optional[int] = typer.Argument(
        None, min=0, max=9, help="Optional partner digit; exports the intersection instead."
    ),
    output: Optional[pathlib.Path] = typer.Option(None, "--output", "-o", help="STL path (default: <digit>.stl)."),
    spin: Optional[str] = SpinOption,
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing STL."),
    ascii: bool = typer.Option(False, "--ascii", help="Write ASCII STL instead of binary."),
) -> None:
    """
    Export a single digit solid, or a digit intersected with its rotated partner, as STL.
    """

    settings = _settings(spin, None, None, None)
    solid = extrude(digit_outline(digit), center_origin=True)
    stem = str(digit)
    if partner is not None:
        other = extrude(digit_outline(partner), center_origin=True)
        solid = evaluate(solid, rotate90(other, settings.spin))
        stem = f"{digit}-{partner}"

    output = output or pathlib.Path(f"{stem}.stl")
    final_output = output
    if output.exists() and not overwrite:
        final_output = _next_available_path(output)
        console.print(f"[yellow]Output {output} exists; writing to {final_output} instead.[/yellow]")

    final_output.parent.mkdir(parents=True, exist_ok=True)
    try:
        write_stl(solid, final_output, ascii=ascii)
    except OSError as exc:
        raise typer.BadParameter(f"Failed to export STL: {exc}") from exc

    mode = "ASCII" if ascii else "binary"
    console.print(
        Panel(
            f"Wrote {mode} STL with {solid.n_faces} triangles to [green]{final_output}[/green].",
            title="Export complete",
            border_style="green",
        )
    )


@app.command()
def stats(
    spin: Optional[str] = SpinOption,
    policy: Optional[str] = PolicyOption,
    workers: int = typer.Option(1, min=1, help="Threads used to build the pair table."),
    csv: bool = typer.Option(False, "--csv", help="Print comma-separated values instead of a table."),
) -> None:
    """
    Report triangle counts of every pair-table cell next to its two sources.
    """

    settings = _settings(spin, None, policy, None)
    table = _build_table_with_progress(settings, workers)
    rows = table.stats()
    if csv:
        console.print("row,col,base_faces,partner_faces,result_faces", highlight=False)
        for row in rows:
            console.print(
                f"{row.row},{row.col},{row.base_faces},{row.partner_faces},{row.result_faces}",
                highlight=False,
            )
        return

    report = Table(title=f"{settings.pair_policy.value} intersections")
    for column in ("from", "to", "base tris", "partner tris", "result tris"):
        report.add_column(column, justify="right")
    for row in rows:
        report.add_row(str(row.row), str(row.col), str(row.base_faces), str(row.partner_faces), str(row.result_faces))
    console.print(report)


@app.command()
def config() -> None:
    """
    Show the resolved settings and where they are read from.
    """

    settings = load_settings()
    console.print(f"Config file: [green]{CONFIG_FILE}[/green]")
    console.print_json(json.dumps(settings.to_dict()))
