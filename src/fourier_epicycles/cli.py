"""
Command-line interface for Fourier series epicycles.

Provides commands for computing coefficients and metrics, typesetting
equations, rendering runs, sweeping term counts and managing run folders.
"""

from pathlib import Path
from typing import Optional
import json
import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from .config import NUM_TERMS_RANGE

app = typer.Typer(
    name="fourier-epicycles",
    help="Fourier series epicycles: harmonic coefficients, distortion and convergence.",
    add_completion=False
)
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging."
    )
):
    """Fourier series epicycle visualizer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _load_config_or_exit(config: Path):
    from .config import load_config

    try:
        return load_config(config)
    except ValueError as e:
        console.print(f"[bold red]Invalid config:[/] {escape(str(e))}")
        raise typer.Exit(code=1)


def _print_harmonics(coefficients, limit: int) -> None:
    from .metrics import harmonic_shares

    table = Table(title="Harmonics")
    table.add_column("#", style="dim")
    table.add_column("n", style="cyan")
    table.add_column("a_n", justify="right")
    table.add_column("b_n", justify="right")
    table.add_column("Amplitude", justify="right", style="green")
    table.add_column("Phase", justify="right")
    table.add_column("% of Total", justify="right", style="yellow")

    shares = harmonic_shares(coefficients)
    for i, (c, share) in enumerate(zip(coefficients[:limit], shares[:limit])):
        table.add_row(
            str(i), str(c.n), f"{c.a:.4f}", f"{c.b:.4f}",
            f"{c.amplitude:.4f}", f"{c.phase:.4f}", f"{share:.1f}%"
        )
    console.print(table)


def _print_metrics(metrics) -> None:
    from .metrics import convergence_percent, format_number, insight_message

    table = Table(title="Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Harmonics", str(metrics.total_harmonics))
    table.add_row("Total Amplitude", format_number(metrics.current_amplitude, 4))
    table.add_row("Fundamental Frequency", f"{format_number(metrics.fundamental_frequency, 0)}f")
    table.add_row("THD", f"{format_number(metrics.thd, 1)}%")
    table.add_row("Convergence Error", format_number(metrics.convergence_error, 4))
    table.add_row("Convergence", f"{format_number(convergence_percent(metrics), 1)}%")

    console.print(table)
    console.print(f"[italic]{insight_message(metrics)}[/]")


@app.command()
def compute(
    wave: str = typer.Option(
        "square",
        "--wave", "-w",
        help="Wave type (square, sawtooth, triangle, custom)."
    ),
    terms: int = typer.Option(
        10,
        "--terms", "-n",
        min=NUM_TERMS_RANGE[0],
        max=NUM_TERMS_RANGE[1],
        help="Number of harmonics."
    ),
    amplitude: float = typer.Option(
        1.0,
        "--amplitude", "-a",
        help="Global amplitude scale."
    ),
    limit: int = typer.Option(
        10,
        "--limit",
        help="Number of harmonics to list."
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print coefficients and metrics as JSON."
    )
):
    """
    Compute harmonic coefficients and quality metrics for a wave.
    """
    from .coefficients import generate
    from .metrics import compute_metrics
    from .waves import parse_wave_kind, resolve_wave_kind

    if parse_wave_kind(wave) is None:
        console.print(f"[yellow]Unknown wave '{escape(wave)}', using square.[/]")
    kind = resolve_wave_kind(wave)

    coefficients = generate(kind, terms)
    metrics = compute_metrics(coefficients, kind, amplitude)

    if as_json:
        data = {
            "wave_type": kind.value,
            "coefficients": [
                {"n": c.n, "a": c.a, "b": c.b, "amplitude": c.amplitude, "phase": c.phase}
                for c in coefficients
            ],
            "metrics": metrics.to_dict(),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    from .waves import describe_wave

    console.print(f"[bold blue]{describe_wave(kind)}[/]")
    _print_harmonics(coefficients, limit)
    _print_metrics(metrics)


@app.command()
def equations(
    wave: str = typer.Option(
        "square",
        "--wave", "-w",
        help="Wave type (square, sawtooth, triangle, custom)."
    ),
    terms: int = typer.Option(
        10,
        "--terms", "-n",
        min=NUM_TERMS_RANGE[0],
        max=NUM_TERMS_RANGE[1],
        help="Number of harmonics."
    )
):
    """
    Print the LaTeX equations for a wave's Fourier series.
    """
    from .coefficients import generate
    from .equations import equation_for, expanded_form, harmonic_table

    coefficients = generate(wave, terms)
    eq = equation_for(wave)

    console.print(f"[bold]{eq.name}[/]")
    console.print(f"[cyan]General:[/] {escape(eq.general)}", highlight=False)
    console.print(f"[cyan]Coefficients:[/] {escape(eq.coefficient)}", highlight=False)
    console.print(f"[cyan]Expanded (N={terms}):[/] {escape(expanded_form(coefficients, terms))}", highlight=False)

    rows = harmonic_table(coefficients)
    table = Table(title=f"First {len(rows)} Harmonics")
    table.add_column("n", style="cyan")
    table.add_column("Amplitude", justify="right")
    table.add_column("Frequency", justify="right")
    table.add_column("% of Total", justify="right", style="green")
    for row in rows:
        table.add_row(
            str(row["n"]), f"{row['amplitude']:.4f}", row["frequency"], f"{row['percent']:.1f}%"
        )
    console.print(table)


@app.command()
def render(
    config: Path = typer.Option(
        ...,
        "--config", "-c",
        help="Path to YAML configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True
    ),
    out_dir: Optional[Path] = typer.Option(
        None,
        "--out-dir", "-o",
        help="Override output directory from config."
    ),
    no_plots: bool = typer.Option(
        False,
        "--no-plots",
        help="Skip plot generation."
    ),
    animate: bool = typer.Option(
        False,
        "--animate",
        help="Also write an animated GIF of the epicycles."
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress progress output."
    )
):
    """
    Render the configured series into a run folder.

    Produces coefficient tables, metrics, and epicycle, spectrum and
    approximation plots.
    """
    from .render import run_render
    from .io import create_run_folder, save_results
    from .plots import plot_all

    if not quiet:
        console.print(f"[bold blue]Loading config:[/] {config}")

    cfg = _load_config_or_exit(config)

    # Override output directory if specified
    if out_dir is not None:
        cfg.run.out_dir = str(out_dir)

    if not quiet:
        console.print(
            f"[bold]Series:[/] {cfg.series.wave_type}, N={cfg.series.num_terms}, "
            f"amplitude={cfg.series.amplitude}"
        )

    result = run_render(cfg)

    run_path = create_run_folder(cfg, result.timestamp)
    save_results(result, run_path)

    if not quiet:
        console.print(f"[bold green]Results saved to:[/] {run_path}")

    if not no_plots:
        if not quiet:
            console.print("[bold blue]Generating plots...[/]")
        plot_paths = plot_all(result, run_path, animate=animate)
        if not quiet:
            for name, path in plot_paths.items():
                console.print(f"  - {name}: {path.name}")

    if not quiet:
        console.print()
        _print_metrics(result.metrics)

    console.print(f"\n[bold green]Run complete:[/] {run_path}")


@app.command()
def sweep(
    config: Path = typer.Option(
        ...,
        "--config", "-c",
        help="Path to YAML configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True
    ),
    out_dir: Optional[Path] = typer.Option(
        None,
        "--out-dir", "-o",
        help="Override output directory from config."
    ),
    no_plots: bool = typer.Option(
        False,
        "--no-plots",
        help="Skip plot generation."
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress progress output."
    )
):
    """
    Sweep term counts for the configured waves.

    Produces THD and convergence curves for each wave.
    """
    from .sweep import run_sweep, get_sweep_summary
    from .io import create_run_folder, save_results
    from .plots import plot_all

    if not quiet:
        console.print(f"[bold blue]Loading config:[/] {config}")

    cfg = _load_config_or_exit(config)

    if out_dir is not None:
        cfg.run.out_dir = str(out_dir)

    n_terms = cfg.sweep.n_max - cfg.sweep.n_min + 1
    total_points = len(cfg.sweep.wave_types) * n_terms

    if not quiet:
        console.print(f"[bold]Waves:[/] {', '.join(cfg.sweep.wave_types)}")
        console.print(f"[bold]Terms:[/] {cfg.sweep.n_min}..{cfg.sweep.n_max} ({total_points} points)")

    # Run sweep with progress bar
    if not quiet:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task("Running sweep...", total=total_points)

            def update_progress(current, total):
                progress.update(task, completed=current)

            result = run_sweep(cfg, progress_callback=update_progress)
    else:
        result = run_sweep(cfg)

    run_path = create_run_folder(cfg, result.timestamp, prefix="sweep")
    save_results(result, run_path)

    if not quiet:
        console.print(f"[bold green]Results saved to:[/] {run_path}")

    if not no_plots:
        if not quiet:
            console.print("[bold blue]Generating plots...[/]")
        plot_paths = plot_all(result, run_path)
        if not quiet:
            for name, path in plot_paths.items():
                console.print(f"  - {name}: {path.name}")

    if not quiet:
        summary = get_sweep_summary(result)
        _print_sweep_summary(summary)

    console.print(f"\n[bold green]Run complete:[/] {run_path}")


def _print_sweep_summary(summary: dict) -> None:
    table = Table(title="Convergence Summary")
    table.add_column("Wave", style="cyan")
    table.add_column("Final THD", justify="right")
    table.add_column("Final Error", justify="right")
    table.add_column("Terms to Converge", justify="right", style="green")

    for wave, stats in summary["waves"].items():
        converge = stats["terms_to_converge"]
        table.add_row(
            wave,
            f"{stats['final_thd']:.1f}%",
            f"{stats['final_convergence_error']:.4f}",
            str(converge) if converge is not None else "-"
        )
    console.print(table)


@app.command()
def plot(
    run: Path = typer.Option(
        ...,
        "--run", "-r",
        help="Path to run folder.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True
    ),
    dpi: int = typer.Option(
        150,
        "--dpi",
        help="Plot resolution."
    )
):
    """
    Regenerate plots from an existing run folder.
    """
    from .io import load_results
    from .plots import plot_all

    console.print(f"[bold blue]Loading results from:[/] {run}")
    result = load_results(run)

    console.print("[bold blue]Generating plots...[/]")
    plot_paths = plot_all(result, run, dpi=dpi)

    for name, path in plot_paths.items():
        console.print(f"  - {name}: {path}")

    console.print("[bold green]Plots generated.[/]")


@app.command()
def export(
    run: Path = typer.Option(
        ...,
        "--run", "-r",
        help="Path to run folder.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True
    ),
    format: str = typer.Option(
        "json,csv",
        "--format", "-f",
        help="Comma-separated list of formats to export (json, csv)."
    )
):
    """
    Export results from a run folder in specified formats.
    """
    from .io import export_results

    formats = [f.strip() for f in format.split(",")]

    console.print(f"[bold blue]Exporting from:[/] {run}")
    console.print(f"[bold]Formats:[/] {', '.join(formats)}")

    paths = export_results(run, formats)

    for fmt, path in paths.items():
        console.print(f"  - {fmt}: {path}")

    console.print("[bold green]Export complete.[/]")


@app.command()
def info(
    run: Path = typer.Option(
        ...,
        "--run", "-r",
        help="Path to run folder.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True
    )
):
    """
    Display information about a run.
    """
    from .io import load_results
    from .sweep import SweepResult, get_sweep_summary

    result = load_results(run)

    table = Table(title=f"Run: {run.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Config Hash", result.config_hash)
    table.add_row("Timestamp", result.timestamp)

    if isinstance(result, SweepResult):
        summary = get_sweep_summary(result)
        table.add_row("Kind", "sweep")
        table.add_row("Waves", ", ".join(result.wave_types))
        table.add_row("Terms", f"{summary['n_min']}..{summary['n_max']}")
        table.add_row("Total Points", str(summary['total_points']))
        table.add_row("Elapsed Time", f"{summary['elapsed_seconds']:.2f}s")
        console.print(table)
        _print_sweep_summary(summary)
        return

    table.add_row("Kind", "render")
    table.add_row("Wave", result.wave_kind.value)
    table.add_row("Terms", str(result.metrics.total_harmonics))
    table.add_row("Amplitude", str(result.config.series.amplitude))
    console.print(table)
    _print_metrics(result.metrics)


@app.command()
def list_runs(
    out_dir: Path = typer.Option(
        Path("out"),
        "--out-dir", "-o",
        help="Output directory to search."
    )
):
    """
    List all runs in an output directory.
    """
    from .io import list_runs as _list_runs

    runs = _list_runs(out_dir)

    if not runs:
        console.print(f"[yellow]No runs found in {out_dir}[/]")
        return

    table = Table(title=f"Runs in {out_dir}")
    table.add_column("#", style="dim")
    table.add_column("Run Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Timestamp", style="green")
    table.add_column("Hash", style="yellow")

    for i, run_path in enumerate(runs, 1):
        # Parse run name: <kind>_YYYYmmdd_HHMMSS_hash
        parts = run_path.name.split("_")
        if len(parts) >= 4:
            kind = parts[0]
            timestamp = f"{parts[1]}_{parts[2]}"
            hash_val = parts[3]
        else:
            kind = ""
            timestamp = ""
            hash_val = ""
        table.add_row(str(i), run_path.name, kind, timestamp, hash_val)

    console.print(table)


@app.command()
def version():
    """
    Display version information.
    """
    from . import __version__
    console.print(f"fourier-epicycles version {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
