"""
Plotting functions for Fourier series results.

Provides functions to draw epicycle snapshots, harmonic spectra,
series approximations, convergence curves and epicycle animations.
"""

import numpy as np
from pathlib import Path
from typing import Optional, Sequence, Union
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.patches import Circle

from .animation import EpicycleState
from .coefficients import HarmonicCoefficient, epicycle_chain, evaluate_series
from .config import Config
from .render import RenderResult
from .sweep import SweepResult
from .waves import WaveKind, WAVE_NAMES, get_wave_color, ideal_waveform, resolve_wave_kind

BACKGROUND = "#0f172a"
CIRCLE_COLOR = "#6366f1"
VECTOR_COLOR = "#a78bfa"
TIP_COLOR = "#f472b6"
TRACE_COLOR = "#22d3ee"


def _draw_chain(
    ax: plt.Axes,
    joints: np.ndarray,
    show_circles: bool = True,
    show_vectors: bool = True
) -> None:
    """Draw circles and vectors of an epicycle chain."""
    n_links = len(joints) - 1
    for i in range(n_links):
        x0, y0 = joints[i]
        x1, y1 = joints[i + 1]
        radius = np.hypot(x1 - x0, y1 - y0)

        # Fade outer harmonics
        if show_circles:
            ax.add_patch(Circle(
                (x0, y0), radius, fill=False,
                edgecolor=CIRCLE_COLOR, alpha=max(0.05, 0.5 - i * 0.02), linewidth=1
            ))
        if show_vectors:
            ax.plot([x0, x1], [y0, y1], color=VECTOR_COLOR,
                    alpha=max(0.2, 0.9 - i * 0.05), linewidth=1.5)

    if n_links > 0:
        ax.plot(*joints[-1], 'o', color=TIP_COLOR, markersize=5)


def plot_epicycles(
    coefficients: Sequence[HarmonicCoefficient],
    t: float = 0.0,
    amplitude: float = 1.0,
    trail_points: int = 300,
    show_circles: bool = True,
    show_vectors: bool = True,
    save_path: Optional[Union[str, Path]] = None,
    figsize: tuple[float, float] = (12, 5),
    dpi: int = 150
) -> plt.Figure:
    """
    Plot the epicycle chain at time t beside the wave it traces.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics to draw.
    t : float, optional
        Time in radians (default 0).
    amplitude : float, optional
        Global amplitude scale (default 1.0).
    trail_points : int, optional
        Number of trace samples drawn behind the tip (default 300).
    show_circles, show_vectors : bool, optional
        Toggle circle and vector drawing.
    save_path : str or Path, optional
        Path to save the figure. If None, figure is not saved.
    figsize : tuple, optional
        Figure size in inches.
    dpi : int, optional
        Resolution for saving.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The generated figure.
    """
    fig, (ax_chain, ax_wave) = plt.subplots(
        1, 2, figsize=figsize, gridspec_kw={"width_ratios": [1, 1.6]}
    )
    fig.patch.set_facecolor(BACKGROUND)

    joints = epicycle_chain(coefficients, t, scale=amplitude)
    _draw_chain(ax_chain, joints, show_circles, show_vectors)

    # Trace the last trail_points ticks, newest on the left
    t_trail = t - np.arange(trail_points) * 0.02
    y_trail = evaluate_series(coefficients, t_trail, amplitude)
    ax_wave.plot(np.arange(trail_points), y_trail, color=TRACE_COLOR, linewidth=2)
    ax_wave.axhline(0, color='#94a3b8', alpha=0.3, linewidth=1)

    limit = max(1.0, float(np.sum([c.amplitude for c in coefficients])) * amplitude) * 1.1
    ax_chain.set_xlim(-limit, limit)
    ax_chain.set_ylim(-limit, limit)
    ax_chain.set_aspect('equal')
    ax_wave.set_ylim(-limit, limit)
    ax_wave.set_xlim(0, trail_points)

    for ax in (ax_chain, ax_wave):
        ax.set_facecolor(BACKGROUND)
        ax.tick_params(colors='#94a3b8')
        ax.grid(True, alpha=0.1, color=CIRCLE_COLOR)

    ax_chain.set_title(f'Epicycles ({len(coefficients)} terms)', color='white', fontsize=12)
    ax_wave.set_title(f'Traced Wave at $t={t:.2f}$', color='white', fontsize=12)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight', facecolor=fig.get_facecolor())

    return fig


def plot_spectrum(
    coefficients: Sequence[HarmonicCoefficient],
    wave_kind: Union[str, WaveKind] = WaveKind.SQUARE,
    save_path: Optional[Union[str, Path]] = None,
    figsize: tuple[float, float] = (10, 5),
    dpi: int = 150
) -> plt.Figure:
    """
    Plot the harmonic amplitude spectrum.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics to plot.
    wave_kind : str or WaveKind, optional
        Waveform, used for title and color.
    save_path : str or Path, optional
        Path to save the figure. If None, figure is not saved.
    figsize : tuple, optional
        Figure size in inches (default (10, 5)).
    dpi : int, optional
        Resolution for saving (default 150).

    Returns
    -------
    fig : matplotlib.figure.Figure
        The generated figure.
    """
    kind = resolve_wave_kind(wave_kind)
    fig, ax = plt.subplots(figsize=figsize)

    if len(coefficients) > 0:
        n = [c.n for c in coefficients]
        amps = [c.amplitude for c in coefficients]
        ax.bar(n, amps, width=0.8, color=get_wave_color(kind), alpha=0.85)
        # Highlight the fundamental
        ax.bar([n[0]], [amps[0]], width=0.8, color=TRACE_COLOR)
    else:
        ax.text(
            0.5, 0.5, 'No harmonics',
            transform=ax.transAxes, ha='center', va='center', fontsize=12
        )

    ax.set_xlabel('Harmonic $n$', fontsize=12)
    ax.set_ylabel(r'Amplitude $\sqrt{a_n^2 + b_n^2}$', fontsize=12)
    ax.set_title(f'{WAVE_NAMES[kind]} Spectrum', fontsize=14)
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight')

    return fig


def plot_approximation(
    coefficients: Sequence[HarmonicCoefficient],
    wave_kind: Union[str, WaveKind] = WaveKind.SQUARE,
    amplitude: float = 1.0,
    n_samples: int = 1000,
    save_path: Optional[Union[str, Path]] = None,
    figsize: tuple[float, float] = (10, 5),
    dpi: int = 150
) -> plt.Figure:
    """
    Plot the partial sum over two periods against the ideal waveform.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics to sum.
    wave_kind : str or WaveKind, optional
        Target waveform. The custom wave has no ideal curve.
    amplitude : float, optional
        Global amplitude scale (default 1.0).
    n_samples : int, optional
        Number of time samples (default 1000).
    save_path : str or Path, optional
        Path to save the figure. If None, figure is not saved.
    figsize : tuple, optional
        Figure size in inches.
    dpi : int, optional
        Resolution for saving.

    Returns
    -------
    fig : matplotlib.figure.Figure
        The generated figure.
    """
    kind = resolve_wave_kind(wave_kind)
    fig, ax = plt.subplots(figsize=figsize)

    t = np.linspace(-2 * np.pi, 2 * np.pi, n_samples)
    ideal = ideal_waveform(kind, t)
    if ideal is not None:
        ax.plot(t, amplitude * ideal, color='#94a3b8', linestyle='--',
                linewidth=1.5, label='Ideal')

    y = evaluate_series(coefficients, t, amplitude)
    ax.plot(t, y, color=get_wave_color(kind), linewidth=2,
            label=f'Partial sum ($N={len(coefficients)}$)')

    ax.set_xlabel(r'$\omega t$ (rad)', fontsize=12)
    ax.set_ylabel('$f(t)$', fontsize=12)
    ax.set_title(f'{WAVE_NAMES[kind]} Approximation', fontsize=14)
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight')

    return fig


def plot_convergence(
    result: SweepResult,
    save_path: Optional[Union[str, Path]] = None,
    figsize: tuple[float, float] = (12, 5),
    dpi: int = 150
) -> plt.Figure:
    """
    Plot THD and convergence error against the number of terms.

    Parameters
    ----------
    result : SweepResult
        Sweep results to plot.
    save_path : str or Path, optional
        Path to save the figure. If None, figure is not saved.
    figsize : tuple, optional
        Figure size in inches (default (12, 5)).
    dpi : int, optional
        Resolution for saving (default 150).

    Returns
    -------
    fig : matplotlib.figure.Figure
        The generated figure.
    """
    fig, (ax_thd, ax_err) = plt.subplots(1, 2, figsize=figsize)

    tolerance = result.config.thresholds.convergence_tolerance

    for i_wave, wave in enumerate(result.wave_types):
        color = get_wave_color(wave)
        label = WAVE_NAMES[resolve_wave_kind(wave)]
        ax_thd.plot(result.term_counts, result.thd[i_wave], '-', color=color,
                    linewidth=2, label=label)
        ax_err.plot(result.term_counts, result.convergence_error[i_wave], '-',
                    color=color, linewidth=2, label=label)

    ax_err.axhline(tolerance, color='r', linestyle='--', linewidth=1,
                   label=f'Tolerance ${tolerance}$')

    ax_thd.set_xlabel('Number of terms $N$', fontsize=12)
    ax_thd.set_ylabel('THD (%)', fontsize=12)
    ax_thd.set_title('Total Harmonic Distortion', fontsize=14)
    ax_err.set_xlabel('Number of terms $N$', fontsize=12)
    ax_err.set_ylabel('Convergence error', fontsize=12)
    ax_err.set_title('Convergence Error', fontsize=14)
    ax_err.set_ylim(0, 1.05)

    for ax in (ax_thd, ax_err):
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight')

    return fig


def animate_epicycles(
    coefficients: Sequence[HarmonicCoefficient],
    config: Config,
    save_path: Optional[Union[str, Path]] = None,
    figsize: tuple[float, float] = (12, 5),
    dpi: int = 80
) -> animation.FuncAnimation:
    """
    Animate the epicycles and save them as a GIF.

    Parameters
    ----------
    coefficients : sequence of HarmonicCoefficient
        Harmonics to draw.
    config : Config
        Supplies amplitude and the animation settings.
    save_path : str or Path, optional
        Output file; must end in ".gif". If None, the animation is not saved.
    figsize : tuple, optional
        Figure size in inches.
    dpi : int, optional
        Resolution for saving (default 80).

    Returns
    -------
    anim : matplotlib.animation.FuncAnimation
        The animation object. When ``save_path`` is given the figure is
        closed after saving; otherwise it stays open and the caller must
        close it with ``plt.close(anim._fig)``.
    """
    if save_path is not None and Path(save_path).suffix.lower() != ".gif":
        raise ValueError(f"Unsupported animation format for '{save_path}'. Use .gif.")

    anim_cfg = config.animation
    amplitude = config.series.amplitude
    state = EpicycleState(speed=anim_cfg.speed, trail_length=anim_cfg.trail_length)
    state.retarget(config.series.wave_type, config.series.num_terms)

    fig, (ax_chain, ax_wave) = plt.subplots(
        1, 2, figsize=figsize, gridspec_kw={"width_ratios": [1, 1.6]}
    )
    fig.patch.set_facecolor(BACKGROUND)

    limit = max(1.0, float(np.sum([c.amplitude for c in coefficients])) * amplitude) * 1.1

    def draw(_):
        frame = state.step(coefficients, scale=amplitude)
        for ax in (ax_chain, ax_wave):
            ax.clear()
            ax.set_facecolor(BACKGROUND)
            ax.set_ylim(-limit, limit)
            ax.tick_params(colors='#94a3b8')
        ax_chain.set_xlim(-limit, limit)
        ax_chain.set_aspect('equal')
        ax_wave.set_xlim(0, anim_cfg.trail_length)

        _draw_chain(ax_chain, frame.joints, anim_cfg.show_circles, anim_cfg.show_vectors)
        ax_wave.plot(np.arange(len(frame.trail)), frame.trail, color=TRACE_COLOR, linewidth=2)
        ax_wave.set_title(f'$t={state.cycle_time:.2f}$ rad', color='white', fontsize=12)
        return []

    anim = animation.FuncAnimation(
        fig, draw, frames=anim_cfg.n_frames,
        interval=1000 / anim_cfg.fps, blit=False, repeat=False
    )

    if save_path is not None:
        anim.save(str(save_path), writer="pillow", fps=anim_cfg.fps, dpi=dpi)
        plt.close(fig)

    return anim


def plot_all(
    result: Union[RenderResult, SweepResult],
    output_dir: Union[str, Path],
    dpi: int = 150,
    animate: bool = False
) -> dict[str, Path]:
    """
    Generate all standard plots and save to output directory.

    Parameters
    ----------
    result : RenderResult or SweepResult
        Results to plot.
    output_dir : str or Path
        Directory to save plots.
    dpi : int, optional
        Resolution for saving (default 150).
    animate : bool, optional
        Also write the epicycle GIF for render results (default False).

    Returns
    -------
    paths : dict
        Dictionary mapping plot names to file paths.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}

    if isinstance(result, SweepResult):
        convergence_path = output_dir / "plot_convergence.png"
        fig = plot_convergence(result, save_path=convergence_path, dpi=dpi)
        plt.close(fig)
        paths["convergence"] = convergence_path
        return paths

    amplitude = result.config.series.amplitude
    anim_cfg = result.config.animation

    # Epicycle snapshot
    epicycles_path = output_dir / "plot_epicycles.png"
    fig = plot_epicycles(
        result.coefficients, t=0.0, amplitude=amplitude,
        trail_points=anim_cfg.trail_length,
        show_circles=anim_cfg.show_circles, show_vectors=anim_cfg.show_vectors,
        save_path=epicycles_path, dpi=dpi
    )
    plt.close(fig)
    paths["epicycles"] = epicycles_path

    # Spectrum
    spectrum_path = output_dir / "plot_spectrum.png"
    fig = plot_spectrum(result.coefficients, result.wave_kind, save_path=spectrum_path, dpi=dpi)
    plt.close(fig)
    paths["spectrum"] = spectrum_path

    # Approximation
    approx_path = output_dir / "plot_approximation.png"
    fig = plot_approximation(
        result.coefficients, result.wave_kind, amplitude,
        save_path=approx_path, dpi=dpi
    )
    plt.close(fig)
    paths["approximation"] = approx_path

    if animate:
        gif_path = output_dir / "epicycles.gif"
        animate_epicycles(result.coefficients, result.config, save_path=gif_path)
        paths["animation"] = gif_path

    return paths
