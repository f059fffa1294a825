"""
data_complexity.plot
====================
Visualization helpers for complexity profiles.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from .dataset import ComplexityDataset
from .neighbors import boundary_points, minimum_spanning_tree


__all__ = ["plot_complexity_profile", "plot_spanning_tree_2d"]


def plot_complexity_profile(
    profile: dict,
    *,
    highlight: Sequence[str] | None = None,
    title: str = "Data complexity profile",
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Bar chart of the measure values of one profile.

    Measures that failed (value -1) are drawn as grey stubs at zero.

    Parameters
    ----------
    profile : dict of str -> float
        ``ComplexityProfiler.profile_`` or ``ComplexityReport.as_dict()``.
    highlight : sequence of str, optional
        Measure tags drawn in red.
    title : str
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    tags   = list(profile)
    values = [profile[t] for t in tags]
    failed = [v == -1 for v in values]
    shown  = [0.0 if bad else v for v, bad in zip(values, failed)]
    colors = [
        "#BBBBBB" if bad
        else "#C44E52" if (highlight is not None and t in highlight)
        else "#4C72B0"
        for t, bad in zip(tags, failed)
    ]

    if ax is None:
        fig, ax = plt.subplots(figsize=(max(6, len(tags) * 0.6), 4))
    else:
        fig = ax.get_figure()

    bars = ax.bar(range(len(tags)), shown, color=colors, edgecolor="white", linewidth=0.5)
    ax.set_xticks(range(len(tags)))
    ax.set_xticklabels(tags, fontsize=10)
    ax.set_ylabel("Value", fontsize=12)
    ax.set_title(title, fontsize=13)

    for bar, value, bad in zip(bars, values, failed):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height(),
            "n/a" if bad else f"{value:.3g}",
            ha="center", va="bottom", fontsize=7,
        )

    if any(failed):
        patch = mpatches.Patch(color="#BBBBBB", label="Not computed")
        ax.legend(handles=[patch], fontsize=9)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_spanning_tree_2d(
    dataset: ComplexityDataset,
    feature_indices: tuple[int, int] = (0, 1),
    *,
    tree: np.ndarray | None = None,
    title: str = "Minimum spanning tree",
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Scatter two attributes with the MST edges and boundary points.

    The tree is built on all attributes; only its projection on the two
    chosen ones is drawn.  Edges joining different classes are drawn in
    black and their endpoints (the points counted by N1) marked with "x".

    Parameters
    ----------
    dataset : ComplexityDataset
    feature_indices : (int, int)
        Pair of attribute indices to plot.
    tree : array, shape (n_examples - 1, 2), optional
        Precomputed output of :func:`minimum_spanning_tree`.
    title : str
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    if tree is None:
        tree = minimum_spanning_tree(dataset)
    i, j  = feature_indices
    X_sub = dataset.X[:, [i, j]]
    y     = dataset.y

    cmap      = plt.cm.tab10(np.linspace(0, 0.85, dataset.n_classes))
    boundary  = boundary_points(dataset, tree)

    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 6))
    else:
        fig = ax.get_figure()

    # --- Tree edges ---------------------------------------------------------
    for a, b in tree:
        crossing = y[a] != y[b]
        ax.plot(
            X_sub[[a, b], 0], X_sub[[a, b], 1],
            color="black" if crossing else "#999999",
            linewidth=1.2 if crossing else 0.6, zorder=1,
        )

    # --- Scatter points -----------------------------------------------------
    legend_handles = []
    for c, label in enumerate(dataset.classes_):
        mask = y == c
        ax.scatter(
            X_sub[mask, 0], X_sub[mask, 1],
            c=[cmap[c]], s=30, edgecolors="white",
            linewidths=0.4, zorder=3,
        )
        legend_handles.append(mpatches.Patch(color=cmap[c], label=f"Class {label}"))

    if boundary.any():
        ax.scatter(
            X_sub[boundary, 0], X_sub[boundary, 1],
            c="black", s=35, marker="x", linewidths=1.2, zorder=4,
        )
        legend_handles.append(mpatches.Patch(color="black", label="Boundary points"))

    ax.set_xlabel(dataset.attribute_names[i], fontsize=12)
    ax.set_ylabel(dataset.attribute_names[j], fontsize=12)
    ax.set_title(f"{title}\nN1 = {boundary.mean():.3f}", fontsize=13)
    ax.legend(handles=legend_handles, fontsize=9, loc="best")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
