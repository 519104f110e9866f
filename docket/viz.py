"""
docket.viz
==========

Minimal plotting helpers used by the CLI ``summarize --chart`` option
and for documentation screenshots.  Importing :pymod:`docket` alone does
not pull in *matplotlib*; only this module does.

Outputs are PNGs.  The non-interactive ``Agg`` backend is selected so
the helpers work on servers without a display.
"""
from __future__ import annotations

import os
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import networkx as nx  # noqa: E402

from .models import Stage  # noqa: E402
from .reporting import PortfolioSummary  # noqa: E402
from .stages import MAIN_PATH, SHORT_CIRCUITS, stage_graph  # noqa: E402

_STATUS_COLORS = {
    "on_track": "#2b9348",
    "warning": "#f4a261",
    "critical": "#e76f51",
    "expired": "#9d0208",
    "extended": "#8d99ae",
    "completed": "#457b9d",
}


def _save(out_path: str | os.PathLike) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path


# ---------------------------------------------------------------------
# Plot 1 – bar chart of deadline counts by status
# ---------------------------------------------------------------------
def deadline_status_chart(summary: PortfolioSummary, out_path: str | os.PathLike) -> Path:
    """
    Bar chart of how many deadlines are in each status.

    Parameters
    ----------
    summary : PortfolioSummary
        Output of :func:`docket.reporting.summarize`.
    out_path : str or Path
        Where to save the PNG (parent folders are created).

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    labels = list(_STATUS_COLORS)
    counts = [getattr(summary, name) for name in labels]

    plt.figure()
    bars = plt.bar(labels, counts, color=[_STATUS_COLORS[k] for k in labels], edgecolor="#333")
    for rect, cnt in zip(bars, counts):
        plt.text(rect.get_x() + rect.get_width() / 2, cnt + 0.05, str(cnt),
                 ha="center", va="bottom", fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.title(f"Deadlines by status (compliance {summary.compliance_rate:.0%})")
    plt.ylabel("Deadline count")
    plt.tight_layout()
    return _save(out_path)


# ---------------------------------------------------------------------
# Plot 2 – stage adjacency graph
# ---------------------------------------------------------------------
def stage_graph_plot(out_path: str | os.PathLike) -> Path:
    """
    Draw the permitted stage transitions.  Main-path stages are green,
    short-circuits red, special-case branches grey.
    """
    g = stage_graph()
    plt.figure(figsize=(10, 8))
    pos = nx.spring_layout(g, seed=42)

    def color(stage: Stage) -> str:
        if stage in MAIN_PATH:
            return "#2b9348"
        if stage in SHORT_CIRCUITS:
            return "#e76f51"
        return "#8d99ae"

    nx.draw_networkx_nodes(g, pos, node_color=[color(s) for s in g.nodes], node_size=600)
    nx.draw_networkx_labels(g, pos, labels={s: s.value for s in g.nodes}, font_size=6)
    nx.draw_networkx_edges(g, pos, arrowstyle="->", arrowsize=12)

    plt.title("Permitted stage transitions")
    plt.axis("off")
    plt.tight_layout()
    return _save(out_path)
