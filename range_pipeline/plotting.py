from __future__ import annotations
from typing import Dict, List, Optional
import matplotlib.pyplot as plt

from .intervals import Interval

def _bars(ax, row: int, spans: List[Interval], alpha: float = 0.6):
    if not spans:
        return
    ax.broken_barh([(iv.start, iv.length) for iv in spans], (row - 0.4, 0.8), alpha=alpha)

def plot_stage_intervals(
    stage_sets: Dict[str, List[Interval]],
    title: str = "",
    show: bool = True,
    save_path: Optional[str] = None,
):
    """Draw one row per stage with that stage's working interval set.
    Row 0 is the first entry of stage_sets (usually the seeds).
    """
    names = list(stage_sets.keys())
    fig, ax = plt.subplots(figsize=(12, max(2.0, 0.5 * len(names) + 1)))
    for row, name in enumerate(names):
        _bars(ax, row, stage_sets[name])
    ax.set_yticks(range(len(names)))
    ax.set_yticklabels(names, fontsize=8)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("Value")
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
