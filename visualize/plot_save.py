import argparse
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from persistence import GameState, read_save
from settings import resolve_save_path

MAX_EXPONENT = 17  # 2 ** 17 is the largest tile a 4x4 board can hold


def save_panels(state: GameState) -> List[Tuple[str, np.ndarray, int]]:
    """The live board followed by the undo snapshots, oldest first."""
    history = state.history
    panels = [("Board", state.board.cells(), state.score)]
    for age in range(history.count - 1, -1, -1):
        idx = (history.write_index - age) % history.capacity
        title = "Undo current" if age == 0 else f"Undo -{age}"
        panels.append((title, history.tiles[idx], int(history.scores[idx])))
    return panels


def plot_state(state: GameState):
    panels = save_panels(state)
    fig, axes = plt.subplots(1, len(panels), figsize=(4 * len(panels), 4.5), squeeze=False)
    for ax, (title, cells, score) in zip(axes[0], panels):
        # Empty cells map to exponent 0 so log2 stays defined.
        exponents = np.log2(np.where(cells == 0, 1, cells))
        ax.imshow(exponents, cmap="magma", vmin=0, vmax=MAX_EXPONENT)
        for (row, col), value in np.ndenumerate(cells):
            if value:
                color = "white" if exponents[row, col] < MAX_EXPONENT / 2 else "black"
                ax.text(col, row, str(value), ha="center", va="center", color=color, fontsize=12)
        ax.set_title(f"{title}\nscore {score}")
        ax.set_xticks(range(cells.shape[1]))
        ax.set_yticks(range(cells.shape[0]))
    fig.tight_layout()
    return fig


def plot_save(path: str, output: Optional[str] = None):
    state = read_save(path)
    fig = plot_state(state)
    if output:
        fig.savefig(output, dpi=150, bbox_inches="tight")
        plt.close(fig)
        print(f"Saved plot of {path} to {output}")
    else:
        plt.show()
    return fig


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Plot the board and undo history of an nc2048 save")
    parser.add_argument("path", nargs="?", default=None, help="save file (defaults to $NC2048_SAVEFILE)")
    parser.add_argument("-o", "--output", default=None, help="write a PNG instead of showing the plot")
    args = parser.parse_args()
    plot_save(args.path or resolve_save_path(), args.output)
