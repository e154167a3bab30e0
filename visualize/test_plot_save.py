import os
import tempfile
import unittest

import matplotlib

matplotlib.use("Agg")

from game_session import GameSession  # noqa: E402
from persistence import GameState  # noqa: E402
from plot_save import plot_save, plot_state, save_panels  # noqa: E402
from spawner import SpawnMode  # noqa: E402


class PlotSaveTests(unittest.TestCase):
    def _session(self) -> GameSession:
        session = GameSession(spawn_mode=SpawnMode.DETERMINISTIC)
        session.start_new_game()
        session.play("RIGHT")
        session.play("LEFT")
        return session

    def test_panels_run_oldest_to_newest(self) -> None:
        panels = save_panels(self._session().state())
        self.assertEqual([title for title, _, _ in panels], ["Board", "Undo -2", "Undo -1", "Undo current"])
        self.assertEqual([score for _, _, score in panels], [4, 0, 0, 4])
        self.assertEqual(panels[1][1].tolist()[0], [2, 0, 0, 0])

    def test_empty_history_plots_board_only(self) -> None:
        fig = plot_state(GameState())
        self.assertEqual(len(fig.axes), 1)

    def test_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            save = os.path.join(tmp, "save.dat")
            out = os.path.join(tmp, "save.png")
            self.assertTrue(self._session().save_to_file(save))
            plot_save(save, out)
            with open(out, "rb") as fh:
                self.assertEqual(fh.read(8), b"\x89PNG\r\n\x1a\n")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
