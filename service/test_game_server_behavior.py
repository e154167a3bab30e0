"""Tests for the game server endpoints."""

import dataclasses
import json
import os
import tempfile
import unittest
from unittest.mock import patch

import game_server
from game_session import GameSession
from spawner import SpawnMode


class GameEndpointTests(unittest.TestCase):
    """Covers the game_server Flask views against a deterministic session."""

    def setUp(self) -> None:
        self.client = game_server.app.test_client()
        self.session = GameSession(spawn_mode=SpawnMode.DETERMINISTIC)
        self.session.start_new_game()
        self.tmp = tempfile.TemporaryDirectory()
        settings = dataclasses.replace(
            game_server.SETTINGS, save_path=os.path.join(self.tmp.name, "save.dat")
        )

        patchers = [
            patch("game_server.get_session", return_value=self.session),
            patch("game_server.SETTINGS", settings),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)

    def _post(self, path: str, payload=None):
        return self.client.post(
            path,
            data=json.dumps(payload or {}),
            content_type="application/json",
        )

    def test_state_reports_board(self) -> None:
        response = self.client.get("/state")
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload["grid"][0], [2, 0, 0, 0])
        self.assertEqual(payload["score"], 0)
        self.assertEqual(payload["spawn_mode"], "deterministic")
        self.assertFalse(payload["game_over"])

    def test_move_plays_a_turn(self) -> None:
        response = self._post("/move", {"direction": "RIGHT"})
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertTrue(payload["changed"])
        self.assertEqual(payload["grid"][0], [2, 0, 0, 2])
        self.assertTrue(payload["can_undo"])

        response = self._post("/move", {"direction": "LEFT"})
        payload = response.get_json()
        self.assertEqual(payload["grid"][0], [4, 2, 0, 0])
        self.assertEqual(payload["score"], 4)

    def test_no_op_move_is_not_an_error(self) -> None:
        response = self._post("/move", {"direction": "LEFT"})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.get_json()["changed"])

    def test_bad_move_requests(self) -> None:
        self.assertEqual(self._post("/move", {}).status_code, 400)
        response = self._post("/move", {"direction": "NORTH"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unknown direction", response.get_json()["error"])

    def test_undo(self) -> None:
        response = self._post("/undo")
        self.assertFalse(response.get_json()["undone"])

        self._post("/move", {"direction": "RIGHT"})
        response = self._post("/undo")
        payload = response.get_json()
        self.assertTrue(payload["undone"])
        self.assertEqual(payload["grid"][0], [2, 0, 0, 0])

    def test_mode_and_new_game(self) -> None:
        response = self._post("/mode", {"mode": "random"})
        self.assertEqual(response.get_json()["spawn_mode"], "random")
        self.assertEqual(self._post("/mode", {"mode": "chaotic"}).status_code, 400)
        self.assertEqual(self._post("/mode", {}).status_code, 400)

        response = self._post("/new", {"mode": "deterministic"})
        payload = response.get_json()
        self.assertEqual(payload["spawn_mode"], "deterministic")
        self.assertEqual(payload["grid"][0], [2, 0, 0, 0])
        self.assertEqual(self._post("/new", {"mode": "chaotic"}).status_code, 400)

    def test_save_and_load(self) -> None:
        self._post("/move", {"direction": "RIGHT"})
        response = self._post("/save")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()["saved"])

        self._post("/move", {"direction": "LEFT"})
        response = self._post("/load")
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertTrue(payload["loaded"])
        self.assertEqual(payload["grid"][0], [2, 0, 0, 2])
        self.assertEqual(payload["score"], 0)

    def test_load_without_save_fails_cleanly(self) -> None:
        self._post("/move", {"direction": "RIGHT"})
        response = self._post("/load")
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.get_json()["loaded"])
        self.assertEqual(self.session.board.tolist()[0], [2, 0, 0, 2])

    def test_save_failure_reported(self) -> None:
        with patch.object(self.session, "save_to_file", return_value=False):
            response = self._post("/save")
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.get_json()["saved"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
