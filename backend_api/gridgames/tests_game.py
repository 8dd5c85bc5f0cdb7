from unittest import mock

from django.urls import reverse
from rest_framework.test import APITestCase

from gridgames.models import BestScore
from gridgames.puzzles import SessionCoordinator, SlidingMergeEngine
from gridgames.rounds import get_store


class RoundFlowTests(APITestCase):
    def setUp(self):
        get_store().clear()

    def tearDown(self):
        get_store().clear()

    def _start(self, **body):
        resp = self.client.post(reverse('start-round'), body, format="json")
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def test_health(self):
        resp = self.client.get(reverse('Health'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Server is up!"})

    def test_start_round_defaults(self):
        data = self._start()
        self.assertIn("round_id", data)
        self.assertEqual(data["mode"], "normal")
        self.assertEqual(data["difficulty"], "medium")
        self.assertEqual(data["size"], 9)
        self.assertEqual(data["status"], "IN_PROGRESS")
        self.assertEqual(data["elapsed"], "00:00")
        self.assertEqual(len(data["board"]["cells"]), 9)
        self.assertIsNone(data["sticky_digit"])

    def test_start_round_other_modes(self):
        data = self._start(mode="2048", difficulty="easy")
        self.assertEqual(data["size"], 4)
        self.assertEqual(data["board"]["score"], 0)

        data = self._start(mode="nonogram", difficulty="medium")
        self.assertEqual(data["size"], 10)
        self.assertEqual(len(data["board"]["row_hints"]), 10)

    def test_start_round_rejects_unknown_mode(self):
        resp = self.client.post(reverse('start-round'), {"mode": "chess"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_round_detail(self):
        round_id = self._start(mode="ohh1", difficulty="easy")["round_id"]
        resp = self.client.get(reverse('round-detail', kwargs={"round_id": round_id}))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["round_id"], round_id)

        resp = self.client.get(reverse('round-detail', kwargs={"round_id": "missing"}))
        self.assertEqual(resp.status_code, 404)

    def test_select_and_input(self):
        data = self._start(mode="normal", difficulty="easy")
        round_id = data["round_id"]
        cells = data["board"]["cells"]
        row, col = next((r, c) for r in range(9) for c in range(9) if cells[r][c]["value"] == 0)
        with get_store().checkout(round_id) as coordinator:
            digit = coordinator.engine.solution[row][col]

        resp = self.client.post(reverse('select-cell'), {"round_id": round_id, "row": row, "col": col}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["round"]["selected"], [row, col])

        resp = self.client.post(reverse('input-number'), {"round_id": round_id, "digit": digit}, format="json")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["changed"])
        self.assertEqual(body["round"]["board"]["cells"][row][col]["value"], digit)
        self.assertEqual(body["round"]["board"]["mistakes"], 0)

    def test_cell_outside_board_is_rejected(self):
        round_id = self._start()["round_id"]
        resp = self.client.post(reverse('select-cell'), {"round_id": round_id, "row": 9, "col": 0}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_unknown_round_is_rejected(self):
        resp = self.client.post(reverse('toggle-notes'), {"round_id": "missing"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("round_id", resp.json())

    def test_notes_toggle(self):
        round_id = self._start()["round_id"]
        resp = self.client.post(reverse('toggle-notes'), {"round_id": round_id}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["round"]["notes_mode"])

    def test_toggle_cell(self):
        data = self._start(mode="ohh1", difficulty="easy")
        fixed = data["board"]["fixed"]
        row, col = next((r, c) for r in range(6) for c in range(6) if not fixed[r][c])
        resp = self.client.post(reverse('toggle-cell'), {"round_id": data["round_id"], "row": row, "col": col}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["changed"])
        self.assertEqual(resp.json()["round"]["board"]["grid"][row][col], 1)

    def test_move_persists_best_score(self):
        round_id = self._start(mode="2048", difficulty="easy")["round_id"]
        with get_store().checkout(round_id) as coordinator:
            coordinator.engine = SlidingMergeEngine(grid=[[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        resp = self.client.post(reverse('move'), {"round_id": round_id, "direction": "left"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["changed"])
        self.assertEqual(resp.json()["round"]["board"]["score"], 4)
        self.assertEqual(BestScore.objects.get(namespace="2048", size=4).score, 4)

        resp = self.client.get(reverse('best-scores'), {"mode": "2048"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([(s["size"], s["score"]) for s in resp.json()], [(4, 4)])

    def test_move_rejects_unknown_direction(self):
        round_id = self._start(mode="2048", difficulty="easy")["round_id"]
        resp = self.client.post(reverse('move'), {"round_id": round_id, "direction": "sideways"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_hint(self):
        round_id = self._start(mode="normal", difficulty="hard")["round_id"]
        resp = self.client.post(reverse('request-hint'), {"round_id": round_id}, format="json")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["type"], "reveal_cell")
        row, col = body["data"]["row"], body["data"]["col"]
        cell = body["round"]["board"]["cells"][row][col]
        self.assertEqual(cell["value"], body["data"]["value"])
        self.assertTrue(cell["fixed"])
        self.assertEqual(body["round"]["hints_used"], 1)

    def test_hint_for_2048_is_empty(self):
        round_id = self._start(mode="2048")["round_id"]
        body = self.client.post(reverse('request-hint'), {"round_id": round_id}, format="json").json()
        self.assertIsNone(body["type"])
        self.assertIsNone(body["data"])
        self.assertEqual(body["round"]["hints_used"], 0)

    def test_restart_switches_mode_in_place(self):
        round_id = self._start()["round_id"]
        resp = self.client.post(reverse('restart-round'), {"round_id": round_id, "mode": "nonogram", "difficulty": "easy"}, format="json")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["round_id"], round_id)
        self.assertEqual(data["mode"], "nonogram")
        self.assertEqual(data["size"], 5)

    def test_action_errors_are_not_reported_as_missing_rounds(self):
        round_id = self._start()["round_id"]
        with mock.patch.object(SessionCoordinator, "toggle_notes_mode", side_effect=KeyError("notes")):
            with self.assertRaises(KeyError):
                self.client.post(reverse('toggle-notes'), {"round_id": round_id}, format="json")

    def test_end_round(self):
        round_id = self._start(mode="2048")["round_id"]
        resp = self.client.post(reverse('end-round'), {"round_id": round_id}, format="json")
        self.assertEqual(resp.status_code, 204)
        resp = self.client.get(reverse('round-detail', kwargs={"round_id": round_id}))
        self.assertEqual(resp.status_code, 404)


class MetaTests(APITestCase):
    def test_modes(self):
        resp = self.client.get(reverse('get-modes'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), ["normal", "killer", "2048", "ohh1", "nonogram"])

    def test_difficulties(self):
        resp = self.client.get(reverse('get-difficulties'))
        self.assertEqual(resp.json(), {"easy": "Easy", "medium": "Medium", "hard": "Hard"})

        resp = self.client.get(reverse('get-difficulties'), {"mode": "2048"})
        self.assertEqual(resp.json(), {"easy": "4×4", "medium": "5×5", "hard": "6×6"})

        resp = self.client.get(reverse('get-difficulties'), {"mode": "chess"})
        self.assertEqual(resp.status_code, 400)

    def test_best_scores_empty(self):
        resp = self.client.get(reverse('best-scores'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])
