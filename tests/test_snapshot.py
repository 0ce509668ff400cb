import json
import unittest
from datetime import datetime, timezone

from application.snapshot import dump_log, dump_players, load_log, load_players
from domain.errors import StorageError
from domain.models import BuyInEvent, Player


class SnapshotTests(unittest.TestCase):
    def test_player_field_names_are_stable(self):
        payload = dump_players([Player(id="p1", name="Alice", final_chips="355", default_note="Transfer")])
        self.assertEqual(
            json.loads(payload),
            [{"id": "p1", "name": "Alice", "finalChips": "355", "defaultNote": "Transfer"}],
        )

    def test_log_round_trip_keeps_types(self):
        events = [
            BuyInEvent(
                id="e1",
                timestamp=datetime(2025, 8, 31, 20, 0, 0, 123456, tzinfo=timezone.utc),
                player_id="p1",
                player_name="Alice",
                amount=12.5,
                note="Cash",
            ),
            BuyInEvent(
                id="e2",
                timestamp=datetime(2025, 8, 31, 21, 0, tzinfo=timezone.utc),
                player_id="p1",
                player_name="Alice",
                amount=100,
                note="",
            ),
        ]

        payload = dump_log(events)
        data = json.loads(payload)
        self.assertEqual(data[0]["ts"], "2025-08-31T20:00:00.123456Z")
        self.assertEqual(data[1]["amount"], 100)

        self.assertEqual(load_log(payload), events)

    def test_newest_first_snapshot_is_restored_in_insertion_order(self):
        payload = json.dumps(
            [
                {"id": "b2", "ts": "2025-08-31T21:00:00.000Z", "playerId": "p1",
                 "playerName": "Alice", "amount": 100, "note": "Cash"},
                {"id": "b1", "ts": "2025-08-31T20:00:00.000Z", "playerId": "p1",
                 "playerName": "Alice", "amount": 50, "note": "Cash"},
            ]
        )
        self.assertEqual([e.id for e in load_log(payload)], ["b1", "b2"])

    def test_newest_first_snapshot_keeps_creation_order_for_equal_timestamps(self):
        def entry(event_id, ts):
            return {"id": event_id, "ts": ts, "playerId": "p1",
                    "playerName": "Alice", "amount": 50, "note": "Cash"}

        payload = json.dumps(
            [
                entry("b3", "2025-08-31T21:00:00.000Z"),
                entry("b2", "2025-08-31T20:00:00.000Z"),
                entry("b1", "2025-08-31T20:00:00.000Z"),
            ]
        )
        self.assertEqual([e.id for e in load_log(payload)], ["b1", "b2", "b3"])

    def test_chronological_snapshot_keeps_order_for_equal_timestamps(self):
        events = [
            BuyInEvent(
                id=event_id,
                timestamp=datetime(2025, 8, 31, 20, 0, tzinfo=timezone.utc),
                player_id="p1",
                player_name="Alice",
                amount=50,
                note="Cash",
            )
            for event_id in ("b1", "b2")
        ]
        self.assertEqual([e.id for e in load_log(dump_log(events))], ["b1", "b2"])

    def test_missing_optional_player_fields_get_defaults(self):
        players = load_players('[{"id": "p1", "name": "Alice"}]')
        self.assertEqual(players[0].final_chips, "")
        self.assertEqual(players[0].default_note, "Cash")

    def test_malformed_payloads_raise_storage_error(self):
        for payload in ("not json", "{}", '[{"name": "no id"}]'):
            with self.subTest(payload=payload):
                with self.assertRaises(StorageError):
                    load_players(payload)

        with self.assertRaises(StorageError):
            load_log('[{"id": "e1", "ts": "2025-08-31T20:00:00Z", "playerId": "p1", '
                     '"playerName": "Alice", "amount": "100", "note": "Cash"}]')


if __name__ == "__main__":
    unittest.main()
