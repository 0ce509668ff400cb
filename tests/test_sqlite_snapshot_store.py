import os
import tempfile
import unittest

from application.services import LedgerSession
from domain.repositories import LOG_SLOT, PLAYERS_SLOT
from infrastructure.db.snapshot_store_sqlite import SqliteSnapshotStore


class SqliteSnapshotStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmpdir.name, "ledger.db")
        self.store = SqliteSnapshotStore(self.db_path)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_missing_slot_reads_none(self):
        self.assertIsNone(self.store.read(PLAYERS_SLOT))

    def test_write_replaces_payload(self):
        self.store.write(PLAYERS_SLOT, "[]")
        self.store.write(PLAYERS_SLOT, '[{"id": "p1"}]')
        self.assertEqual(self.store.read(PLAYERS_SLOT), '[{"id": "p1"}]')

    def test_remove_slot(self):
        self.store.write(LOG_SLOT, "[]")
        self.store.remove(LOG_SLOT)
        self.store.remove(LOG_SLOT)
        self.assertIsNone(self.store.read(LOG_SLOT))

    def test_session_survives_restart(self):
        session = LedgerSession.load(self.store)
        alice = session.add_player("Alice").player
        session.add_buy_in(alice.id, 100)
        session.update_player(alice.id, {"final_chips": "87"})

        restarted = LedgerSession.load(SqliteSnapshotStore(self.db_path))
        row = restarted.settlement()[0]
        self.assertEqual(row.player_name, "Alice")
        self.assertEqual(row.total_buy_ins, 100)
        self.assertEqual(row.rounded_chips, 90)
        self.assertEqual(row.profit_loss, -10)

        restarted.clear_session(confirmed=True)
        self.assertEqual(LedgerSession.load(self.store).players(), [])


if __name__ == "__main__":
    unittest.main()
