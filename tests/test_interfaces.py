import unittest
from datetime import datetime, timezone

from application.reports import format_amount, format_profit_loss, render_log, render_summary
from application.services import OperationResult
from domain.models import BuyInEvent, SettlementRow
from interfaces.commands import command_args, result_lines, split_name_and_amount, split_name_and_value
from interfaces.discord.pending import PendingConfirmation, PendingConfirmations
from interfaces.telegram.callback_data import (
    encode_clear_confirmation,
    encode_quick_buy_in,
    encode_remove_confirmation,
    parse_clear_confirmation,
    parse_quick_buy_in,
    parse_remove_confirmation,
)


class CommandParsingTests(unittest.TestCase):
    def test_command_args(self):
        self.assertEqual(command_args("/add Big Tony"), "Big Tony")
        self.assertEqual(command_args("/summary"), "")

    def test_split_name_and_amount(self):
        self.assertEqual(split_name_and_amount("Big Tony 100"), ("Big Tony", "100"))
        self.assertEqual(split_name_and_amount("Alice -20"), ("Alice", "-20"))
        self.assertEqual(split_name_and_amount("Big Tony"), ("Big Tony", None))
        self.assertEqual(split_name_and_amount("Alice"), ("Alice", None))

    def test_split_name_and_value(self):
        self.assertEqual(split_name_and_value("Big Tony Transfer"), ("Big Tony", "Transfer"))
        self.assertEqual(split_name_and_value("Alice"), ("Alice", None))

    def test_result_lines_include_warnings(self):
        result = OperationResult(success=True, warnings=["not saved"])
        self.assertEqual(result_lines(result, "ok", "failed"), ["ok", "not saved"])

        result = OperationResult(success=False, error_message="Name already exists.")
        self.assertEqual(result_lines(result, "ok", "failed"), ["Name already exists."])


class CallbackDataTests(unittest.TestCase):
    def test_quick_buy_in(self):
        data = encode_quick_buy_in("abc123", 200)
        self.assertEqual(data, "buy:abc123:200")
        self.assertEqual(parse_quick_buy_in(data), ("abc123", 200))

    def test_remove_confirmation_carries_requester(self):
        data = encode_remove_confirmation("abc", 987654321, True)
        self.assertEqual(data, "rm:yes:abc:987654321")
        self.assertEqual(parse_remove_confirmation(data), (True, "abc", 987654321))
        self.assertEqual(
            parse_remove_confirmation(encode_remove_confirmation("abc", 42, False)),
            (False, "abc", 42),
        )

    def test_clear_confirmation_carries_requester(self):
        self.assertEqual(parse_clear_confirmation(encode_clear_confirmation(42, True)), (True, 42))
        self.assertEqual(parse_clear_confirmation(encode_clear_confirmation(42, False)), (False, 42))

    def test_confirmation_data_fits_telegram_limit(self):
        data = encode_remove_confirmation("f" * 32, 9999999999999, False)
        self.assertLessEqual(len(data.encode("utf-8")), 64)

    def test_invalid_data(self):
        with self.assertRaises(ValueError):
            parse_quick_buy_in("buy:abc")
        with self.assertRaises(ValueError):
            parse_remove_confirmation("rm:maybe:abc:42")
        with self.assertRaises(ValueError):
            parse_remove_confirmation("rm:yes:abc")
        with self.assertRaises(ValueError):
            parse_clear_confirmation("clear:later:42")
        with self.assertRaises(ValueError):
            parse_clear_confirmation("clear:yes")


class PendingConfirmationsTests(unittest.TestCase):
    def test_new_prompt_replaces_requesters_previous_one(self):
        pending = PendingConfirmations()
        pending.add(1, PendingConfirmation("remove", "p1", requester_id=7))
        pending.add(2, PendingConfirmation("clear", None, requester_id=8))
        pending.add(3, PendingConfirmation("clear", None, requester_id=7))

        self.assertIsNone(pending.get(1))
        self.assertEqual(pending.get(2).requester_id, 8)
        self.assertEqual(pending.get(3).action, "clear")
        self.assertEqual(len(pending), 2)

    def test_unanswered_prompts_are_capped(self):
        pending = PendingConfirmations(max_size=3)
        for message_id in range(10):
            pending.add(message_id, PendingConfirmation("clear", None, requester_id=message_id))

        self.assertEqual(len(pending), 3)
        self.assertIsNone(pending.get(0))
        self.assertIsNotNone(pending.get(9))

    def test_pop_removes_prompt(self):
        pending = PendingConfirmations()
        pending.add(1, PendingConfirmation("remove", "p1", requester_id=7))
        self.assertEqual(pending.pop(1).player_id, "p1")
        self.assertIsNone(pending.pop(1))
        self.assertEqual(len(pending), 0)


class ReportTests(unittest.TestCase):
    def test_format_amount(self):
        self.assertEqual(format_amount(1250), "RM1,250")
        self.assertEqual(format_amount(12.5), "RM12.5")
        self.assertEqual(format_amount(-40), "RM-40")
        self.assertEqual(format_amount(100, currency="$"), "$100")

    def test_format_profit_loss(self):
        self.assertEqual(format_profit_loss(10), "+RM10")
        self.assertEqual(format_profit_loss(0), "+RM0")
        self.assertEqual(format_profit_loss(-60), "RM-60")

    def test_render_summary(self):
        rows = [
            SettlementRow(
                player_id="p1",
                player_name="Alice",
                final_chips="",
                total_buy_ins=150,
                rounded_chips=0,
                profit_loss=-150,
            )
        ]
        text = render_summary(rows)
        self.assertIn("Alice: buy-ins RM150 | final 0 | rounded 0 | P/L RM-150", text)
        self.assertEqual(render_summary([]), "No players yet - add a few to start.")

    def test_render_log(self):
        events = [
            BuyInEvent(
                id="e1",
                timestamp=datetime(2025, 8, 31, 20, 0, tzinfo=timezone.utc),
                player_id="p1",
                player_name="Alice",
                amount=100,
                note="Cash",
            )
        ]
        self.assertTrue(render_log(events).startswith("Alice bought in RM100 (Cash) - "))
        self.assertEqual(render_log([]), "No buy-ins yet.")


if __name__ == "__main__":
    unittest.main()
