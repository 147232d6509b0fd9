from src.payroll_portal.payroll_portal.core.enums import Severity
from src.payroll_portal.payroll_portal.status.board import StatusBoard


def test_new_message_replaces_previous_one():
    board = StatusBoard({})
    board.error("first")
    board.success("second")

    assert board.current.text == "second"
    assert board.current.severity == Severity.SUCCESS


def test_clear_empties_the_slot():
    storage = {}
    board = StatusBoard(storage)
    board.info("hello")

    board.clear()

    assert board.current is None
    assert "status" not in storage


def test_message_stays_until_dismissed():
    storage = {}
    StatusBoard(storage).info("kept")

    # A new board over the same storage (next request) still sees it.
    assert StatusBoard(storage).current.text == "kept"
    assert StatusBoard(storage).current.text == "kept"
