import io
import json

from rich.console import Console

from ui_helpers import (
    get_output_mode,
    set_output_mode,
    print_customers_result,
    print_customer_detail,
    print_loans_result,
    print_stats_result,
    print_books_result,
)


def test_output_mode_switching():
    assert get_output_mode() == "plain"
    set_output_mode("JSON")
    assert get_output_mode() == "json"
    set_output_mode("bogus")
    assert get_output_mode() == "json"


def test_customers_json(seeded_lib, capsys):
    seeded_lib.issue_book(101, 1)
    print_customers_result(seeded_lib, seeded_lib.list_customers(), mode="json")

    payload = json.loads(capsys.readouterr().out)
    assert payload[0] == {"id": 1, "name": "Alice", "role": "customer", "borrowed": [101],
                          "borrowed_titles": ["The Hobbit"]}
    assert payload[1]["borrowed_titles"] == []


def test_loans_json(seeded_lib, capsys):
    seeded_lib.issue_book(102, 2)
    print_loans_result(seeded_lib, seeded_lib.list_loans(), mode="json")

    payload = json.loads(capsys.readouterr().out)
    assert payload == [{"isbn": 102, "customer_id": 2, "due_date": "2026-01-19",
                        "title": "1984", "customer": "Bob"}]


def test_stats_json(seeded_lib, capsys):
    print_stats_result(seeded_lib.get_statistics(), mode="json")
    payload = json.loads(capsys.readouterr().out)
    assert payload["total_books"] == 3
    assert payload["active_loans"] == 0


def test_rich_books_table():
    console = Console(file=io.StringIO(), width=120, color_system=None)
    print_books_result([], mode="rich", console=console)
    assert "No books in library." in console.file.getvalue()


def test_customer_detail_json(seeded_lib, capsys):
    seeded_lib.issue_book(101, 1)
    print_customer_detail(seeded_lib, seeded_lib.find_customer(1), mode="json")

    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "Alice"
    assert payload["loans"] == [{"isbn": 101, "customer_id": 1, "due_date": "2026-01-19", "title": "The Hobbit"}]
