import json

from typer.testing import CliRunner

from main import app, build_library, LibraryManager

runner = CliRunner()


def test_list_seeded_books(seeded_lib):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "101 - The Hobbit by Tolkien [Available]" in result.stdout
    assert "102 - 1984 by George Orwell [Available]" in result.stdout
    assert "103 - Pride and Prejudice by Jane Austen [Available]" in result.stdout


def test_list_no_books(monkeypatch):
    monkeypatch.setattr(LibraryManager, "_instance", build_library(seed=False))
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout


def test_list_json_output(seeded_lib):
    seeded_lib.issue_book(101, 1)
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload[0] == {"isbn": 101, "title": "The Hobbit", "author": "Tolkien", "available": False}
    assert len(payload) == 3


def test_find_book_success(seeded_lib):
    result = runner.invoke(app, ["find", "101"])
    assert result.exit_code == 0
    assert "Book Found" in result.stdout
    assert "Title: The Hobbit" in result.stdout
    assert "Author: Tolkien" in result.stdout
    assert "Availability: Available" in result.stdout


def test_find_book_not_found(seeded_lib):
    result = runner.invoke(app, ["find", "999"])
    assert result.exit_code == 0
    assert "Book with ISBN 999 not found." in result.stdout


def test_find_rejects_non_numeric_isbn(seeded_lib):
    result = runner.invoke(app, ["find", "abc"])
    assert result.exit_code != 0


def test_issue_and_return(seeded_lib):
    result = runner.invoke(app, ["issue", "101", "1"])
    assert result.exit_code == 0
    assert "Issued ISBN 101 to customer 1, due 2026-01-19." in result.stdout
    assert seeded_lib.find_book(101).available is False

    result = runner.invoke(app, ["issue", "101", "1"])
    assert result.exit_code == 0
    assert "Book with ISBN 101 is already on loan." in result.stdout

    result = runner.invoke(app, ["return", "101", "--customer", "1"])
    assert result.exit_code == 0
    assert "Returned ISBN 101 from customer 1." in result.stdout
    assert seeded_lib.find_book(101).available is True


def test_issue_unknown_book(seeded_lib):
    result = runner.invoke(app, ["issue", "999", "1"])
    assert result.exit_code == 0
    assert "Not found: Book with ISBN 999 not found." in result.stdout
    assert seeded_lib.list_loans() == []


def test_return_not_on_loan(seeded_lib):
    result = runner.invoke(app, ["return", "102"])
    assert result.exit_code == 0
    assert "Book with ISBN 102 is not on loan." in result.stdout


def test_return_wrong_customer(seeded_lib):
    seeded_lib.issue_book(101, 1)
    result = runner.invoke(app, ["return", "101", "-c", "2"])
    assert result.exit_code == 0
    assert "No matching loan" in result.stdout
    assert seeded_lib.find_book(101).available is False


def test_customers_and_loans(seeded_lib):
    seeded_lib.issue_book(103, 2)

    result = runner.invoke(app, ["customers"])
    assert result.exit_code == 0
    assert "1 - Alice | Borrowed: None" in result.stdout
    assert "2 - Bob | Borrowed: Pride and Prejudice" in result.stdout

    result = runner.invoke(app, ["loans"])
    assert result.exit_code == 0
    assert "Pride and Prejudice -> Bob (due 2026-01-19)" in result.stdout


def test_loans_empty(seeded_lib):
    result = runner.invoke(app, ["loans"])
    assert "No active loans." in result.stdout


def test_staff_listing(seeded_lib):
    result = runner.invoke(app, ["staff"])
    assert "No staff registered." in result.stdout

    seeded_lib.register_staff(10, "Sam")
    result = runner.invoke(app, ["staff"])
    assert "10 - Sam" in result.stdout


def test_stats(seeded_lib):
    seeded_lib.issue_book(101, 1)
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "Total Books: 3" in result.stdout
    assert "Books On Loan: 1" in result.stdout
    assert "Customers: 2" in result.stdout


def test_register_staff(seeded_lib):
    result = runner.invoke(app, ["register-staff", "10", "Sam"])
    assert result.exit_code == 0
    assert "Staff registered: Sam (#10)" in result.stdout
    assert "10 - Sam" in result.stdout
    assert [s.person_id for s in seeded_lib.list_staff()] == [10]

    result = runner.invoke(app, ["register-staff", "10", "Sam"])
    assert "Staff with ID 10 already exists." in result.stdout


def test_customer_detail(seeded_lib):
    seeded_lib.issue_book(102, 2)
    result = runner.invoke(app, ["customer", "2"])
    assert result.exit_code == 0
    assert "Name: Bob" in result.stdout
    assert "1984 (due 2026-01-19)" in result.stdout

    result = runner.invoke(app, ["customer", "1"])
    assert "Borrowed books: None" in result.stdout


def test_customer_detail_not_found(seeded_lib):
    result = runner.invoke(app, ["customer", "42"])
    assert "Customer with ID 42 not found." in result.stdout


def test_help_mentions_in_memory_catalog():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "memory" in result.stdout
