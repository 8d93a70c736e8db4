import os
import json
from typing import List, Any, Dict, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from book import Book
from config import settings
from library import Library
from loan import Loan
from person import Person

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"


def _print_empty(message: str, mode: str, console: Console) -> None:
    if mode == "rich":
        console.print(f"[yellow]{message}[/]")
    else:
        print(message)


def _borrowed_titles(lib: Library, customer: Person) -> List[str]:
    titles = []
    for isbn in customer.borrowed:
        book = lib.find_book(isbn)
        titles.append(book.title if book else str(isbn))
    return titles


def print_books_result(books: List[Book], mode: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Print the book list in the current output mode.
    - plain: 'ISBN - Title by Author [status]' lines, or 'No books in library.'
    - json: JSON array of isbn, title, author, available
    - rich: Rich table
    """
    mode = mode or get_output_mode()
    console = console or _console

    if not books:
        _print_empty("No books in library.", mode, console)
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Catalog", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status", no_wrap=True)
        for b in books:
            status = "[green]Available[/]" if b.available else "[red]On Loan[/]"
            table.add_row(str(b.isbn), escape(b.title), escape(b.author), status)
        console.print(table)
    else:
        for b in books:
            print(f"{b.isbn} - {b.title} by {b.author} [{b.status}]")


def print_book_detail(book: Book, mode: Optional[str] = None, console: Optional[Console] = None) -> None:
    mode = mode or get_output_mode()
    console = console or _console

    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        console.print(Panel.fit(
            f"[bold]ISBN:[/] {book.isbn}\n"
            f"[bold]Title:[/] {escape(book.title)}\n"
            f"[bold]Author:[/] {escape(book.author)}\n"
            f"[bold]Availability:[/] {book.status}",
            title="🔍 Book Found",
            border_style="green",
        ))
    else:
        print("Book Found")
        print(f"ISBN: {book.isbn}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Availability: {book.status}")


def print_customers_result(lib: Library, customers: List[Person], mode: Optional[str] = None,
                           console: Optional[Console] = None) -> None:
    """Print customers with the titles of the books they currently hold."""
    mode = mode or get_output_mode()
    console = console or _console

    if not customers:
        _print_empty("No customers registered.", mode, console)
        return

    if mode == "json":
        payload = []
        for c in customers:
            data = c.to_dict()
            data["borrowed_titles"] = _borrowed_titles(lib, c)
            payload.append(data)
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Customers", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Borrowed Books", style="white")
        for c in customers:
            titles = _borrowed_titles(lib, c)
            table.add_row(str(c.person_id), escape(c.name), escape(", ".join(titles)) if titles else "[dim]None[/]")
        console.print(table)
    else:
        for c in customers:
            titles = _borrowed_titles(lib, c)
            print(f"{c.person_id} - {c.name} | Borrowed: {', '.join(titles) if titles else 'None'}")


def print_customer_detail(lib: Library, customer: Person, mode: Optional[str] = None,
                          console: Optional[Console] = None) -> None:
    """Print one customer with each borrowed book and its due date."""
    mode = mode or get_output_mode()
    console = console or _console

    rows = []
    for loan in lib.loans_for_customer(customer.person_id):
        book = lib.find_book(loan.isbn)
        rows.append((loan, book.title if book else str(loan.isbn)))

    if mode == "json":
        data = customer.to_dict()
        data["loans"] = [dict(loan.to_dict(), title=title) for loan, title in rows]
        print(json.dumps(data, ensure_ascii=False))
    elif mode == "rich":
        lines = [f"[bold]Customer ID:[/] {customer.person_id}", f"[bold]Name:[/] {escape(customer.name)}"]
        if rows:
            lines.append("[bold]Borrowed books:[/]")
            lines.extend(f"  • {escape(title)} (due {loan.due_date.isoformat()})" for loan, title in rows)
        else:
            lines.append("[bold]Borrowed books:[/] None")
        console.print(Panel.fit("\n".join(lines), title="👤 Customer", border_style="cyan"))
    else:
        print(f"Customer ID: {customer.person_id}")
        print(f"Name: {customer.name}")
        if rows:
            print("Borrowed books:")
            for loan, title in rows:
                print(f"  {title} (due {loan.due_date.isoformat()})")
        else:
            print("Borrowed books: None")


def print_staff_result(staff: List[Person], mode: Optional[str] = None, console: Optional[Console] = None) -> None:
    mode = mode or get_output_mode()
    console = console or _console

    if not staff:
        _print_empty("No staff registered.", mode, console)
        return

    if mode == "json":
        print(json.dumps([s.to_dict() for s in staff], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="🪪 Staff", header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        for s in staff:
            table.add_row(str(s.person_id), escape(s.name))
        console.print(table)
    else:
        for s in staff:
            print(f"{s.person_id} - {s.name}")


def print_loans_result(lib: Library, loans: List[Loan], mode: Optional[str] = None,
                       console: Optional[Console] = None) -> None:
    """Print active loans as borrowed book, borrowing customer and due date."""
    mode = mode or get_output_mode()
    console = console or _console

    if not loans:
        _print_empty("No active loans.", mode, console)
        return

    rows = []
    for loan in loans:
        book = lib.find_book(loan.isbn)
        customer = lib.find_customer(loan.customer_id)
        rows.append((
            loan,
            book.title if book else str(loan.isbn),
            customer.name if customer else str(loan.customer_id),
        ))

    if mode == "json":
        payload = []
        for loan, title, name in rows:
            data = loan.to_dict()
            data.update({"title": title, "customer": name})
            payload.append(data)
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📖 Active Loans", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Borrowed Book", style="white")
        table.add_column("Customer", style="white")
        table.add_column("Due Date", no_wrap=True)
        for loan, title, name in rows:
            table.add_row(str(loan.isbn), escape(title), escape(name), loan.due_date.isoformat())
        console.print(table)
    else:
        for loan, title, name in rows:
            print(f"{title} -> {name} (due {loan.due_date.isoformat()})")


def print_stats_result(stats: Dict[str, Any], mode: Optional[str] = None, console: Optional[Console] = None) -> None:
    mode = mode or get_output_mode()
    console = console or _console

    if not stats:
        print("No statistics available.")
        return

    labels = [
        ("total_books", "Total Books"),
        ("available_books", "Available Books"),
        ("books_on_loan", "Books On Loan"),
        ("customers", "Customers"),
        ("staff", "Staff"),
        ("active_loans", "Active Loans"),
        ("overdue_loans", "Overdue Loans"),
    ]

    if mode == "json":
        print(json.dumps({key: stats.get(key, 0) for key, _ in labels}, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {stats.get(key, 0)}" for key, label in labels)
        console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for key, label in labels:
            print(f"{label}: {stats.get(key, 0)}")
