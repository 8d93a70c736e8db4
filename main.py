import sys
import logging
from datetime import date
from typing import Callable, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from rich.markup import escape
from rich import box
import typer

from library import (
    Library,
    LibraryError,
    NotFoundError,
    AlreadyOnLoanError,
    NotOnLoanError,
    LoanRecordMissingError,
    DuplicateIdError,
)
from config import settings
from validators import IDValidator, TextValidator
from ui_helpers import (
    set_output_mode,
    print_books_result,
    print_book_detail,
    print_customers_result,
    print_customer_detail,
    print_staff_result,
    print_loans_result,
    print_stats_result,
)

logger = logging.getLogger(__name__)

APP_NAME = settings.app_name

console = Console()

# Demo catalog loaded on startup
SEED_BOOKS = [
    (101, "The Hobbit", "Tolkien"),
    (102, "1984", "George Orwell"),
    (103, "Pride and Prejudice", "Jane Austen"),
]
SEED_CUSTOMERS = [
    (1, "Alice"),
    (2, "Bob"),
]


def build_library(seed: Optional[bool] = None, loan_period_days: Optional[int] = None,
                  clock: Optional[Callable[[], date]] = None) -> Library:
    """Create a catalog, pre-populated with the demo data unless seeding is disabled."""
    lib = Library(loan_period_days=loan_period_days, clock=clock)
    if seed is None:
        seed = settings.seed_data
    if seed:
        for isbn, title, author in SEED_BOOKS:
            lib.add_book(isbn, title, author)
        for customer_id, name in SEED_CUSTOMERS:
            lib.register_customer(customer_id, name)
        logger.debug(f"Seeded catalog with {len(SEED_BOOKS)} books and {len(SEED_CUSTOMERS)} customers")
    return lib


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s: %(name)s: %(message)s",
    )


# Single Library instance shared by the commands and the menu
class LibraryManager:
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Get or create the Library singleton."""
        if cls._instance is None:
            cls._instance = build_library()
            logger.debug("Library instance created")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def describe_error(exc: LibraryError) -> str:
    """User-facing message for a rejected catalog operation."""
    if isinstance(exc, NotFoundError):
        return f"Not found: {exc}"
    if isinstance(exc, AlreadyOnLoanError):
        return f"{exc} It must be returned before it can be issued again."
    if isinstance(exc, NotOnLoanError):
        return f"{exc} Nothing to return."
    if isinstance(exc, LoanRecordMissingError):
        if exc.customer_id is not None:
            return f"No matching loan: {exc}"
        return f"Catalog inconsistency: {exc}"
    return f"Error: {exc}"


# --- Typer CLI Application ---
app = typer.Typer(help=(
    "Library catalog CLI. The catalog lives in memory only: each command starts from the "
    "seeded catalog and its changes are discarded on exit. Use `menu` for a working session."
))


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list():
    """List all books with their availability."""
    print_books_result(LibraryManager.get_instance().list_books())


@app.command("customers")
def cli_customers():
    """List customers and the books they hold."""
    lib = LibraryManager.get_instance()
    print_customers_result(lib, lib.list_customers())


@app.command("staff")
def cli_staff():
    """List staff members."""
    print_staff_result(LibraryManager.get_instance().list_staff())


@app.command("register-staff")
def cli_register_staff(staff_id: int, name: str):
    """Register a staff member and list the staff (this run only)."""
    lib = LibraryManager.get_instance()
    try:
        member = lib.register_staff(staff_id, name)
    except LibraryError as e:
        print(describe_error(e))
        return
    print(f"Staff registered: {member.name} (#{member.person_id})")
    print_staff_result(lib.list_staff())


@app.command("customer")
def cli_customer(customer_id: int):
    """Show one customer with borrowed books and due dates."""
    lib = LibraryManager.get_instance()
    customer = lib.find_customer(customer_id)
    if customer:
        print_customer_detail(lib, customer)
    else:
        print(f"Customer with ID {customer_id} not found.")


@app.command("loans")
def cli_loans():
    """List active loans."""
    lib = LibraryManager.get_instance()
    print_loans_result(lib, lib.list_loans())


@app.command("find")
def cli_find(isbn: int):
    """Find a book by ISBN and show its details."""
    book = LibraryManager.get_instance().find_book(isbn)
    if book:
        print_book_detail(book)
    else:
        print(f"Book with ISBN {isbn} not found.")


@app.command("issue")
def cli_issue(isbn: int, customer_id: int):
    """Issue a book to a customer (the loan is not kept after this command exits)."""
    lib = LibraryManager.get_instance()
    try:
        loan = lib.issue_book(isbn, customer_id)
    except LibraryError as e:
        print(describe_error(e))
        return
    print(f"Issued ISBN {isbn} to customer {customer_id}, due {loan.due_date.isoformat()}.")


@app.command("return")
def cli_return(
    isbn: int,
    customer: Optional[int] = typer.Option(None, "--customer", "-c", help="Only accept the return from this customer"),
):
    """Return a book to the catalog.

    Loans only exist within one run, so outside the `menu` session a freshly
    started catalog has nothing on loan to return.
    """
    lib = LibraryManager.get_instance()
    try:
        loan = lib.return_book(isbn, customer)
    except LibraryError as e:
        print(describe_error(e))
        return
    print(f"Returned ISBN {isbn} from customer {loan.customer_id}.")


@app.command("stats")
def cli_stats():
    """Show catalog statistics."""
    print_stats_result(LibraryManager.get_instance().get_statistics())


@app.command("menu")
def cli_menu():
    """Start the interactive menu."""
    run_menu()


# --- Interactive menu ---
def prompt_id(label: str, optional: bool = False) -> Optional[int]:
    """Ask for a numeric id until a valid one is entered.

    Invalid lines are reported and discarded; with ``optional`` an empty answer
    returns None.
    """
    while True:
        if optional:
            raw = Prompt.ask(label, console=console, default="", show_default=False)
        else:
            raw = Prompt.ask(label, console=console)
        if optional and not (raw or "").strip():
            return None
        try:
            return IDValidator.parse_id(raw)
        except ValueError as e:
            console.print(f"[bold red]{e}[/]")


def prompt_text(label: str, validate: Callable[[Optional[str]], bool]) -> str:
    while True:
        raw = Prompt.ask(label, console=console)
        if validate(raw):
            return raw.strip()
        console.print("[bold red]Invalid input, please try again.[/]")


def _report(exc: LibraryError) -> None:
    style = "bold red" if isinstance(exc, (LoanRecordMissingError, DuplicateIdError)) else "yellow"
    console.print(f"[{style}]⚠️  {escape(describe_error(exc))}[/]")


def list_all_books(lib: Library) -> None:
    print_books_result(lib.list_books(), mode="rich", console=console)


def customers(lib: Library) -> None:
    """List customers and staff, or show one customer's loans when an ID is given."""
    customer_id = prompt_id("👤 Enter customer ID for details (blank to list all)", optional=True)
    if customer_id is None:
        print_customers_result(lib, lib.list_customers(), mode="rich", console=console)
        print_staff_result(lib.list_staff(), mode="rich", console=console)
        return
    customer = lib.find_customer(customer_id)
    if customer is None:
        console.print(f"[yellow]⚠️  Customer with ID {customer_id} not found.[/]")
        return
    print_customer_detail(lib, customer, mode="rich", console=console)


def list_all_loans(lib: Library) -> None:
    print_loans_result(lib, lib.list_loans(), mode="rich", console=console)


def issue(lib: Library) -> None:
    """Issue a book to a customer."""
    isbn = prompt_id("📕 Enter ISBN")
    customer_id = prompt_id("👤 Enter customer ID")
    try:
        loan = lib.issue_book(isbn, customer_id)
    except LibraryError as e:
        _report(e)
        return
    book = lib.find_book(isbn)
    customer = lib.find_customer(customer_id)
    console.print(Panel.fit(
        f"[bold]{escape(book.title)}[/] issued to [bold]{escape(customer.name)}[/]\n"
        f"[bold]Due date:[/] {loan.due_date.isoformat()}",
        title="✅ Issued",
        border_style="green",
    ))


def return_(lib: Library) -> None:
    """Return a book; the customer ID is optional."""
    isbn = prompt_id("📗 Enter ISBN")
    customer_id = prompt_id("👤 Enter customer ID (blank to skip)", optional=True)
    try:
        loan = lib.return_book(isbn, customer_id)
    except LibraryError as e:
        _report(e)
        return
    book = lib.find_book(isbn)
    customer = lib.find_customer(loan.customer_id)
    console.print(Panel.fit(
        f"[bold]{escape(book.title)}[/] returned by [bold]{escape(customer.name)}[/]",
        title="✅ Returned",
        border_style="green",
    ))


def add(lib: Library) -> None:
    """Add a new book to the catalog."""
    isbn = prompt_id("🔢 Enter ISBN")
    title = prompt_text("📕 Enter title", TextValidator.validate_title)
    author = prompt_text("✍️  Enter author", TextValidator.validate_author)
    try:
        book = lib.add_book(isbn, title, author)
    except LibraryError as e:
        _report(e)
        return
    console.print(f"[green]Successfully added:[/] [bold]{escape(book.title)}[/] - {escape(book.author)}")


def register(lib: Library) -> None:
    """Register a new customer."""
    customer_id = prompt_id("🔢 Enter customer ID")
    name = prompt_text("👤 Enter name", TextValidator.validate_name)
    try:
        customer = lib.register_customer(customer_id, name)
    except LibraryError as e:
        _report(e)
        return
    console.print(f"[green]Customer registered:[/] [bold]{escape(customer.name)}[/] (#{customer.person_id})")


def register_staff(lib: Library) -> None:
    """Register a new staff member and show the staff list."""
    staff_id = prompt_id("🔢 Enter staff ID")
    name = prompt_text("🪪 Enter name", TextValidator.validate_name)
    try:
        member = lib.register_staff(staff_id, name)
    except LibraryError as e:
        _report(e)
        return
    console.print(f"[green]Staff registered:[/] [bold]{escape(member.name)}[/] (#{member.person_id})")
    print_staff_result(lib.list_staff(), mode="rich", console=console)


MENU_ITEMS = [
    ("1", "List all books", "📚"),
    ("2", "Issue a book", "📤"),
    ("3", "Return a book", "📥"),
    ("4", "Customers and staff", "👥"),
    ("5", "List active loans", "📖"),
    ("6", "Add a book", "➕"),
    ("7", "Register a customer", "🆕"),
    ("8", "Register a staff member", "🪪"),
    ("9", "Exit", "🚪"),
]


def run_menu(lib: Optional[Library] = None):
    """Simple interactive menu for the library catalog."""
    lib = lib or LibraryManager.get_instance()
    actions = {
        "1": list_all_books,
        "2": issue,
        "3": return_,
        "4": customers,
        "5": list_all_loans,
        "6": add,
        "7": register,
        "8": register_staff,
    }

    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in MENU_ITEMS:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        panel = Panel(
            table,
            title=f"{APP_NAME}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
        console.print(panel)

    while True:
        render_menu()
        choice = Prompt.ask(
            "Please choose an option",
            choices=[key for key, _, _ in MENU_ITEMS],
            console=console,
        ).strip()

        if choice == "9":
            console.print("[green]Goodbye![/]")
            break
        actions[choice](lib)
        console.print()  # blank line between operations


if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        configure_logging()
        run_menu()
