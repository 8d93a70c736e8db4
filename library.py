import logging
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Any

from book import Book
from config import settings
from loan import Loan
from person import Person

logger = logging.getLogger(__name__)

# Ten years; keeps today + period well inside the range datetime.date supports
MAX_LOAN_PERIOD_DAYS = 3650


class LibraryError(Exception):
    """Base class for rejected catalog operations."""


class NotFoundError(LibraryError, LookupError):
    def __init__(self, kind: str, identifier: int) -> None:
        self.kind = kind
        self.identifier = identifier
        label = "ISBN" if kind == "book" else "ID"
        super().__init__(f"{kind.capitalize()} with {label} {identifier} not found.")


class AlreadyOnLoanError(LibraryError):
    def __init__(self, isbn: int) -> None:
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} is already on loan.")


class NotOnLoanError(LibraryError):
    def __init__(self, isbn: int) -> None:
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} is not on loan.")


class LoanRecordMissingError(LibraryError):
    """The book is marked as on loan but no matching loan record exists."""

    def __init__(self, isbn: int, customer_id: Optional[int] = None) -> None:
        self.isbn = isbn
        self.customer_id = customer_id
        if customer_id is None:
            message = f"No loan record found for ISBN {isbn}."
        else:
            message = f"No loan record found for ISBN {isbn} and customer {customer_id}."
        super().__init__(message)


class DuplicateIdError(LibraryError, ValueError):
    def __init__(self, kind: str, identifier: int) -> None:
        self.kind = kind
        self.identifier = identifier
        label = "ISBN" if kind == "book" else "ID"
        super().__init__(f"{kind.capitalize()} with {label} {identifier} already exists.")


class Library:
    """Owns every book, customer, staff member and loan, and enforces issue/return."""

    def __init__(self, loan_period_days: Optional[int] = None,
                 clock: Optional[Callable[[], date]] = None) -> None:
        self.loan_period_days = settings.loan_period_days if loan_period_days is None else int(loan_period_days)
        if self.loan_period_days < 0:
            raise ValueError("Loan period cannot be negative.")
        if self.loan_period_days > MAX_LOAN_PERIOD_DAYS:
            raise ValueError(f"Loan period cannot exceed {MAX_LOAN_PERIOD_DAYS} days.")
        self._clock = clock or date.today

        self.books: Dict[int, Book] = {}
        self.customers: Dict[int, Person] = {}
        self.staff: Dict[int, Person] = {}
        # At most one active loan per book, so the ledger is keyed by ISBN
        self.loans: Dict[int, Loan] = {}

    # ------------------------- Registration ------------------------- #
    def add_book(self, isbn: int, title: str, author: str) -> Book:
        """Add a new, available book. ISBNs must be unique."""
        if isbn in self.books:
            logger.warning(f"Rejected duplicate ISBN {isbn}")
            raise DuplicateIdError("book", isbn)
        book = Book(isbn, title, author)
        self.books[isbn] = book
        logger.info(f"Book added: {isbn} - {book.title}")
        return book

    def register_customer(self, customer_id: int, name: str) -> Person:
        if customer_id in self.customers:
            logger.warning(f"Rejected duplicate customer ID {customer_id}")
            raise DuplicateIdError("customer", customer_id)
        customer = Person.customer(customer_id, name)
        self.customers[customer_id] = customer
        logger.info(f"Customer registered: {customer_id} - {customer.name}")
        return customer

    def register_staff(self, staff_id: int, name: str) -> Person:
        if staff_id in self.staff:
            logger.warning(f"Rejected duplicate staff ID {staff_id}")
            raise DuplicateIdError("staff", staff_id)
        member = Person.staff(staff_id, name)
        self.staff[staff_id] = member
        logger.info(f"Staff registered: {staff_id} - {member.name}")
        return member

    # ------------------------- Lookups ------------------------- #
    def find_book(self, isbn: int) -> Optional[Book]:
        return self.books.get(isbn)

    def find_customer(self, customer_id: int) -> Optional[Person]:
        return self.customers.get(customer_id)

    def find_loan(self, isbn: int) -> Optional[Loan]:
        return self.loans.get(isbn)

    def list_books(self) -> List[Book]:
        return list(self.books.values())

    def list_customers(self) -> List[Person]:
        return list(self.customers.values())

    def list_staff(self) -> List[Person]:
        return list(self.staff.values())

    def list_loans(self) -> List[Loan]:
        return list(self.loans.values())

    def loans_for_customer(self, customer_id: int) -> List[Loan]:
        return [loan for loan in self.loans.values() if loan.customer_id == customer_id]

    # ------------------------- Issue / return ------------------------- #
    def issue_book(self, isbn: int, customer_id: int) -> Loan:
        """Lend an available book to a registered customer.

        All checks run before any state changes, so a rejected call leaves the
        catalog untouched.
        """
        book = self._require_book(isbn)
        customer = self._require_customer(customer_id)
        if not book.available:
            logger.warning(f"Issue rejected: ISBN {isbn} is already on loan")
            raise AlreadyOnLoanError(isbn)

        loan = Loan(isbn, customer_id, self._clock() + timedelta(days=self.loan_period_days))
        book.set_available(False)
        customer.borrowed.append(isbn)
        self.loans[isbn] = loan
        logger.info(f"Issued ISBN {isbn} to customer {customer_id}, due {loan.due_date.isoformat()}")
        return loan

    def return_book(self, isbn: int, customer_id: Optional[int] = None) -> Loan:
        """Take a book back and close its loan.

        When ``customer_id`` is given the loan must belong to that customer;
        otherwise the borrower is taken from the loan record.
        """
        book = self._require_book(isbn)
        if customer_id is not None:
            self._require_customer(customer_id)
        if book.available:
            logger.warning(f"Return rejected: ISBN {isbn} is not on loan")
            raise NotOnLoanError(isbn)

        loan = self.loans.get(isbn)
        if loan is None or (customer_id is not None and loan.customer_id != customer_id):
            logger.error(f"Loan record missing for ISBN {isbn} (customer {customer_id})")
            raise LoanRecordMissingError(isbn, customer_id)
        borrower = self.customers.get(loan.customer_id)
        if borrower is None or isbn not in borrower.borrowed:
            logger.error(f"Borrower {loan.customer_id} does not hold ISBN {isbn}")
            raise LoanRecordMissingError(isbn)

        borrower.borrowed.remove(isbn)
        book.set_available(True)
        del self.loans[isbn]
        logger.info(f"Returned ISBN {isbn} from customer {loan.customer_id}")
        return loan

    # ------------------------- Reporting ------------------------- #
    def get_statistics(self) -> Dict[str, Any]:
        today = self._clock()
        on_loan = sum(1 for b in self.books.values() if not b.available)
        return {
            "total_books": len(self.books),
            "available_books": len(self.books) - on_loan,
            "books_on_loan": on_loan,
            "customers": len(self.customers),
            "staff": len(self.staff),
            "active_loans": len(self.loans),
            "overdue_loans": sum(1 for loan in self.loans.values() if loan.is_overdue(today)),
        }

    def check_integrity(self) -> List[str]:
        """Return a description of every broken bookkeeping rule (empty if consistent)."""
        problems: List[str] = []
        for isbn, book in self.books.items():
            has_loan = isbn in self.loans
            if book.available and has_loan:
                problems.append(f"Book {isbn} is available but has an active loan")
            if not book.available and not has_loan:
                problems.append(f"Book {isbn} is on loan without a loan record")
        for isbn, loan in self.loans.items():
            if isbn not in self.books:
                problems.append(f"Loan references unknown book {isbn}")
            if loan.customer_id not in self.customers:
                problems.append(f"Loan for book {isbn} references unknown customer {loan.customer_id}")
        for customer_id, customer in self.customers.items():
            expected = {isbn for isbn, loan in self.loans.items() if loan.customer_id == customer_id}
            if set(customer.borrowed) != expected or len(customer.borrowed) != len(expected):
                problems.append(f"Customer {customer_id} borrowed list does not match the loan ledger")
        if problems:
            logger.debug(f"Integrity check found {len(problems)} problem(s)")
        return problems

    # ------------------------- Utilities ------------------------- #
    def _require_book(self, isbn: int) -> Book:
        book = self.books.get(isbn)
        if book is None:
            logger.warning(f"Unknown ISBN {isbn}")
            raise NotFoundError("book", isbn)
        return book

    def _require_customer(self, customer_id: int) -> Person:
        customer = self.customers.get(customer_id)
        if customer is None:
            logger.warning(f"Unknown customer ID {customer_id}")
            raise NotFoundError("customer", customer_id)
        return customer
