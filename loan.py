from __future__ import annotations

from datetime import date


class Loan:
    """Book ``isbn`` is out to customer ``customer_id`` until ``due_date``."""

    def __init__(self, isbn: int, customer_id: int, due_date: date) -> None:
        self.isbn = isbn
        self.customer_id = customer_id
        self.due_date = due_date

    def is_overdue(self, today: date) -> bool:
        return today > self.due_date

    def __repr__(self) -> str:
        return f"Loan(isbn={self.isbn!r}, customer_id={self.customer_id!r}, due_date={self.due_date.isoformat()!r})"

    def to_dict(self) -> dict:
        return {"isbn": self.isbn, "customer_id": self.customer_id, "due_date": self.due_date.isoformat()}
