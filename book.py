from __future__ import annotations


class Book:
    """Represents a single book item in the catalog."""

    def __init__(self, isbn: int, title: str, author: str, available: bool = True) -> None:
        self.isbn = isbn
        self.title = title.strip()
        self.author = author.strip()
        self.available = available

    def set_available(self, flag: bool) -> None:
        self.available = bool(flag)

    @property
    def status(self) -> str:
        return "Available" if self.available else "On Loan"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ISBN: {self.isbn})"

    def __repr__(self) -> str:
        return f"Book(isbn={self.isbn!r}, title={self.title!r}, available={self.available!r})"

    def to_dict(self) -> dict:
        return {"isbn": self.isbn, "title": self.title, "author": self.author, "available": self.available}

