from __future__ import annotations

from typing import List, Optional

CUSTOMER = "customer"
STAFF = "staff"
ROLES = (CUSTOMER, STAFF)


class Person:
    """A catalog member: either a customer who borrows books or a staff member.

    Customers keep the ISBNs of their currently borrowed books in ``borrowed``,
    in the order they were issued. Staff never borrow, so the list stays empty.
    """

    def __init__(self, person_id: int, name: str, role: str = CUSTOMER,
                 borrowed: Optional[List[int]] = None) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        self.person_id = person_id
        self.name = name.strip()
        self.role = role
        self.borrowed: List[int] = list(borrowed or [])

    @classmethod
    def customer(cls, person_id: int, name: str) -> "Person":
        return cls(person_id, name, role=CUSTOMER)

    @classmethod
    def staff(cls, person_id: int, name: str) -> "Person":
        return cls(person_id, name, role=STAFF)

    @property
    def is_customer(self) -> bool:
        return self.role == CUSTOMER

    @property
    def is_staff(self) -> bool:
        return self.role == STAFF

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} ({self.role} #{self.person_id})"

    def __repr__(self) -> str:
        return f"Person(person_id={self.person_id!r}, name={self.name!r}, role={self.role!r})"

    def to_dict(self) -> dict:
        data = {"id": self.person_id, "name": self.name, "role": self.role}
        if self.is_customer:
            data["borrowed"] = list(self.borrowed)
        return data
