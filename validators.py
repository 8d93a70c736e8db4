import re
from typing import Optional


class IDValidator:
    """Parses the numeric identifiers (ISBN, customer ID) typed at the prompts."""

    @staticmethod
    def parse_id(raw: Optional[str]) -> int:
        if raw is None:
            raise ValueError("Invalid input, please enter a number.")
        s = raw.strip()
        # whole numbers only; "12abc" or "1.5" are rejected rather than truncated
        if not re.fullmatch(r"\d+", s):
            raise ValueError("Invalid input, please enter a number.")
        return int(s)


class TextValidator:
    """Basic checks for titles, authors and names entered at the prompts."""

    @staticmethod
    def _is_non_empty_alpha(text: Optional[str]) -> bool:
        if text is None:
            return False
        t = text.strip()
        if not t:
            return False
        return any(c.isalpha() for c in t)

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        # titles such as "1984" are purely numeric, so only emptiness is rejected
        return bool(title and title.strip())

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        if author is None:
            return False
        t = author.strip()
        if not t:
            return False
        return not t.isdigit()

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator._is_non_empty_alpha(name)
