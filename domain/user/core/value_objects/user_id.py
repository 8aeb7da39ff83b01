"""UserId value object."""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from domain.user.core.exceptions.user_errors import InvalidUserIdError

# Integers the document store can encode (BSON int64)
STORE_INT_MIN = -(2**63)
STORE_INT_MAX = 2**63 - 1


def _to_number(raw: Any) -> Union[int, float]:
    """Read a loosely typed value as a number.

    Raises:
        InvalidUserIdError: If the value is missing, blank, not numeric or NaN
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidUserIdError(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        number = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidUserIdError(raw)
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError as e:
            raise InvalidUserIdError(raw) from e
    else:
        raise InvalidUserIdError(raw)

    if math.isnan(number):
        raise InvalidUserIdError(raw)
    return number


@dataclass(frozen=True)
class UserId:
    """External user identifier.

    Integer key chosen by the game client. It is not the store's internal
    document id.

    Examples:
        >>> UserId(5).value
        5

        >>> UserId.parse(" 42 ")
        UserId(42)

        >>> UserId.parse("5.0")
        UserId(5)

        >>> UserId.lookup("5.5") is None
        True
    """

    value: int

    def __post_init__(self) -> None:
        """Validate integer type."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidUserIdError(self.value)

    @staticmethod
    def parse(raw: Any) -> "UserId":
        """Parse a loosely typed value (query string, JSON number) into a UserId.

        Accepts ints, integral floats and their string forms with
        surrounding whitespace.

        Args:
            raw: Value received from the caller

        Returns:
            Parsed UserId

        Raises:
            InvalidUserIdError: If the value is missing, not numeric or
                not integral
        """
        number = _to_number(raw)
        if isinstance(number, float):
            if not math.isfinite(number) or not number.is_integer():
                raise InvalidUserIdError(raw)
            number = int(number)
        return UserId(number)

    @staticmethod
    def lookup(raw: Any) -> Optional["UserId"]:
        """Parse a query-string userID used to read a record.

        Any number is accepted. A blank value reads as 0. A number that no
        stored userID can equal (fractional, infinite or outside the
        store's integer range) gives None, so the read finds nothing.

        Raises:
            InvalidUserIdError: If the value is missing or not numeric
        """
        if isinstance(raw, str) and not raw.strip():
            return UserId(0)
        number = _to_number(raw)
        if isinstance(number, float):
            if not math.isfinite(number) or not number.is_integer():
                return None
            number = int(number)
        if not STORE_INT_MIN <= number <= STORE_INT_MAX:
            return None
        return UserId(number)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"UserId({self.value})"
