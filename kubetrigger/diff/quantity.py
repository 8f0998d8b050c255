"""Kubernetes resource quantities compared by value.

``1Gi`` and ``1024Mi`` are the same amount of memory; ``500m`` and ``0.5``
are the same amount of CPU. A lexical comparison would report them as a
change and trigger a reconcile that does nothing.
"""

from __future__ import annotations

import re
from decimal import Decimal, Underflow, localcontext

_RE_QUANTITY = re.compile(
    r"^(?P<number>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE]|[eE][+-]?[0-9]+)?$"
)

_BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}

# Keys whose value is a quantity wherever they appear.
QUANTITY_KEYS = frozenset({"cpu", "memory", "storage", "ephemeral-storage", "size", "sizeLimit"})

# Mappings whose every value is a quantity (resources.limits, pvc capacity, quota hard).
QUANTITY_PARENTS = frozenset({"limits", "requests", "capacity", "allocatable", "hard"})


class QuantityError(ValueError):
    """Raised when a value is not a valid Kubernetes quantity."""


def parse_quantity(value: object) -> Decimal:
    """Parse a Kubernetes quantity string (or plain number) into a Decimal.

    Values that cannot be represented (exponents beyond the decimal
    context, or too long to convert) raise ``QuantityError`` like any
    other malformed quantity.
    """
    if isinstance(value, bool):
        raise QuantityError(f"not a quantity: {value!r}")
    if not isinstance(value, int | float | str):
        raise QuantityError(f"not a quantity: {value!r}")

    try:
        with localcontext() as ctx:
            ctx.traps[Underflow] = True
            if isinstance(value, str):
                return _parse_string(value)
            return Decimal(str(value))
    except QuantityError:
        raise
    except (ArithmeticError, ValueError) as exc:
        raise QuantityError(f"quantity out of range: {value!r}") from exc


def _parse_string(value: str) -> Decimal:
    match = _RE_QUANTITY.match(value.strip())
    if match is None:
        raise QuantityError(f"not a quantity: {value!r}")

    number = Decimal(match.group("number"))
    suffix = match.group("suffix")
    if not suffix:
        return number
    if suffix in _BINARY_SUFFIXES:
        return number * _BINARY_SUFFIXES[suffix]
    if suffix in _DECIMAL_SUFFIXES:
        return number * _DECIMAL_SUFFIXES[suffix]
    return number.scaleb(int(suffix[1:]))


def is_quantity_field(key: str | None, parent_key: str | None) -> bool:
    """Return True if the value at *key* inside *parent_key* holds a quantity."""
    if key is None:
        return False
    if key in QUANTITY_KEYS or key.startswith("hugepages-"):
        return True
    return parent_key in QUANTITY_PARENTS


def quantities_equal(a: object, b: object) -> bool:
    """Compare two quantities by value, falling back to plain equality."""
    try:
        return parse_quantity(a) == parse_quantity(b)
    except QuantityError:
        return a == b
