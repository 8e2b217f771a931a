"""Mask helpers for Brazilian documents and phone numbers.

Values are stored as plain digits; masks are applied only for display.
A value with an unexpected number of digits is returned unchanged.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def remove_mask(value: str | None) -> str:
    if not value:
        return ""
    return _NON_DIGITS.sub("", str(value))


def format_cpf(value: str) -> str:
    digits = remove_mask(value)
    if len(digits) != 11:
        return value
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cnpj(value: str) -> str:
    digits = remove_mask(value)
    if len(digits) != 14:
        return value
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_phone(value: str) -> str:
    digits = remove_mask(value)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return value


def format_postal_code(value: str) -> str:
    digits = remove_mask(value)
    if len(digits) != 8:
        return value
    return f"{digits[:5]}-{digits[5:]}"
