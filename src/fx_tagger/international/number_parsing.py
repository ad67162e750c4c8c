"""Separator-agnostic amount normalization."""
from __future__ import annotations

import math
import re


def normalize_amount(raw_number: str) -> float:
    """Parse a scanned amount string to float without locale settings.

    Handles:
    - US format: "1,250.50" -> 1250.5
    - EU format: "1.234,56" -> 1234.56
    - Spaces as thousands separator: "1 250,50" -> 1250.5
    - Lone comma: decimal when exactly 2 digits follow ("12,50" -> 12.5),
      thousands otherwise ("1,250" -> 1250.0)
    - Repeated dots with no comma are thousands: "1.234.567" -> 1234567.0

    The lone-comma rule is a heuristic: "1,250" could also be a 3-place decimal.

    Raises ValueError for empty or non-numeric input.
    """
    if not raw_number or not raw_number.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"\s", "", raw_number)

    if "." in cleaned and "," in cleaned:
        # Whichever separator comes last is the decimal point
        if cleaned.rfind(",") > cleaned.rfind("."):
            decimal_sep, thousands_sep = ",", "."
        else:
            decimal_sep, thousands_sep = ".", ","
        cleaned = cleaned.replace(thousands_sep, "")
        head, _, tail = cleaned.rpartition(decimal_sep)
        cleaned = head.replace(decimal_sep, "") + "." + tail
    elif "," in cleaned:
        head, _, tail = cleaned.rpartition(",")
        if len(tail) == 2:
            cleaned = head.replace(",", "") + "." + tail
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    negative = cleaned.startswith("-")
    cleaned = re.sub(r"[^0-9.]", "", cleaned)
    if not re.search(r"[0-9]", cleaned):
        raise ValueError(f"No numeric content in: {raw_number!r}")

    result = float(cleaned)
    if not math.isfinite(result):
        raise ValueError(f"Amount out of range: {raw_number!r}")
    return -result if negative else result
