from __future__ import annotations

import json
import re

# local@domain.tld; the local part allows the RFC 5322 atext characters and dots
EMAIL_RE = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return bool(EMAIL_RE.match(value))


def clean_text(value) -> str | None:
    """Trim a submitted form value; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value.strip() or None


def clean_hobbies(values) -> list[str]:
    """
    Normalize submitted hobbies to a list of stripped strings.
    Missing input and blank entries (unchecked boxes, empty inputs) are dropped.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    out: list[str] = []
    for v in values:
        v = clean_text(v)
        if v:
            out.append(v)
    return out


def encode_hobbies(hobbies: list[str] | None) -> str:
    """
    Encode hobbies for the `customers.hobbies` column.

    Compact JSON array text: ["reading","traveling"], or [] when there are none.
    Stored rows are compared against this exact text, so keep the separators.
    """
    return json.dumps(list(hobbies or []), separators=(",", ":"))


def decode_hobbies(raw: str | None) -> list[str]:
    if not raw or not raw.strip():
        return []
    value = json.loads(raw)
    if not isinstance(value, list):
        raise ValueError("Stored hobbies must be a JSON array.")
    return [str(v) for v in value]
