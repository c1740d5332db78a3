"""Phone number normalization."""

import re

_NON_DIGITS = re.compile(r"[^0-9]")
_NANP_LENGTH = 11


def normalize_phone(raw: str) -> str:
    """Return the canonical +<country><digits> form used as the lookup key.

    Only North American numbers are understood: an 11 digit number starting
    with 1 keeps its country code, anything else gets +1 prefixed.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) == _NANP_LENGTH and digits.startswith("1"):
        return f"+{digits}"
    return f"+1{digits}"
