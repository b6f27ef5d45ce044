# helper/parsing.py
from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime

QUOTE_CHARS = '"\''
PLACEHOLDER = 'o.e.m.'


def get_value(lines: Iterable[str], key: str, delimiter: str = ':', case_insensitive: bool = False) -> str:
    """
    Extracts the value for `key` from semi-structured command output.

    Each line is split on the first `delimiter`; the left token (stripped) is
    compared to `key`. Labels are matched either verbatim or by their lower-case
    form, so callers can ask for 'manufacturer' and hit 'Manufacturer: ...'.
    With case_insensitive=True both sides are case-folded.

    The first matching line wins. Returns '' when nothing matches.

    Example:
        get_value(['Manufacturer: Acme Corp'], 'manufacturer') -> 'Acme Corp'
    """
    wanted = key.strip()
    folded = wanted.casefold()

    for line in lines:
        if delimiter not in line:
            continue

        token, value = line.split(delimiter, 1)
        token = token.strip()

        if case_insensitive:
            matched = token.casefold() == folded
        else:
            matched = token == wanted or token.lower() == wanted

        if matched:
            return value.strip().strip(QUOTE_CHARS).strip()

    return ''


# ------------------------------
# DATES
# ------------------------------
_DATE_FORMATS = [
    (re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})'), ('y', 'm', 'd')),
    (re.compile(r'^(\d{4})/(\d{1,2})/(\d{1,2})'), ('y', 'm', 'd')),
    (re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})'), ('m', 'd', 'y')),
    (re.compile(r'^(\d{1,2})\.(\d{1,2})\.(\d{4})'), ('d', 'm', 'y')),
    (re.compile(r'^(\d{4})(\d{2})(\d{2})'), ('y', 'm', 'd')),
]


def parse_release_date(value: str) -> str:
    """
    Normalises firmware dates to ISO YYYY-MM-DD.

    Accepts dmidecode's MM/DD/YYYY, ISO dates, DD.MM.YYYY, WMI timestamps
    (20190521000000.000000+000) and PowerShell's "5/21/2019 12:00:00 AM".
    Anything that does not form a real calendar date yields ''.
    """
    value = (value or '').strip()
    if not value:
        return ''

    for pattern, order in _DATE_FORMATS:
        match = pattern.match(value)
        if not match:
            continue
        parts = dict(zip(order, (int(g) for g in match.groups())))
        try:
            return datetime(parts['y'], parts['m'], parts['d']).strftime('%Y-%m-%d')
        except ValueError:
            return ''

    return ''


# ------------------------------
# MISC
# ------------------------------
def is_placeholder(value: str) -> bool:
    """Vendor placeholder such as 'To Be Filled By O.E.M.'"""
    return PLACEHOLDER in (value or '').lower()


def slugify(value: str) -> str:
    return re.sub(r'\s+', '-', (value or '').strip().lower())


def first_line(text: str) -> str:
    lines = (text or '').splitlines()
    return lines[0] if lines else ''
