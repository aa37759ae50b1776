"""String Format Scanners

Character-class and structural scanners for the string format checks.
Every scanner runs in a single linear pass (no backtracking pattern
matching), so worst-case cost is predictable on hostile input.
"""
from __future__ import annotations

import string

_DIGITS = frozenset(string.digits)
_HEX = frozenset(string.hexdigits)
_LOWER = frozenset(string.ascii_lowercase)
_ALNUM = frozenset(string.ascii_letters + string.digits)
_EMAIL_LOCAL = _ALNUM | frozenset("!#$%&'*+/=?^_`{|}~.-")
_HOST_LABEL = _ALNUM | frozenset("-")
_BASE64 = _ALNUM | frozenset("+/")
_NANOID = _ALNUM | frozenset("_-")
_SLUG = frozenset(string.ascii_lowercase + string.digits)
# Crockford's Base32: 0-9 A-H J K M N P-T V-Z (no I, L, O, U)
_CROCKFORD = frozenset("0123456789ABCDEFGHJKMNPQRSTVWXYZ")

_EMOJI_RANGES = (
    (0x1F600, 0x1F64F), (0x1F300, 0x1F5FF), (0x1F680, 0x1F6FF), (0x1F1E0, 0x1F1FF),
    (0x2702, 0x27B0), (0x2600, 0x26FF), (0xFE00, 0xFE0F), (0x1F900, 0x1F9FF),
    (0x1FA00, 0x1FA6F), (0x1FA70, 0x1FAFF), (0x231A, 0x231B), (0x23E9, 0x23F3),
    (0x23F8, 0x23FA), (0x200D, 0x200D), (0x2B50, 0x2B50), (0x2764, 0x2764),
)


def _all_in(s: str, allowed: frozenset[str]) -> bool:
    return all(c in allowed for c in s)


def _digits(s: str, n: int) -> tuple[int, str] | None:
    """Read exactly ``n`` ASCII digits; return (number, rest)."""
    if len(s) < n or not _all_in(head := s[:n], _DIGITS): return None
    return int(head), s[n:]


# ============================================================================
# Network
# ============================================================================

def is_hostname(s: str) -> bool:
    if not s or len(s) > 253: return False
    for label in s.split("."):
        if not label or len(label) > 63: return False
        if label[0] == "-" or label[-1] == "-": return False
        if not _all_in(label, _HOST_LABEL): return False
    return True


def is_email(s: str) -> bool:
    at = s.find("@")
    if at <= 0: return False
    local, domain = s[:at], s[at + 1:]
    return bool(domain) and _all_in(local, _EMAIL_LOCAL) and is_hostname(domain)


def is_url(s: str) -> bool:
    for scheme in ("https://", "http://"):
        if s.startswith(scheme):
            rest = s[len(scheme):]
            return bool(rest) and not any(c.isspace() for c in rest)
    return False


def is_ipv4(s: str) -> bool:
    parts = s.split(".")
    if len(parts) != 4: return False
    for part in parts:
        if not part or len(part) > 3 or not _all_in(part, _DIGITS): return False
        if len(part) > 1 and part[0] == "0": return False
        if int(part) > 255: return False
    return True


def is_ipv6(s: str) -> bool:
    if s == "::": return True
    compressed = "::" in s
    left, _, right = s.partition("::") if compressed else (s, "", "")
    groups = (left.split(":") if left else []) + (right.split(":") if right else [])
    if compressed and len(groups) > 7: return False
    if not compressed and len(groups) != 8: return False
    return all(g and len(g) <= 4 and _all_in(g, _HEX) for g in groups)


# ============================================================================
# Identifiers
# ============================================================================

def is_uuid(s: str) -> bool:
    """8-4-4-4-12 hex with dashes."""
    if len(s) != 36: return False
    for i, c in enumerate(s):
        if i in (8, 13, 18, 23):
            if c != "-": return False
        elif c not in _HEX:
            return False
    return True


def is_cuid2(s: str) -> bool:
    return bool(s) and s[0] in _LOWER and _all_in(s, _LOWER | _DIGITS)


def is_ulid(s: str) -> bool:
    return len(s) == 26 and _all_in(s.upper(), _CROCKFORD)


def is_nanoid(s: str) -> bool:
    return bool(s) and _all_in(s, _NANOID)


def is_slug(s: str) -> bool:
    """Lowercase alphanumeric words joined by single hyphens."""
    return bool(s) and all(part and _all_in(part, _SLUG) for part in s.split("-"))


# ============================================================================
# Encodings
# ============================================================================

def is_base64(s: str) -> bool:
    if not s or len(s) % 4: return False
    body = s.rstrip("=")
    return len(s) - len(body) <= 2 and _all_in(body, _BASE64)


def has_emoji(s: str) -> bool:
    return any(lo <= ord(c) <= hi for c in s for lo, hi in _EMOJI_RANGES)


# ============================================================================
# ISO 8601
# ============================================================================

def is_iso_date(s: str) -> bool:
    """YYYY-MM-DD with month 1-12 and day 1-31."""
    if len(s) != 10 or s[4] != "-" or s[7] != "-": return False
    if _digits(s[:4], 4) is None: return False
    month, day = _digits(s[5:7], 2), _digits(s[8:], 2)
    if month is None or day is None: return False
    return 1 <= month[0] <= 12 and 1 <= day[0] <= 31


def is_iso_time(s: str) -> bool:
    """HH:MM[:SS[.fraction]]"""
    if (hour := _digits(s, 2)) is None: return False
    rest = hour[1]
    if not rest.startswith(":") or (minute := _digits(rest[1:], 2)) is None: return False
    if hour[0] > 23 or minute[0] > 59: return False
    if not (rest := minute[1]): return True
    if not rest.startswith(":") or (second := _digits(rest[1:], 2)) is None: return False
    if second[0] > 59: return False
    if not (rest := second[1]): return True
    return rest.startswith(".") and len(rest) > 1 and _all_in(rest[1:], _DIGITS)


def _is_offset(tz: str) -> bool:
    if tz == "Z": return True
    if len(tz) != 6 or tz[0] not in "+-" or tz[3] != ":": return False
    hours, minutes = _digits(tz[1:3], 2), _digits(tz[4:], 2)
    return hours is not None and minutes is not None and hours[0] <= 23 and minutes[0] <= 59


def is_iso_datetime(s: str) -> bool:
    """YYYY-MM-DDTHH:MM[:SS[.fraction]][Z|+HH:MM|-HH:MM]"""
    date_part, sep, after = s.partition("T")
    if not sep or not is_iso_date(date_part): return False
    if after.endswith("Z"):
        return _is_offset("Z") and is_iso_time(after[:-1])
    if len(after) > 6 and after[-6] in "+-":
        return _is_offset(after[-6:]) and is_iso_time(after[:-6])
    return is_iso_time(after)
