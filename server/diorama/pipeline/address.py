# ─────────────────────────────────────────────────────────────────────────────
# Address Sanitizer — normalization, character policy, region allowlist
# ─────────────────────────────────────────────────────────────────────────────
# Every address reaches the imagery provider's URLs, so anything outside a
# small character class is rejected rather than escaped. The region gate is
# business policy: add a RegionRule row to support a new country.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

MAX_ADDRESS_LENGTH = 200

_ALLOWED_PUNCTUATION = frozenset(",.#-'/&()")
_SPACE_RUNS = re.compile(r" {2,}")


@dataclass(frozen=True)
class RegionRule:
    """A supported region and the recognizers that identify its addresses."""

    name: str
    recognizers: tuple[re.Pattern[str], ...]
    # Captures group "city" and "region" for describe_location()
    locality: re.Pattern[str] | None = None
    aliases: frozenset[str] = field(default_factory=frozenset)

    def matches(self, address: str) -> bool:
        return any(pattern.search(address) for pattern in self.recognizers)


_US_STATES = (
    "AL|AK|AZ|AR|CA|CO|CT|DE|DC|FL|GA|HI|ID|IL|IN|IA|KS|KY|LA|ME|MD|MA|MI|MN|MS|MO|"
    "MT|NE|NV|NH|NJ|NM|NY|NC|ND|OH|OK|OR|PA|RI|SC|SD|TN|TX|UT|VT|VA|WA|WV|WI|WY|PR"
)
_CA_PROVINCES = "AB|BC|MB|NB|NL|NS|NT|NU|ON|PE|QC|SK|YT"
_CA_POSTAL = r"[ABCEGHJ-NPRSTVXY]\d[ABCEGHJ-NPRSTV-Z] ?\d[ABCEGHJ-NPRSTV-Z]\d"

REGION_RULES: tuple[RegionRule, ...] = (
    RegionRule(
        name="United States",
        recognizers=(
            re.compile(rf"\b(?:{_US_STATES})\s+\d{{5}}(?:-\d{{4}})?\b", re.IGNORECASE),
            re.compile(r"\b(?:USA|U\.S\.A\.|United States(?: of America)?)\s*$", re.IGNORECASE),
        ),
        locality=re.compile(
            rf"(?P<city>[^,\d]+),\s*(?P<region>{_US_STATES})\b(?:\s+\d{{5}}(?:-\d{{4}})?)?",
            re.IGNORECASE,
        ),
    ),
    RegionRule(
        name="Canada",
        recognizers=(
            re.compile(rf"\b(?:{_CA_PROVINCES})?\s*{_CA_POSTAL}\b", re.IGNORECASE),
            re.compile(r"\bCanada\s*$", re.IGNORECASE),
        ),
        locality=re.compile(
            rf"(?P<city>[^,\d]+),\s*(?P<region>{_CA_PROVINCES})\b",
            re.IGNORECASE,
        ),
    ),
)


def _has_allowed_characters(text: str) -> bool:
    return all(
        ch.isalpha() or ch.isdecimal() or ch == " " or ch in _ALLOWED_PUNCTUATION for ch in text
    )


def _normalize(raw: str, max_length: int) -> str:
    text = _SPACE_RUNS.sub(" ", raw.strip())
    # Strip again: truncation can leave a trailing space
    return text[:max_length].strip()


def find_region(address: str, rules: tuple[RegionRule, ...] = REGION_RULES) -> RegionRule | None:
    """First region whose recognizers accept the address, or None."""
    for rule in rules:
        if rule.matches(address):
            return rule
    return None


def sanitize(
    raw: Any,
    *,
    max_length: int = MAX_ADDRESS_LENGTH,
    rules: tuple[RegionRule, ...] = REGION_RULES,
) -> str | None:
    """Normalize an address or reject it.

    Returns the cleaned address, or None when the input is not a string,
    is empty, contains characters outside the allowed class, or belongs
    to no supported region. None is always a client error.
    """
    if not isinstance(raw, str):
        return None

    text = _normalize(raw, max_length)
    if not text:
        return None
    if not _has_allowed_characters(text):
        return None
    if find_region(text, rules) is None:
        return None
    return text


def cache_key(address: str) -> str:
    """Per-address cache key: trimmed and case-folded."""
    return address.strip().lower()


def describe_location(address: str, rules: tuple[RegionRule, ...] = REGION_RULES) -> str | None:
    """Human-readable locality for prompt placeholders, e.g. 'Washington, DC'.

    Uses the last "City, REGION" pair in the address so street names that
    precede the city are skipped. Returns None when nothing is recognized.
    """
    region = find_region(address, rules)
    if region is None or region.locality is None:
        return None

    matches = list(region.locality.finditer(address))
    if not matches:
        return None
    match = matches[-1]
    city = match.group("city").strip()
    code = match.group("region").upper()
    if not city:
        return code
    return f"{city}, {code}"
