# Detects identity text written about imagery that was blurred or unreadable.
# Street View honours owner blur requests; the vision model then describes a
# smear, and synthesizing from that would invent a house that is not there.
#
# Patterns stay narrow: "partially obscured by trees" is a normal description.

import re

BLUR_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\bblurred\b",
        r"\bblurring\b",
        r"\bpixelat(?:ed|ion)\b",
        r"\bprivacy\s+(?:blur|mask|masking|filter|protection)\b",
        r"\b(?:heavily|completely|entirely|fully)\s+obscured\b",
        r"\bimpossible\s+to\s+(?:determine|discern|identify|make\s+out)\b",
    )
)


def find_blur_phrase(text: str) -> str | None:
    """First matching phrase, or None if the text reads as a real description."""
    for pattern in BLUR_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def is_privacy_obscured(text: str) -> bool:
    return find_blur_phrase(text) is not None
