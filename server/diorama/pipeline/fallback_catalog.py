# ─────────────────────────────────────────────────────────────────────────────
# Fallback Catalog — pre-rendered famous homes
# ─────────────────────────────────────────────────────────────────────────────
# Served when an address has no street-level coverage or its imagery is
# privacy-blurred. Zero synthesis cost; the response says a substitute was
# used and names it.
#
# Images live under settings.gallery_base_url as "<home id>-<style id>.png".
# scripts/render_fallback_catalog.py regenerates them from a running server.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

_LANDMARK_STYLES = ("diorama", "ghibli", "lofi")
_SCREEN_HOME_STYLES = ("lofi", "lego", "simcity", "wesanderson", "bobross", "ukiyoe")


@dataclass(frozen=True)
class FallbackHome:
    """One well-known property with pre-rendered images per style."""

    id: str
    name: str
    location: str
    address: str
    images: Mapping[str, str] = field(default_factory=dict)

    def image_for(self, style_id: str) -> str | None:
        return self.images.get(style_id)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "location": self.location}


def _home(
    home_id: str,
    name: str,
    location: str,
    address: str,
    styles: Iterable[str],
    base_url: str,
) -> FallbackHome:
    base = base_url.rstrip("/")
    images = {style: f"{base}/{home_id}-{style}.png" for style in styles}
    return FallbackHome(home_id, name, location, address, images)


def default_homes(base_url: str = "/gallery") -> list[FallbackHome]:
    """The shipped catalog, in a fixed order (selection depends on it)."""
    rows: list[tuple[str, str, str, str, tuple[str, ...]]] = [
        # ── Architectural landmarks ──────────────────────────────────────────
        (
            "white-house",
            "The White House",
            "Washington, DC",
            "1600 Pennsylvania Ave NW, Washington, DC 20500",
            _LANDMARK_STYLES,
        ),
        (
            "fallingwater",
            "Fallingwater",
            "Mill Run, PA",
            "1491 Mill Run Rd, Mill Run, PA 15464",
            _LANDMARK_STYLES,
        ),
        (
            "gamble-house",
            "The Gamble House",
            "Pasadena, CA",
            "4 Westmoreland Place, Pasadena, CA 91103",
            _LANDMARK_STYLES,
        ),
        (
            "graceland",
            "Graceland",
            "Memphis, TN",
            "3764 Elvis Presley Blvd, Memphis, TN 38116",
            _LANDMARK_STYLES,
        ),
        # ── Film and TV homes ────────────────────────────────────────────────
        (
            "home-alone",
            "Home Alone House",
            "Winnetka, IL",
            "671 Lincoln Ave, Winnetka, IL 60093",
            _SCREEN_HOME_STYLES,
        ),
        (
            "christmas-story",
            "A Christmas Story House",
            "Cleveland, OH",
            "3159 W 11th St, Cleveland, OH 44109",
            _SCREEN_HOME_STYLES,
        ),
        (
            "goonies",
            "Goonies House",
            "Astoria, OR",
            "368 38th St, Astoria, OR 97103",
            _SCREEN_HOME_STYLES,
        ),
        (
            "stahl-house",
            "Stahl House",
            "Los Angeles, CA",
            "1635 Woods Dr, Los Angeles, CA 90069",
            _SCREEN_HOME_STYLES,
        ),
    ]
    return [
        _home(home_id, name, location, address, styles, base_url)
        for home_id, name, location, address, styles in rows
    ]


class FallbackCatalog:
    """Deterministic substitute selection by address hash."""

    def __init__(self, homes: Iterable[FallbackHome]) -> None:
        self._homes = list(homes)

    @classmethod
    def default(cls, base_url: str = "/gallery") -> FallbackCatalog:
        return cls(default_homes(base_url))

    @property
    def homes(self) -> list[FallbackHome]:
        return list(self._homes)

    def homes_for_style(self, style_id: str) -> list[FallbackHome]:
        return [home for home in self._homes if style_id in home.images]

    def select(self, address_key: str, style_id: str) -> FallbackHome | None:
        """Same address + style always yields the same home. None if no home has the style."""
        candidates = self.homes_for_style(style_id)
        if not candidates:
            return None
        digest = hashlib.sha256(address_key.encode("utf-8")).digest()
        return candidates[int.from_bytes(digest[:8], "big") % len(candidates)]

    def styles(self) -> set[str]:
        return {style for home in self._homes for style in home.images}

    def __len__(self) -> int:
        return len(self._homes)
