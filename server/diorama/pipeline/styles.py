# ─────────────────────────────────────────────────────────────────────────────
# Style Registry — closed allowlist of synthesis styles
# ─────────────────────────────────────────────────────────────────────────────
# Clients send a styleId, never a prompt. Every prompt that reaches the
# synthesis model is rendered from a StyleDefinition held here.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from diorama.pipeline.style_catalog import STYLE_TABLE

logger = structlog.get_logger(__name__)

_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")

# Used when a template placeholder has no value for this request
GENERIC_PHRASES: dict[str, str] = {
    "location": "Your Hometown",
}
DEFAULT_GENERIC_PHRASE = "this place"


class StyleCatalogError(ValueError):
    """The embedded style table is malformed. Raised at startup, never per request."""


class StyleDefinition(BaseModel):
    """One allowlisted style."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., pattern=r"^[a-z0-9-]+$", max_length=40)
    display_name: str = Field(..., min_length=1)
    use_reference: bool
    prompt_template: str = Field(..., min_length=20)

    @field_validator("prompt_template")
    @classmethod
    def placeholders_are_plain(cls, v: str) -> str:
        # Braces outside {name} placeholders would survive rendering verbatim
        stripped = _PLACEHOLDER.sub("", v)
        if "{" in stripped or "}" in stripped:
            raise ValueError("prompt_template has an unbalanced or non-identifier brace")
        return v

    @property
    def placeholders(self) -> frozenset[str]:
        return frozenset(_PLACEHOLDER.findall(self.prompt_template))

    def render_prompt(self, **context: str | None) -> str:
        """Fill {name} placeholders from context.

        Missing or empty values become a generic phrase, so no literal
        placeholder token ever reaches the model.
        """

        def _fill(match: re.Match[str]) -> str:
            name = match.group(1)
            value = context.get(name)
            if value:
                return value
            return GENERIC_PHRASES.get(name, DEFAULT_GENERIC_PHRASE)

        return _PLACEHOLDER.sub(_fill, self.prompt_template)


class StyleRegistry:
    """Validated, ordered lookup of StyleDefinitions by id."""

    def __init__(self, table: Iterable[Mapping[str, Any]] = STYLE_TABLE) -> None:
        styles: dict[str, StyleDefinition] = {}
        for index, row in enumerate(table):
            try:
                style = StyleDefinition.model_validate(row)
            except ValidationError as e:
                raise StyleCatalogError(f"style entry {index} is invalid: {e}") from e
            if style.id in styles:
                raise StyleCatalogError(f"duplicate style id '{style.id}'")
            styles[style.id] = style

        if not styles:
            raise StyleCatalogError("style catalog is empty")

        self._styles = styles
        logger.debug("style_registry_loaded", count=len(styles))

    def resolve(self, style_id: object) -> StyleDefinition | None:
        """Look up a style; anything that is not a known id string yields None."""
        if not isinstance(style_id, str):
            return None
        return self._styles.get(style_id)

    def list_ids(self) -> list[str]:
        return list(self._styles)

    def list_styles(self) -> list[StyleDefinition]:
        return list(self._styles.values())

    def __len__(self) -> int:
        return len(self._styles)

    def __contains__(self, style_id: object) -> bool:
        return self.resolve(style_id) is not None
