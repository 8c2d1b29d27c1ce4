# ─────────────────────────────────────────────────────────────────────────────
# Tests — StyleRegistry and the shipped style catalog
# ─────────────────────────────────────────────────────────────────────────────

import pytest
from pydantic import ValidationError

from diorama.pipeline.style_catalog import STYLE_TABLE
from diorama.pipeline.styles import StyleCatalogError, StyleDefinition, StyleRegistry


def _row(
    style_id: str = "sketch", template: str = "Pencil sketch of the house, loose hatching."
) -> dict:
    return {
        "id": style_id,
        "display_name": style_id.title(),
        "use_reference": True,
        "prompt_template": template,
    }


@pytest.fixture(scope="module")
def registry() -> StyleRegistry:
    return StyleRegistry()


class TestShippedCatalog:
    def test_loads(self, registry):
        assert len(registry) == len(STYLE_TABLE) == 20

    def test_ids_unique_and_ordered(self, registry):
        assert registry.list_ids() == [row["id"] for row in STYLE_TABLE]
        assert registry.list_ids()[0] == "diorama"

    @pytest.mark.parametrize("style_id", ["bauhaus", "wesanderson", "ukiyoe", "travelposter"])
    def test_text_only_styles(self, registry, style_id):
        assert registry.resolve(style_id).use_reference is False

    @pytest.mark.parametrize("style_id", ["diorama", "lego", "ghibli", "lofi"])
    def test_reference_styles(self, registry, style_id):
        assert registry.resolve(style_id).use_reference is True

    def test_only_travelposter_uses_location(self, registry):
        with_placeholders = [s.id for s in registry.list_styles() if s.placeholders]
        assert with_placeholders == ["travelposter"]


class TestResolve:
    @pytest.mark.parametrize("style_id", ["DIORAMA", " diorama", "", "../etc", None, 7, ["lego"]])
    def test_unknown_or_wrong_type(self, registry, style_id):
        assert registry.resolve(style_id) is None
        assert style_id not in registry

    def test_known(self, registry):
        style = registry.resolve("ghibli")
        assert isinstance(style, StyleDefinition)
        assert "ghibli" in registry


class TestRenderPrompt:
    def test_fills_location(self, registry):
        prompt = registry.resolve("travelposter").render_prompt(location="Pasadena, CA")
        assert '"Visit Pasadena, CA"' in prompt

    @pytest.mark.parametrize("location", [None, ""])
    def test_missing_location_gets_generic_phrase(self, registry, location):
        prompt = registry.resolve("travelposter").render_prompt(location=location)
        assert '"Visit Your Hometown"' in prompt
        assert "{" not in prompt

    def test_unknown_placeholder_gets_default_phrase(self):
        style = StyleDefinition.model_validate(
            _row(template="Postcard from {neighborhood}, painted in gouache.")
        )
        assert style.render_prompt() == "Postcard from this place, painted in gouache."

    def test_template_without_placeholders_unchanged(self, registry):
        style = registry.resolve("diorama")
        assert style.render_prompt(location="Austin, TX") == style.prompt_template


class TestCatalogValidation:
    def test_empty_table(self):
        with pytest.raises(StyleCatalogError, match="empty"):
            StyleRegistry([])

    def test_duplicate_id(self):
        with pytest.raises(StyleCatalogError, match="duplicate"):
            StyleRegistry([_row("sketch"), _row("sketch")])

    @pytest.mark.parametrize(
        "row",
        [
            _row("Sketch"),
            _row("sketch style"),
            _row(template="too short"),
            _row(template="A {location poster with an unclosed brace placeholder"),
            _row(template="A poster with {Location} in the wrong case, long enough"),
            {"id": "sketch", "display_name": "Sketch", "prompt_template": "x" * 40},
        ],
    )
    def test_invalid_row(self, row):
        with pytest.raises(StyleCatalogError, match="invalid"):
            StyleRegistry([row])

    def test_definitions_are_frozen(self, registry):
        style = registry.resolve("lego")
        with pytest.raises(ValidationError):
            style.prompt_template = "anything the client wants"
