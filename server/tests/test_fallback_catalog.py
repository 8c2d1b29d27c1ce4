# ─────────────────────────────────────────────────────────────────────────────
# Tests — FallbackCatalog selection
# ─────────────────────────────────────────────────────────────────────────────

import pytest

from diorama.pipeline.fallback_catalog import FallbackCatalog, FallbackHome, default_homes
from diorama.pipeline.styles import StyleRegistry


@pytest.fixture
def catalog() -> FallbackCatalog:
    return FallbackCatalog.default()


def test_default_catalog_shape(catalog):
    assert len(catalog) == 8
    assert {home.id for home in catalog.homes} >= {"white-house", "home-alone", "graceland"}


def test_catalog_styles_exist_in_registry(catalog):
    registry = StyleRegistry()
    assert catalog.styles() <= set(registry.list_ids())


def test_image_urls(catalog):
    home = next(h for h in catalog.homes if h.id == "fallingwater")
    assert home.image_for("ghibli") == "/gallery/fallingwater-ghibli.png"
    assert home.image_for("hologram") is None


def test_base_url_trailing_slash():
    homes = default_homes("https://cdn.example.com/gallery/")
    assert homes[0].image_for("diorama") == "https://cdn.example.com/gallery/white-house-diorama.png"


def test_homes_for_style(catalog):
    assert len(catalog.homes_for_style("diorama")) == 4
    # lofi is offered by both landmark and screen homes
    assert len(catalog.homes_for_style("lofi")) == 8
    assert catalog.homes_for_style("hologram") == []


def test_select_is_deterministic(catalog):
    first = catalog.select("1 main st, austin, tx 78701", "lofi")
    for _ in range(5):
        assert catalog.select("1 main st, austin, tx 78701", "lofi") == first


def test_select_only_homes_with_style(catalog):
    for n in range(50):
        home = catalog.select(f"{n} elm st, austin, tx 78701", "lego")
        assert home is not None
        assert home.image_for("lego") is not None


def test_select_spreads_across_homes(catalog):
    picked = {catalog.select(f"{n} elm st, austin, tx 78701", "diorama").id for n in range(100)}
    assert len(picked) > 1


def test_select_none_when_style_uncovered(catalog):
    assert catalog.select("1 main st, austin, tx 78701", "coloringsheet") is None


def test_empty_catalog():
    assert FallbackCatalog([]).select("anything", "diorama") is None


def test_to_dict_is_public_fields_only():
    home = FallbackHome("x", "X House", "Nowhere, KS", "1 X Rd, Nowhere, KS 66000", {"lofi": "/x.png"})
    assert home.to_dict() == {"id": "x", "name": "X House", "location": "Nowhere, KS"}
