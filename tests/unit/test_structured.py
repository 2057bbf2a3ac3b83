"""Tests for JSON-LD recipe extraction and duration parsing."""

import sys

import pytest

from helpers import make_json_ld_page, soup_of
from recipe_pipeline.extractors import structured
from recipe_pipeline.extractors.structured import (
    extract_json_ld,
    extract_structured_data,
    find_recipe_entity,
    parse_duration,
    resolve_image,
    resolve_images,
    resolve_ingredients,
    resolve_instructions,
    resolve_servings,
)


class TestParseDuration:
    """Tests for ISO 8601 duration to human text."""

    @pytest.mark.parametrize("duration,expected", [
        ("PT1H30M", "1 hour 30 minutes"),
        ("PT45M", "45 minutes"),
        ("PT2H", "2 hours"),
        ("PT1M", "1 minute"),
        ("PT1H1M", "1 hour 1 minute"),
        ("PT20M30S", "20 minutes"),
    ])
    def test_durations(self, duration: str, expected: str):
        """Hours and minutes are rendered with correct plurals."""
        assert parse_duration(duration) == expected

    @pytest.mark.parametrize("duration", ["PT0H0M", "PT30S", "PT"])
    def test_zero_duration_is_absent(self, duration: str):
        """Durations without hours or minutes give None, not ''."""
        assert parse_duration(duration) is None

    def test_non_duration_string_unchanged(self):
        """Free text is assumed to already be human readable."""
        assert parse_duration("about an hour") == "about an hour"

    @pytest.mark.parametrize("value", [None, 30, ["PT1H"], {"value": "PT1H"}])
    def test_non_string_is_absent(self, value):
        assert parse_duration(value) is None

    def test_oversized_number_unchanged(self):
        """A digit run too long to convert is kept as written."""
        duration = "PT" + "9" * 5000 + "M"
        assert parse_duration(duration) == duration


class TestFindRecipeEntity:
    """Tests for locating a Recipe in JSON-LD."""

    def test_direct_recipe(self):
        entity = {"@type": "Recipe", "name": "Soup"}
        assert find_recipe_entity(entity) is entity

    def test_type_list(self):
        entity = {"@type": ["Recipe", "NewsArticle"], "name": "Soup"}
        assert find_recipe_entity(entity) is entity

    def test_graph(self):
        """Recipes nested in @graph are found."""
        entity = {"@type": "Recipe", "name": "Soup"}
        data = {"@context": "https://schema.org", "@graph": [
            {"@type": "WebPage"},
            entity,
        ]}
        assert find_recipe_entity(data) is entity

    def test_first_in_list_wins(self):
        first = {"@type": "Recipe", "name": "First"}
        second = {"@type": "Recipe", "name": "Second"}
        assert find_recipe_entity([{"@type": "Person"}, first, second]) is first

    @pytest.mark.parametrize("data", [
        {"@type": "Article"},
        {"@graph": {"@type": "Recipe"}},
        "Recipe",
        None,
        [],
    ])
    def test_misses(self, data):
        assert find_recipe_entity(data) is None


class TestResolvers:
    """Tests for image / ingredient / instruction resolvers."""

    @pytest.mark.parametrize("image,cover,images", [
        ("https://x.com/a.jpg", "https://x.com/a.jpg", ["https://x.com/a.jpg"]),
        (["https://x.com/a.jpg", "https://x.com/b.jpg"], "https://x.com/a.jpg",
         ["https://x.com/a.jpg", "https://x.com/b.jpg"]),
        ({"@type": "ImageObject", "url": "https://x.com/u.jpg", "@id": "https://x.com/id"},
         "https://x.com/u.jpg", ["https://x.com/u.jpg"]),
        ({"@id": "https://x.com/id.jpg"}, "https://x.com/id.jpg", ["https://x.com/id.jpg"]),
        ([{"height": 10}, {"url": "https://x.com/b.jpg"}], "https://x.com/b.jpg",
         ["https://x.com/b.jpg"]),
        (None, None, []),
    ])
    def test_images(self, image, cover, images):
        assert resolve_image(image) == cover
        assert resolve_images(image) == images

    def test_ingredients_coerced_and_blanks_dropped(self):
        assert resolve_ingredients(["1 cup rice", "", "  ", 3, None]) == ["1 cup rice", "3"]

    @pytest.mark.parametrize("value", ["2 eggs", None, {"text": "2 eggs"}])
    def test_ingredients_not_a_list(self, value):
        assert resolve_ingredients(value) == []

    def test_instructions_string_split_on_newlines(self):
        text = "Boil water.\n\nAdd pasta.\nDrain."
        assert resolve_instructions(text) == ["Boil water.", "Add pasta.", "Drain."]

    def test_instructions_list_of_strings(self):
        assert resolve_instructions(["Boil water.", "Add pasta."]) == ["Boil water.", "Add pasta."]

    def test_section_flattens_in_order(self):
        """A HowToSection with two steps becomes two ordered steps."""
        instructions = [{
            "@type": "HowToSection",
            "name": "Sauce",
            "itemListElement": [
                {"@type": "HowToStep", "text": "Melt butter."},
                {"@type": "HowToStep", "text": "Whisk in flour."},
            ],
        }]
        assert resolve_instructions(instructions) == ["Melt butter.", "Whisk in flour."]

    def test_nested_sections_flatten_fully(self):
        instructions = [
            {"@type": "HowToStep", "text": "Preheat oven."},
            {"@type": "HowToSection", "itemListElement": [
                {"@type": "HowToStep", "text": "Make dough."},
                {"@type": "HowToSection", "itemListElement": [
                    {"@type": "HowToStep", "text": "Knead."},
                    "Rest 10 minutes.",
                ]},
            ]},
            {"@type": "HowToStep", "text": "Bake."},
        ]
        steps = resolve_instructions(instructions)
        assert steps == ["Preheat oven.", "Make dough.", "Knead.", "Rest 10 minutes.", "Bake."]
        assert all(isinstance(s, str) for s in steps)

    def test_unknown_step_objects_ignored(self):
        instructions = [
            {"@type": "HowToTip", "text": "Use cold butter."},
            {"@type": "HowToStep"},
            {"@type": "HowToStep", "text": "Bake."},
        ]
        assert resolve_instructions(instructions) == ["Bake."]

    @pytest.mark.parametrize("recipe_yield,expected", [
        (4.0, "4"),
        (2.5, "2.5"),
        (True, "true"),
        ([4.0, "4 servings"], "4, 4 servings"),
        (None, None),
    ])
    def test_servings_text(self, recipe_yield, expected):
        """Whole floats print as integers and booleans in lowercase."""
        assert resolve_servings(recipe_yield) == expected


class TestExtractStructuredData:
    """Tests for the JSON-LD extractor."""

    def test_full_recipe(self, recipe_entity: dict):
        soup = soup_of(make_json_ld_page(recipe_entity))
        data = extract_structured_data(soup)

        assert data is not None
        assert data.title == "Fluffy Pancakes"
        assert data.description == "Weekend breakfast pancakes."
        assert data.cover_image == "https://example.com/img/pancakes.jpg"
        assert data.images == [
            "https://example.com/img/pancakes.jpg",
            "https://example.com/img/stack.jpg",
        ]
        assert data.ingredients == ["2 cups flour", "2 eggs", "1 1/2 cups milk"]
        assert data.instructions == ["Whisk the dry ingredients.", "Add eggs and milk, then cook."]
        assert data.prep_time == "10 minutes"
        assert data.cook_time == "20 minutes"
        assert data.total_time == "30 minutes"
        assert data.servings == "4 servings"
        assert data.extraction_method == "json-ld"

    def test_malformed_block_skipped(self, recipe_entity: dict):
        """Broken JSON is skipped and the next block is used."""
        soup = soup_of(make_json_ld_page("{not json", recipe_entity))
        data = extract_structured_data(soup)
        assert data is not None
        assert data.title == "Fluffy Pancakes"

    def test_first_recipe_block_wins(self, recipe_entity: dict):
        other = dict(recipe_entity, name="Second Recipe")
        soup = soup_of(make_json_ld_page({"@type": "WebSite"}, recipe_entity, other))
        assert extract_structured_data(soup).title == "Fluffy Pancakes"

    def test_recipe_without_ingredients_is_unusable(self, recipe_entity: dict):
        """An entity with no ingredients stops the search and reports None."""
        empty = dict(recipe_entity, recipeIngredient=[])
        soup = soup_of(make_json_ld_page(empty, recipe_entity))
        assert extract_structured_data(soup) is None

    def test_no_json_ld(self):
        soup = soup_of("<html><body><h1>Pancakes</h1></body></html>")
        assert extract_json_ld(soup) == []
        assert extract_structured_data(soup) is None

    def test_placeholder_title_and_numeric_yield(self, recipe_entity: dict):
        entity = dict(recipe_entity, name={"en": "Pancakes"}, recipeYield=6, description=None)
        data = extract_structured_data(soup_of(make_json_ld_page(entity)))
        assert data.title == "Untitled Recipe"
        assert data.description is None
        assert data.servings == "6"

    def test_graph_page(self, recipe_entity: dict):
        page = {"@context": "https://schema.org", "@graph": [
            {"@type": "Organization", "name": "Blog"},
            recipe_entity,
        ]}
        data = extract_structured_data(soup_of(make_json_ld_page(page)))
        assert data is not None
        assert len(data.ingredients) == 3

    def test_deeply_nested_block_skipped(self, recipe_entity: dict):
        """A block nested past the recursion limit is skipped like broken JSON."""
        deep = "[" * 100000 + "]" * 100000
        soup = soup_of(make_json_ld_page(deep, recipe_entity))
        assert len(extract_json_ld(soup)) == 1
        assert extract_structured_data(soup).title == "Fluffy Pancakes"

    def test_oversized_prep_time_kept_verbatim(self, recipe_entity: dict):
        prep = "PT" + "9" * 5000 + "M"
        data = extract_structured_data(soup_of(make_json_ld_page(dict(recipe_entity, prepTime=prep))))
        assert data.prep_time == prep
        assert data.cook_time == "20 minutes"

    def test_unwalkable_block_skipped(self, monkeypatch, recipe_entity: dict):
        """Nesting deeper than the recursion limit doesn't stop the search."""
        deep: list = []
        for _ in range(sys.getrecursionlimit() + 100):
            deep = [deep]
        monkeypatch.setattr(structured, "extract_json_ld", lambda soup: [deep, recipe_entity])
        assert extract_structured_data(soup_of("<html></html>")).title == "Fluffy Pancakes"
