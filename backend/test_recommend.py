"""
Tests for prompt building, JSON extraction and the recommendation engine
"""

import asyncio
from datetime import date

import pytest

from conftest import FakeGenerator
from fridge.errors import (
    ConfigurationError,
    EmptyStateError,
    NoOutputError,
    NoRecipesError,
    ParsingError,
    ResponseFormatError,
    TransportError,
    ValidationError,
)
from fridge.models import Ingredient
from fridge.recommend import (
    RecommendationEngine,
    build_recipe_list_prompt,
    extract_json_array,
    parse_recipe_summaries,
)

SNAPSHOT = (
    Ingredient(id="1", name="Kimchi", expiration_date=date(2025, 3, 9)),
    Ingredient(id="2", name="tofu", expiration_date=date(2025, 3, 12)),
    Ingredient(id="3", name="eggs", expiration_date=date(2025, 3, 20)),
)


def test_extract_strips_surrounding_prose():
    text = 'Here you go:\n[{"title":"Kimchi Stew","ingredients":["kimchi"]}]\nEnjoy!'
    extracted = extract_json_array(text)
    assert extracted == '[{"title":"Kimchi Stew","ingredients":["kimchi"]}]'
    recipes = parse_recipe_summaries(extracted)
    assert len(recipes) == 1
    assert recipes[0].title == "Kimchi Stew"
    assert recipes[0].ingredients == ["kimchi"]


def test_extract_handles_code_fences():
    text = '```json\n[{"title": "Omelette", "ingredients": ["eggs"]}]\n```'
    assert extract_json_array(text) == '[{"title": "Omelette", "ingredients": ["eggs"]}]'


@pytest.mark.parametrize("text", [
    "no brackets at all",
    "only an opening [ bracket",
    "only a closing ] bracket",
    "reversed ] then [",
    "",
])
def test_extract_returns_none_without_bracket_span(text):
    assert extract_json_array(text) is None


@pytest.mark.parametrize("payload", [
    "[{\"title\": \"Stew\",]",
    "[1, 2]",
    "[{\"ingredients\": [\"kimchi\"]}]",
    "[{\"title\": \"   \"}]",
    "[{\"title\": \"Stew\", \"ingredients\": \"kimchi\"}]",
    "[{\"title\": \"Stew\", \"ingredients\": [1]}]",
])
def test_parse_rejects_wrong_shape(payload):
    with pytest.raises(ParsingError):
        parse_recipe_summaries(payload)


def test_parse_defaults_missing_ingredients_to_empty():
    recipes = parse_recipe_summaries('[{"title": " Fried Rice "}]')
    assert recipes[0].title == "Fried Rice"
    assert recipes[0].ingredients == []


def test_list_prompt_names_ingredients_and_limit():
    prompt = build_recipe_list_prompt(["kimchi", "tofu"], 5)
    assert "kimchi, tofu" in prompt
    assert "at most 5" in prompt
    assert "JSON array" in prompt


def test_recommend_recipes_restricts_and_truncates():
    response = "[" + ",".join(
        f'{{"title": "Dish {n}", "ingredients": ["kimchi", "TOFU", "pork"]}}' for n in range(7)
    ) + "]"
    generator = FakeGenerator(response)
    engine = RecommendationEngine(generator, max_recipes=5)

    recipes = asyncio.run(engine.recommend_recipes(SNAPSHOT))
    assert [r.title for r in recipes] == [f"Dish {n}" for n in range(5)]
    assert recipes[0].ingredients == ["Kimchi", "tofu"]
    assert generator.call_count == 1
    assert "Kimchi, tofu, eggs" in generator.prompts[0]


@pytest.mark.parametrize("response,error", [
    (None, NoOutputError),
    ("   ", NoOutputError),
    ("I could not think of anything.", ResponseFormatError),
    ("[{broken json}]", ParsingError),
    ("Sure! []", NoRecipesError),
    (TransportError("API error (500): upstream"), TransportError),
    (ValueError("unexpected"), TransportError),
])
def test_recommend_recipes_failures(response, error):
    generator = FakeGenerator(response)
    engine = RecommendationEngine(generator)
    with pytest.raises(error):
        asyncio.run(engine.recommend_recipes(SNAPSHOT))
    assert generator.call_count == 1


def test_recommend_recipes_preconditions_make_no_call():
    unconfigured = FakeGenerator("[]", configured=False)
    with pytest.raises(ConfigurationError):
        asyncio.run(RecommendationEngine(unconfigured).recommend_recipes(SNAPSHOT))
    assert unconfigured.call_count == 0

    configured = FakeGenerator("[]")
    with pytest.raises(EmptyStateError):
        asyncio.run(RecommendationEngine(configured).recommend_recipes(()))
    assert configured.call_count == 0


def test_describe_recipe_allows_empty_snapshot():
    generator = FakeGenerator("Step 1: boil water.")
    text = asyncio.run(RecommendationEngine(generator).describe_recipe("Ramen", ()))
    assert text == "Step 1: boil water."
    assert '"Ramen"' in generator.prompts[0]


def test_describe_recipe_requires_title():
    generator = FakeGenerator("unused")
    with pytest.raises(ValidationError):
        asyncio.run(RecommendationEngine(generator).describe_recipe("", SNAPSHOT))
    assert generator.call_count == 0


def test_recommend_text_returns_raw_answer():
    generator = FakeGenerator("Kimchi fried rice: ...")
    text = asyncio.run(RecommendationEngine(generator).recommend_text(SNAPSHOT))
    assert text == "Kimchi fried rice: ..."
    assert "Kimchi, tofu, eggs" in generator.prompts[0]
