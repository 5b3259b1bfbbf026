from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Mapping, Sequence, Union


@dataclass(frozen=True)
class Recipe:
    name: str
    ingredients: FrozenSet[str]


RecipeKey = Union[str, Iterable[str]]


def recipes_from_mapping(mapping: Mapping[RecipeKey, str]) -> List[Recipe]:
    """
    Build recipes from an `{ingredients: recipe_name}` mapping, keeping its order.

    A bare string key is a single ingredient.
    """

    recipes: List[Recipe] = []
    for key, name in mapping.items():
        ingredients = frozenset([key]) if isinstance(key, str) else frozenset(key)
        recipes.append(Recipe(name=name, ingredients=ingredients))
    return recipes


def suggest_recipes(
    available: Iterable[str],
    recipes: Union[Sequence[Recipe], Mapping[RecipeKey, str]],
) -> List[str]:
    """
    Names of the recipes whose ingredients are all in `available`.

    Matching is exact on label text. Order follows `recipes`.
    """

    table = recipes_from_mapping(recipes) if isinstance(recipes, Mapping) else list(recipes)
    have = set(available)
    return [r.name for r in table if r.ingredients <= have]
