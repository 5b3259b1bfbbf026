from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from detect_kit import DetectionPostConfig

from .recipes import Recipe


@dataclass(frozen=True)
class FridgeProfile:
    schema_version: int = 1
    conf_threshold: float = 0.5
    score_threshold: float = 0.5
    iou_threshold: float = 0.4
    per_class_suppression: bool = False
    input_size: int = 416
    unknown_label: str = "Unknown"
    recipes: Tuple[Recipe, ...] = ()
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.schema_version != 1:
            raise ValueError("fridge_profile schema_version must be 1")
        if self.input_size < 32:
            raise ValueError("input_size must be >= 32")

    def post_config(self) -> DetectionPostConfig:
        return DetectionPostConfig(
            conf_threshold=self.conf_threshold,
            score_threshold=self.score_threshold,
            iou_threshold=self.iou_threshold,
            per_class_suppression=self.per_class_suppression,
        )


def _require_int(payload: Dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _optional_number(payload: Dict[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _parse_recipes(value: Any) -> Tuple[Recipe, ...]:
    if not isinstance(value, list):
        raise ValueError("recipes must be a list of objects")

    recipes: List[Recipe] = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"recipes[{i}] must be an object")
        unknown = sorted(set(item.keys()) - {"name", "ingredients"})
        if unknown:
            raise ValueError(f"Unknown keys in recipes[{i}]: {unknown}")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"recipes[{i}].name must be a non-empty string")
        ingredients = item.get("ingredients")
        if not isinstance(ingredients, list) or not all(isinstance(x, str) for x in ingredients):
            raise ValueError(f"recipes[{i}].ingredients must be a list of strings")
        recipes.append(Recipe(name=name.strip(), ingredients=frozenset(x.strip() for x in ingredients)))
    return tuple(recipes)


def load_fridge_profile(path: Path) -> FridgeProfile:
    if not path.exists():
        raise FileNotFoundError(f"Fridge profile not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid fridge profile JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Fridge profile must be a JSON object")

    allowed = {
        "schema_version",
        "conf_threshold",
        "score_threshold",
        "iou_threshold",
        "per_class_suppression",
        "input_size",
        "unknown_label",
        "recipes",
        "notes",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown fridge profile keys: {unknown}")

    per_class = payload.get("per_class_suppression", False)
    if not isinstance(per_class, bool):
        raise ValueError("per_class_suppression must be a boolean")
    input_size = payload.get("input_size", 416)
    if isinstance(input_size, bool) or not isinstance(input_size, int):
        raise ValueError("input_size must be an integer")
    unknown_label = payload.get("unknown_label", "Unknown")
    if not isinstance(unknown_label, str):
        raise ValueError("unknown_label must be a string")
    notes = payload.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise ValueError("notes must be a string if provided")

    return FridgeProfile(
        schema_version=_require_int(payload, "schema_version"),
        conf_threshold=_optional_number(payload, "conf_threshold", 0.5),
        score_threshold=_optional_number(payload, "score_threshold", 0.5),
        iou_threshold=_optional_number(payload, "iou_threshold", 0.4),
        per_class_suppression=per_class,
        input_size=input_size,
        unknown_label=unknown_label,
        recipes=_parse_recipes(payload.get("recipes", [])),
        notes=notes,
    )
