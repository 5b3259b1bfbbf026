"""
Smart fridge application layer built on top of `detect_kit`.

Detection stays inside `detect_kit/`; this package covers the glue around it:
- fridge profile (thresholds + recipe table)
- image loading
- turning class ids into fridge items
- recipe suggestions and the scan report
"""

from __future__ import annotations

from .config import FridgeProfile, load_fridge_profile
from .ingest import LoadedImage, load_image
from .inventory import FridgeItem, resolve_items, scan_fridge_items
from .recipes import Recipe, recipes_from_mapping, suggest_recipes
from .reporting import format_scan_report, fridge_item_to_dict, scan_result_to_dict

__all__ = [
    "FridgeProfile",
    "load_fridge_profile",
    "LoadedImage",
    "load_image",
    "FridgeItem",
    "resolve_items",
    "scan_fridge_items",
    "Recipe",
    "recipes_from_mapping",
    "suggest_recipes",
    "format_scan_report",
    "fridge_item_to_dict",
    "scan_result_to_dict",
]
