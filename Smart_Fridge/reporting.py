"""
Console and JSON output for a single fridge scan.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .inventory import FridgeItem


def format_scan_report(items: Sequence[FridgeItem], suggestions: Sequence[str]) -> str:
    lines: List[str] = ["Items in the fridge:"]
    if not items:
        lines.append("No items found in the fridge.")
    else:
        lines.extend(f"- {item.name}" for item in items)

    lines.append("")
    lines.append("Suggested recipes:")
    if not suggestions:
        lines.append("No recipes found with the available ingredients.")
    else:
        lines.extend(f"You can make: {name}" for name in suggestions)
    return "\n".join(lines)


def fridge_item_to_dict(item: FridgeItem) -> Dict[str, Any]:
    return {
        "name": item.name,
        "class_id": item.class_id,
        "confidence": round(float(item.confidence), 4),
        "box": {
            "left": item.box.left,
            "top": item.box.top,
            "width": item.box.width,
            "height": item.box.height,
        },
    }


def scan_result_to_dict(items: Sequence[FridgeItem], suggestions: Sequence[str]) -> Dict[str, Any]:
    return {
        "items": [fridge_item_to_dict(item) for item in items],
        "recipes": list(suggestions),
    }
