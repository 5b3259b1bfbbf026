from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional

import numpy as np

from detect_kit import Box, Detection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FridgeItem:
    name: str
    class_id: int
    confidence: float
    box: Box


def resolve_items(
    detections: Iterable[Detection],
    class_names: Optional[Mapping[int, str]] = None,
    unknown_label: str = "Unknown",
) -> List[FridgeItem]:
    """
    Attach labels to detections. Ids missing from `class_names` get `unknown_label`.
    """

    names = class_names or {}
    return [
        FridgeItem(
            name=names.get(det.class_id, unknown_label),
            class_id=det.class_id,
            confidence=det.confidence,
            box=det.box,
        )
        for det in detections
    ]


def scan_fridge_items(
    image_bgr: np.ndarray,
    detector: Callable[[np.ndarray], List[Detection]],
    class_names: Optional[Mapping[int, str]] = None,
    *,
    unknown_label: str = "Unknown",
) -> List[FridgeItem]:
    """
    Run `detector` (e.g. a DetectionPipeline) on one fridge image and label the result.
    """

    detections = detector(image_bgr)
    items = resolve_items(detections, class_names, unknown_label)
    logger.info("Scan found %d items", len(items))
    return items
