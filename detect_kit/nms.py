from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .types import Box, Candidate, Detection

logger = logging.getLogger(__name__)


@dataclass
class NMSConfig:
    iou_threshold: float = 0.4
    # None keeps every box that survives suppression.
    max_detections: Optional[int] = None


def box_iou(box: np.ndarray, boxes: np.ndarray) -> np.ndarray:
    """
    IoU of one xyxy box (4,) against boxes (N, 4) in xyxy.

    Boxes with zero or negative area get IoU 0 with everything.
    """

    boxes = np.asarray(boxes, dtype=np.float64).reshape(-1, 4)
    x1, y1, x2, y2 = (float(v) for v in box)
    area = max(0.0, x2 - x1) * max(0.0, y2 - y1)
    if area <= 0.0 or boxes.shape[0] == 0:
        return np.zeros((boxes.shape[0],), dtype=np.float64)

    areas = np.maximum(0.0, boxes[:, 2] - boxes[:, 0]) * np.maximum(0.0, boxes[:, 3] - boxes[:, 1])

    xx1 = np.maximum(x1, boxes[:, 0])
    yy1 = np.maximum(y1, boxes[:, 1])
    xx2 = np.minimum(x2, boxes[:, 2])
    yy2 = np.minimum(y2, boxes[:, 3])

    w = np.maximum(0.0, xx2 - xx1)
    h = np.maximum(0.0, yy2 - yy1)
    inter = w * h
    union = area + areas - inter

    iou = np.zeros_like(inter)
    np.divide(inter, union, out=iou, where=(areas > 0.0) & (union > 0.0))
    return iou


def iou(a: Box, b: Box) -> float:
    """
    Intersection-over-Union of two boxes.
    """

    return float(box_iou(np.array(a.as_xyxy()), np.array([b.as_xyxy()]))[0])


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig) -> np.ndarray:
    """
    Greedy NumPy NMS. Expects boxes shape (N,4) in xyxy and scores shape (N,).
    Returns indices of kept boxes, highest score first.

    Equal scores keep their input order. A box is suppressed when its IoU with
    an already kept box is >= `cfg.iou_threshold`.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.int64)

    order = np.argsort(-scores, kind="stable")
    keep: List[int] = []

    while order.size > 0:
        if cfg.max_detections is not None and len(keep) >= cfg.max_detections:
            break
        i = order[0]
        keep.append(int(i))

        rest = order[1:]
        overlap = box_iou(boxes[i], boxes[rest])
        order = rest[overlap < cfg.iou_threshold]

    return np.array(keep, dtype=np.int64)


def suppress(
    candidates: Sequence[Candidate],
    score_threshold: float = 0.5,
    overlap_threshold: float = 0.4,
    *,
    per_class_suppression: bool = False,
    max_detections: Optional[int] = None,
) -> List[Detection]:
    """
    Select non-overlapping, high-confidence detections from `candidates`.

    Args:
        candidates: decoder output (Detections are accepted too)
        score_threshold: candidates need confidence strictly above this
        overlap_threshold: IoU at which a lower-scored box counts as duplicate
        per_class_suppression: if False, boxes of different classes suppress
            each other; if True, each class is suppressed on its own and the
            results are merged by confidence
        max_detections: optional cap on the number of detections returned

    Returns detections in acceptance order (descending confidence).
    """

    pool = [c for c in candidates if c.confidence > score_threshold]
    if not pool:
        return []

    boxes = np.array([c.box.as_xyxy() for c in pool], dtype=np.float64).reshape(-1, 4)
    scores = np.array([c.confidence for c in pool], dtype=np.float64)
    cfg = NMSConfig(iou_threshold=overlap_threshold, max_detections=max_detections)

    if not per_class_suppression:
        keep = nms(boxes, scores, cfg)
    else:
        class_ids = np.array([c.class_id for c in pool], dtype=np.int64)
        kept: List[int] = []
        for cls in np.unique(class_ids):
            idx = np.where(class_ids == cls)[0]
            keep_local = nms(boxes[idx], scores[idx], cfg)
            kept.extend(idx[keep_local].tolist())

        keep = np.array(kept, dtype=np.int64)
        # Descending score, then discovery order.
        keep = keep[np.lexsort((keep, -scores[keep]))]
        if max_detections is not None:
            keep = keep[: max(0, max_detections)]

    logger.debug(
        "suppress: %d candidates, %d above %.3f, %d kept (per_class=%s)",
        len(candidates),
        len(pool),
        score_threshold,
        len(keep),
        per_class_suppression,
    )

    return [
        Detection(class_id=pool[i].class_id, confidence=pool[i].confidence, box=pool[i].box)
        for i in keep.tolist()
    ]
