from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .decode import decode
from .nms import suppress
from .types import Candidate, Detection

logger = logging.getLogger(__name__)

TensorInput = Union[np.ndarray, Sequence[np.ndarray]]


@dataclass
class DetectionPostConfig:
    """
    Thresholds and switches for decode + overlap suppression.

    Values outside [0, 1] are accepted; they make the stage keep everything
    or nothing.
    """

    conf_threshold: float = 0.5
    # Acceptance floor re-checked by the suppressor.
    score_threshold: float = 0.5
    iou_threshold: float = 0.4
    # If False, boxes of different classes can suppress each other.
    per_class_suppression: bool = False
    max_detections: Optional[int] = None
    # If False, skip NMS and only keep the top `max_detections` by confidence.
    apply_nms: bool = True
    # Raise EmptyInputError instead of returning [] when no tensors are given.
    require_tensors: bool = False
    round_to_pixels: bool = False


class DetectionPostprocessor:
    """
    Raw network outputs -> DetectionSet for a single image.

    Accepts one output array or a list of them (YOLOv3 has three output
    layers); all rows are pooled before suppression.
    """

    def __init__(self, cfg: DetectionPostConfig):
        self.cfg = cfg

    def process(self, preds: TensorInput, orig_size: Tuple[int, int]) -> List[Detection]:
        """
        Args:
            preds: output tensor(s), each (N, 5 + C) or (1, N, 5 + C)
            orig_size: (width, height) of the image given to the network
        """

        tensors = self._as_tensor_list(preds)
        width, height = orig_size
        candidates = decode(
            tensors,
            width,
            height,
            self.cfg.conf_threshold,
            require_tensors=self.cfg.require_tensors,
            round_to_pixels=self.cfg.round_to_pixels,
        )
        if not candidates:
            return []

        if self.cfg.apply_nms:
            detections = suppress(
                candidates,
                self.cfg.score_threshold,
                self.cfg.iou_threshold,
                per_class_suppression=self.cfg.per_class_suppression,
                max_detections=self.cfg.max_detections,
            )
        else:
            detections = self._select_topk(candidates)

        logger.debug("postprocess: %d candidates -> %d detections", len(candidates), len(detections))
        return detections

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _as_tensor_list(preds: TensorInput) -> List[np.ndarray]:
        if isinstance(preds, np.ndarray):
            return [preds]
        return list(preds)

    def _select_topk(self, candidates: Sequence[Candidate]) -> List[Detection]:
        ranked = sorted(
            (c for c in candidates if c.confidence > self.cfg.score_threshold),
            key=lambda c: c.confidence,
            reverse=True,
        )
        if self.cfg.max_detections is not None:
            ranked = ranked[: max(0, self.cfg.max_detections)]
        return [Detection(class_id=c.class_id, confidence=c.confidence, box=c.box) for c in ranked]
