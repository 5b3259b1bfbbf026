"""
Decoder for raw YOLO (Darknet-style) detection tensors.

Each tensor row is one candidate at a spatial anchor:

    [cx, cy, w, h, objectness, class_scores...]

Geometry is normalized to [0, 1] relative to the image. Objectness is not
used; the class with the highest score gives both the class id and the
confidence of the row.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from .errors import EmptyInputError, ShapeError
from .types import Box, Candidate

logger = logging.getLogger(__name__)

# First column of the per-class score vector; column 4 (objectness) is skipped.
SCORES_START = 5


def _as_rows(tensor: np.ndarray) -> np.ndarray:
    p = np.asarray(tensor)
    if p.ndim == 3 and p.shape[0] == 1:
        p = p[0]
    if p.ndim != 2:
        raise ShapeError(f"Expected a 2-D detection tensor (rows, 5 + C), got shape {p.shape}")
    if p.shape[1] < SCORES_START:
        raise ShapeError(
            f"Detection tensor needs at least {SCORES_START} columns (geometry + scores), got shape {p.shape}"
        )
    return p.astype(np.float64, copy=False)


def decode_tensor(
    tensor: np.ndarray,
    image_width: int,
    image_height: int,
    confidence_threshold: float = 0.5,
    *,
    round_to_pixels: bool = False,
) -> List[Candidate]:
    """
    Decode a single tensor into candidates in pixel space (row order preserved).
    """

    p = _as_rows(tensor)
    scores = p[:, SCORES_START:]
    if p.shape[0] == 0 or scores.shape[1] == 0:
        return []

    class_ids = np.argmax(scores, axis=1)
    confidences = scores[np.arange(scores.shape[0]), class_ids]

    # Strict comparison: a score equal to the threshold is rejected.
    keep = np.where(confidences > confidence_threshold)[0]
    if keep.size == 0:
        return []

    cx = p[keep, 0] * image_width
    cy = p[keep, 1] * image_height
    w = p[keep, 2] * image_width
    h = p[keep, 3] * image_height
    if round_to_pixels:
        cx, cy, w, h = np.trunc(cx), np.trunc(cy), np.trunc(w), np.trunc(h)
        left = cx - np.trunc(w / 2)
        top = cy - np.trunc(h / 2)
    else:
        left = cx - w / 2
        top = cy - h / 2

    return [
        Candidate(
            class_id=int(class_ids[i]),
            confidence=float(confidences[i]),
            box=Box(left=float(x0), top=float(y0), width=float(bw), height=float(bh)),
        )
        for i, x0, y0, bw, bh in zip(keep, left, top, w, h)
    ]


def decode(
    tensors: Sequence[np.ndarray],
    image_width: int,
    image_height: int,
    confidence_threshold: float = 0.5,
    *,
    require_tensors: bool = False,
    round_to_pixels: bool = False,
) -> List[Candidate]:
    """
    Decode every tensor and return the candidates in discovery order.

    Args:
        tensors: raw outputs, each (N, 5 + C) or (1, N, 5 + C)
        image_width, image_height: size of the image fed to the network, used
            to scale the normalized geometry into pixels
        confidence_threshold: rows need a best class score strictly above this
        require_tensors: raise EmptyInputError instead of returning [] when
            `tensors` is empty
        round_to_pixels: truncate center/size to whole pixels before
            computing the top-left corner

    Raises:
        ShapeError: a tensor has fewer than 5 columns or is not 2-D.
    """

    if len(tensors) == 0:
        if require_tensors:
            raise EmptyInputError("No detection tensors were provided.")
        return []

    candidates: List[Candidate] = []
    for idx, tensor in enumerate(tensors):
        found = decode_tensor(
            tensor,
            image_width,
            image_height,
            confidence_threshold,
            round_to_pixels=round_to_pixels,
        )
        logger.debug("tensor %d: %d candidates above %.3f", idx, len(found), confidence_threshold)
        candidates.extend(found)

    return candidates
