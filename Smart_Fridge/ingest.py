from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import cv2
import numpy as np


@dataclass(frozen=True)
class LoadedImage:
    image: np.ndarray
    width: int
    height: int


def load_image(path: Union[str, Path]) -> LoadedImage:
    """
    Read a BGR image from disk along with its pixel size.
    """

    img = cv2.imread(str(path))
    if img is None:
        raise FileNotFoundError(f"Could not read image at path: {path}")
    h, w = img.shape[:2]
    return LoadedImage(image=img, width=int(w), height=int(h))
