from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenCVDnnBackendConfig:
    """
    Configuration for OpenCV DNN inference.

    - preferable_backend/preferable_target: names of cv2.dnn constants
      (e.g. "DNN_BACKEND_OPENCV", "DNN_TARGET_CPU")
    - output_names: override the unconnected output layers if needed
    """

    preferable_backend: str = "DNN_BACKEND_OPENCV"
    preferable_target: str = "DNN_TARGET_CPU"
    output_names: Optional[Sequence[str]] = None


class OpenCVDnnBackend:
    """
    cv2.dnn backend for Darknet (.weights + .cfg), ONNX and other formats
    `cv2.dnn.readNet` understands.

    The network and its output layer names are resolved once at construction.
    """

    def __init__(
        self,
        model_path: PathLike,
        config_path: Optional[PathLike] = None,
        cfg: OpenCVDnnBackendConfig = OpenCVDnnBackendConfig(),
    ):
        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required for the DNN backend. Install with `pip install opencv-python`.") from e

        self._cv2 = cv2
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))
        self.config_path = Path(config_path) if config_path is not None else None
        if self.config_path is not None and not self.config_path.exists():
            raise FileNotFoundError(str(self.config_path))

        self.net = cv2.dnn.readNet(str(self.model_path), str(self.config_path) if self.config_path else "")
        self.net.setPreferableBackend(self._dnn_constant(cfg.preferable_backend))
        self.net.setPreferableTarget(self._dnn_constant(cfg.preferable_target))

        if cfg.output_names is not None:
            self.output_names = list(cfg.output_names)
        else:
            self.output_names = list(self.net.getUnconnectedOutLayersNames())
        logger.info("Loaded %s with output layers %s", self.model_path.name, self.output_names)

    def _dnn_constant(self, name: str) -> int:
        value = getattr(self._cv2.dnn, name, None)
        if value is None:
            raise ValueError(f"Unknown cv2.dnn constant: {name!r}")
        return int(value)

    def infer(self, blob: np.ndarray) -> List[np.ndarray]:
        self.net.setInput(blob)
        outs = self.net.forward(self.output_names)
        return [np.asarray(o) for o in outs]
