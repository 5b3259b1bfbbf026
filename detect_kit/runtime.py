from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .postprocess import DetectionPostConfig, DetectionPostprocessor, TensorInput
from .types import Detection

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

OPENCV_SUFFIXES = {".weights", ".cfg", ".pb", ".caffemodel", ".t7", ".net"}
ONNX_SUFFIXES = {".onnx"}


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", ".git", "Models"),
) -> Path:
    """
    Walk up from `start` (default: cwd) to the first directory holding one of
    `markers`. Falls back to `start` itself.
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()
    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        if any((parent / m).exists() for m in markers):
            return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Absolute paths pass through; relative ones resolve against `root`, or the
    project root when `root` is "auto"/None.
    """

    p = Path(path)
    if p.is_absolute():
        return p

    base = find_project_root() if root in ("auto", None) else Path(root).resolve()
    return (base / p).resolve()


@dataclass(frozen=True)
class BlobConfig:
    """
    Arguments for cv2.dnn.blobFromImage. Defaults match Darknet YOLOv3 (416x416, RGB, [0, 1]).
    """

    size: Tuple[int, int] = (416, 416)
    scale: float = 1.0 / 255.0
    mean: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    swap_rb: bool = True
    crop: bool = False


@dataclass(frozen=True)
class PreprocessResult:
    blob: np.ndarray
    orig_size: Tuple[int, int]


InferFn = Callable[[np.ndarray], TensorInput]


class DetectionPipeline:
    """
    Image -> blob -> inference -> DetectionSet.

    The inference callable is supplied by the caller (usually a backend's
    `infer`), so the pipeline holds no model state of its own. Boxes are
    returned in the pixel space of the input image.
    """

    def __init__(
        self,
        infer_fn: InferFn,
        *,
        backend: Optional[object] = None,
        backend_name: Optional[str] = None,
        blob_cfg: BlobConfig = BlobConfig(),
        post_cfg: Optional[DetectionPostConfig] = None,
    ):
        self._infer_fn = infer_fn
        self.backend = backend
        self.backend_name = backend_name
        self.blob_cfg = blob_cfg
        self.post = DetectionPostprocessor(post_cfg if post_cfg is not None else DetectionPostConfig())

    def preprocess(self, image_bgr: np.ndarray) -> PreprocessResult:
        try:
            import cv2  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError("OpenCV is required for preprocessing. Install with `pip install opencv-python`.") from e

        if image_bgr is None or not hasattr(image_bgr, "shape"):
            raise TypeError("image_bgr must be a NumPy array (BGR).")
        if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
            raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

        orig_h, orig_w = image_bgr.shape[:2]
        blob = cv2.dnn.blobFromImage(
            image_bgr,
            self.blob_cfg.scale,
            self.blob_cfg.size,
            self.blob_cfg.mean,
            self.blob_cfg.swap_rb,
            self.blob_cfg.crop,
        )
        return PreprocessResult(blob=blob, orig_size=(orig_w, orig_h))

    def infer(self, blob: np.ndarray) -> TensorInput:
        return self._infer_fn(blob)

    def __call__(self, image_bgr: np.ndarray) -> List[Detection]:
        prep = self.preprocess(image_bgr)
        preds = self.infer(prep.blob)
        return self.post.process(preds, orig_size=prep.orig_size)


def _infer_backend(model_path: Path) -> str:
    suffix = model_path.suffix.lower()
    if suffix in ONNX_SUFFIXES:
        return "onnxruntime"
    if suffix in OPENCV_SUFFIXES:
        return "opencv"
    raise ValueError(f"Could not infer backend from extension '{suffix}'. Pass backend=... explicitly.")


def load_pipeline(
    model_path: PathLike,
    *,
    config_path: Optional[PathLike] = None,
    backend: Optional[str] = None,
    root: Optional[PathLike] = "auto",
    blob_cfg: BlobConfig = BlobConfig(),
    post_cfg: Optional[DetectionPostConfig] = None,
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_output_names: Optional[Sequence[str]] = None,
    dnn_backend: str = "DNN_BACKEND_OPENCV",
    dnn_target: str = "DNN_TARGET_CPU",
) -> DetectionPipeline:
    """
    Create a pipeline for a model on disk.

        pipe = load_pipeline("Models/yolov3.weights", config_path="Models/yolov3.cfg")

    Args:
        model_path: weights/model file; relative paths resolve against the project root by default
        config_path: network description for formats that need one (Darknet .cfg)
        backend: "opencv" or "onnxruntime"; None infers it from the extension
        root: base directory for relative paths ("auto" uses the project root)
    """

    resolved = resolve_path(model_path, root=root)
    resolved_cfg = resolve_path(config_path, root=root) if config_path is not None else None
    chosen = (backend or _infer_backend(resolved)).lower()
    post_cfg = post_cfg if post_cfg is not None else DetectionPostConfig()

    if chosen == "opencv":
        from .backends.opencv_backend import OpenCVDnnBackend, OpenCVDnnBackendConfig

        cv_backend = OpenCVDnnBackend(
            resolved,
            resolved_cfg,
            OpenCVDnnBackendConfig(preferable_backend=dnn_backend, preferable_target=dnn_target),
        )
        logger.info("Using OpenCV DNN backend for %s", resolved)
        return DetectionPipeline(
            cv_backend.infer,
            backend=cv_backend,
            backend_name="opencv",
            blob_cfg=blob_cfg,
            post_cfg=post_cfg,
        )

    if chosen == "onnxruntime":
        from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig

        ort_backend = OnnxRuntimeBackend(
            resolved,
            OnnxRuntimeBackendConfig(providers=onnx_providers, output_names=onnx_output_names),
        )
        logger.info("Using ONNX Runtime backend for %s", resolved)
        return DetectionPipeline(
            ort_backend.infer,
            backend=ort_backend,
            backend_name="onnxruntime",
            blob_cfg=blob_cfg,
            post_cfg=post_cfg,
        )

    raise ValueError(f"Unsupported backend: {backend!r}")
