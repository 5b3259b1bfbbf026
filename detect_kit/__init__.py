"""
Post-processing for single-image YOLO object detection.

Raw network tensors are decoded into candidates, filtered by confidence and
reduced with greedy non-maximum suppression. Core functionality depends only
on NumPy; OpenCV is used for blob preparation and the DNN backend.
"""

from .types import Box, Candidate, Detection, DetectionSet
from .errors import DetectionError, EmptyInputError, ShapeError
from .decode import decode, decode_tensor
from .nms import NMSConfig, box_iou, iou, nms, suppress
from .postprocess import DetectionPostConfig, DetectionPostprocessor
from .runtime import BlobConfig, DetectionPipeline, find_project_root, load_pipeline, resolve_path
from .metadata import load_class_names

__all__ = [
    "Box",
    "Candidate",
    "Detection",
    "DetectionSet",
    "DetectionError",
    "EmptyInputError",
    "ShapeError",
    "decode",
    "decode_tensor",
    "NMSConfig",
    "box_iou",
    "iou",
    "nms",
    "suppress",
    "DetectionPostConfig",
    "DetectionPostprocessor",
    "BlobConfig",
    "DetectionPipeline",
    "find_project_root",
    "load_pipeline",
    "resolve_path",
    "load_class_names",
]
