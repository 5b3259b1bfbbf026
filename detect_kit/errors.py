from __future__ import annotations


class DetectionError(ValueError):
    """
    Base class for input errors raised by the detection post-processing.
    """


class ShapeError(DetectionError):
    """
    Raised when a raw tensor cannot be split into box geometry + class scores.
    """


class EmptyInputError(DetectionError):
    """
    Raised when no tensors are given and the caller asked for strict decoding.
    """
