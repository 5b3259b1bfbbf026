"""
Optional inference backends for detect_kit.

Backends are kept in a separate module so the core post-processing stays
usable without an inference runtime installed. Each backend loads its model
once and exposes `infer(blob) -> List[np.ndarray]`.
"""

from __future__ import annotations

__all__ = []
