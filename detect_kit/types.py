from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Box:
    """
    Axis-aligned rectangle in pixel coordinates (left, top, width, height).

    Width/height are not clamped; non-positive values describe an empty box.
    """

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.right, self.bottom

    def as_ltwh(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.width, self.height


@dataclass(frozen=True)
class Candidate:
    """
    Detection proposal produced by the decoder, before overlap suppression.
    """

    class_id: int
    confidence: float
    box: Box


@dataclass(frozen=True)
class Detection(Candidate):
    """
    Candidate that survived overlap suppression.
    """


DetectionSet = List[Detection]
