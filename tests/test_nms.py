import unittest

import numpy as np

from detect_kit.nms import NMSConfig, box_iou, iou, nms, suppress
from detect_kit.types import Box, Candidate, Detection


def _cand(conf: float, box: Box, class_id: int = 0) -> Candidate:
    return Candidate(class_id=class_id, confidence=conf, box=box)


class TestIoU(unittest.TestCase):
    def test_identical_boxes(self) -> None:
        self.assertEqual(iou(Box(0, 0, 1, 1), Box(0, 0, 1, 1)), 1.0)

    def test_disjoint_boxes(self) -> None:
        self.assertEqual(iou(Box(0, 0, 1, 1), Box(5, 5, 1, 1)), 0.0)

    def test_touching_edges(self) -> None:
        self.assertEqual(iou(Box(0, 0, 1, 1), Box(1, 0, 1, 1)), 0.0)

    def test_quadrant_overlap(self) -> None:
        self.assertAlmostEqual(iou(Box(0, 0, 2, 2), Box(1, 1, 2, 2)), 1.0 / 7.0)

    def test_degenerate_boxes(self) -> None:
        self.assertEqual(iou(Box(0, 0, 0, 5), Box(0, 0, 10, 10)), 0.0)
        self.assertEqual(iou(Box(5, 5, -3, -3), Box(0, 0, 10, 10)), 0.0)
        self.assertEqual(iou(Box(0, 0, 0, 0), Box(0, 0, 0, 0)), 0.0)

    def test_box_iou_vectorised(self) -> None:
        out = box_iou(np.array([0, 0, 2, 2]), np.array([[0, 0, 2, 2], [1, 1, 3, 3], [4, 4, 5, 5]]))
        self.assertTrue(np.allclose(out, [1.0, 1.0 / 7.0, 0.0]))

    def test_box_iou_empty(self) -> None:
        self.assertEqual(box_iou(np.array([0, 0, 2, 2]), np.empty((0, 4))).shape, (0,))


class TestNmsIndices(unittest.TestCase):
    def test_keeps_highest_first(self) -> None:
        boxes = np.array([[0, 0, 10, 10], [0, 0, 10, 9], [50, 50, 60, 60]], dtype=np.float64)
        scores = np.array([0.8, 0.9, 0.7])
        keep = nms(boxes, scores, NMSConfig(iou_threshold=0.4))
        self.assertEqual(keep.tolist(), [1, 2])

    def test_max_detections(self) -> None:
        boxes = np.array([[0, 0, 1, 1], [5, 5, 6, 6], [9, 9, 10, 10]], dtype=np.float64)
        scores = np.array([0.6, 0.9, 0.7])
        keep = nms(boxes, scores, NMSConfig(iou_threshold=0.4, max_detections=2))
        self.assertEqual(keep.tolist(), [1, 2])

    def test_empty(self) -> None:
        keep = nms(np.empty((0, 4)), np.empty((0,)), NMSConfig())
        self.assertEqual(keep.shape, (0,))


class TestSuppress(unittest.TestCase):
    def setUp(self) -> None:
        self.a = _cand(0.9, Box(0, 0, 10, 10))
        self.b = _cand(0.8, Box(0, 0, 10, 9))
        self.c = _cand(0.7, Box(50, 50, 10, 10))

    def test_greedy_ordering(self) -> None:
        self.assertAlmostEqual(iou(self.a.box, self.b.box), 0.9)
        out = suppress([self.c, self.b, self.a], 0.5, 0.4)
        self.assertEqual(out, [Detection(**vars(self.a)), Detection(**vars(self.c))])
        self.assertTrue(all(isinstance(d, Detection) for d in out))

    def test_empty(self) -> None:
        self.assertEqual(suppress([], 0.5, 0.4), [])

    def test_idempotent(self) -> None:
        cands = [
            self.a,
            self.b,
            self.c,
            _cand(0.95, Box(4, 4, 10, 10), class_id=2),
            _cand(0.6, Box(48, 52, 10, 10), class_id=1),
        ]
        once = suppress(cands, 0.5, 0.4)
        twice = suppress(once, 0.5, 0.4)
        self.assertEqual(once, twice)

    def test_overlap_at_threshold_is_suppressed(self) -> None:
        top = _cand(0.9, Box(0, 0, 10, 10))
        half = _cand(0.8, Box(0, 0, 10, 5))
        self.assertEqual(iou(top.box, half.box), 0.5)
        self.assertEqual(len(suppress([top, half], 0.5, 0.5)), 1)
        self.assertEqual(len(suppress([top, half], 0.5, 0.51)), 2)

    def test_score_floor_is_exclusive(self) -> None:
        low = _cand(0.5, Box(100, 100, 5, 5))
        out = suppress([self.a, low], 0.5, 0.4)
        self.assertEqual([d.confidence for d in out], [0.9])

    def test_cross_class_suppression_by_default(self) -> None:
        apple = _cand(0.9, Box(0, 0, 10, 10), class_id=0)
        milk = _cand(0.8, Box(0, 0, 10, 10), class_id=1)
        self.assertEqual([d.class_id for d in suppress([apple, milk])], [0])

    def test_per_class_suppression(self) -> None:
        apple = _cand(0.9, Box(0, 0, 10, 10), class_id=0)
        milk = _cand(0.8, Box(0, 0, 10, 10), class_id=1)
        apple_dup = _cand(0.85, Box(1, 0, 10, 10), class_id=0)
        out = suppress([milk, apple_dup, apple], per_class_suppression=True)
        self.assertEqual([(d.class_id, d.confidence) for d in out], [(0, 0.9), (1, 0.8)])

    def test_ties_keep_discovery_order(self) -> None:
        first = _cand(0.7, Box(0, 0, 10, 10), class_id=3)
        second = _cand(0.7, Box(1, 1, 10, 10), class_id=4)
        far = _cand(0.7, Box(80, 80, 10, 10), class_id=5)
        out = suppress([first, second, far], 0.5, 0.4)
        self.assertEqual([d.class_id for d in out], [3, 5])
        out = suppress([first, second, far], 0.5, 0.4, per_class_suppression=True)
        self.assertEqual([d.class_id for d in out], [3, 4, 5])

    def test_degenerate_boxes_survive(self) -> None:
        flat = _cand(0.95, Box(2, 2, -5, 0))
        out = suppress([self.a, flat], 0.5, 0.4)
        self.assertEqual([d.confidence for d in out], [0.95, 0.9])

    def test_max_detections(self) -> None:
        out = suppress([self.a, self.b, self.c], 0.5, 0.4, max_detections=1)
        self.assertEqual([d.confidence for d in out], [0.9])
        out = suppress([self.a, self.c], 0.5, 0.4, per_class_suppression=True, max_detections=1)
        self.assertEqual([d.confidence for d in out], [0.9])

    def test_out_of_range_thresholds_do_not_raise(self) -> None:
        self.assertEqual(len(suppress([self.a, self.b, self.c], -1.0, 2.0)), 3)
        self.assertEqual(suppress([self.a, self.b, self.c], 1.5, 0.4), [])


if __name__ == "__main__":
    unittest.main()
