import unittest

import numpy as np

from detect_kit.decode import decode, decode_tensor
from detect_kit.errors import DetectionError, EmptyInputError, ShapeError


def _row(cx, cy, w, h, *scores, obj=1.0):
    return [cx, cy, w, h, obj, *scores]


class TestDecode(unittest.TestCase):
    def test_geometry_scaled_to_pixels(self) -> None:
        t = np.array([_row(0.5, 0.5, 0.2, 0.2, 0.9)], dtype=np.float32)
        (cand,) = decode([t], 100, 100, 0.5)
        self.assertAlmostEqual(cand.box.left, 40.0, places=4)
        self.assertAlmostEqual(cand.box.top, 40.0, places=4)
        self.assertAlmostEqual(cand.box.width, 20.0, places=4)
        self.assertAlmostEqual(cand.box.height, 20.0, places=4)
        self.assertAlmostEqual(cand.box.left + cand.box.width / 2, 50.0, places=4)

    def test_non_square_image(self) -> None:
        t = np.array([_row(0.5, 0.5, 0.1, 0.2, 0.9)], dtype=np.float32)
        (cand,) = decode([t], 200, 100)
        self.assertAlmostEqual(cand.box.left, 90.0, places=4)
        self.assertAlmostEqual(cand.box.top, 40.0, places=4)
        self.assertAlmostEqual(cand.box.width, 20.0, places=4)
        self.assertAlmostEqual(cand.box.height, 20.0, places=4)

    def test_threshold_is_exclusive(self) -> None:
        t = np.array(
            [
                _row(0.5, 0.5, 0.2, 0.2, 0.5, 0.25),
                _row(0.5, 0.5, 0.2, 0.2, 0.75, 0.0),
            ],
            dtype=np.float32,
        )
        self.assertEqual(decode([t], 100, 100, 0.5)[0].confidence, 0.75)
        self.assertEqual(len(decode([t], 100, 100, 0.5)), 1)
        self.assertEqual(decode([t], 100, 100, 0.75), [])

    def test_argmax_class_and_objectness_ignored(self) -> None:
        t = np.array([_row(0.5, 0.5, 0.1, 0.1, 0.2, 0.9, 0.3, obj=0.01)], dtype=np.float32)
        (cand,) = decode([t], 100, 100)
        self.assertEqual(cand.class_id, 1)
        self.assertAlmostEqual(cand.confidence, 0.9, places=5)

    def test_discovery_order_across_tensors(self) -> None:
        t1 = np.array(
            [
                _row(0.1, 0.1, 0.1, 0.1, 0.6, 0.0),
                _row(0.2, 0.2, 0.1, 0.1, 0.0, 0.99),
            ],
            dtype=np.float32,
        )
        t2 = np.array([_row(0.3, 0.3, 0.1, 0.1, 0.8, 0.0)], dtype=np.float32)
        cands = decode([t1, t2], 100, 100)
        self.assertEqual([c.class_id for c in cands], [0, 1, 0])
        self.assertEqual([round(c.box.left) for c in cands], [5, 15, 25])

    def test_duplicates_are_kept(self) -> None:
        row = _row(0.5, 0.5, 0.2, 0.2, 0.9)
        t = np.array([row, row], dtype=np.float32)
        self.assertEqual(len(decode([t], 100, 100)), 2)

    def test_batch_axis_is_dropped(self) -> None:
        t = np.array([[_row(0.5, 0.5, 0.2, 0.2, 0.9)]], dtype=np.float32)
        self.assertEqual(t.shape, (1, 1, 6))
        self.assertEqual(len(decode([t], 100, 100)), 1)

    def test_three_columns_rejected(self) -> None:
        t = np.zeros((4, 3), dtype=np.float32)
        with self.assertRaises(ShapeError):
            decode([t], 100, 100)
        with self.assertRaises(ValueError):
            decode_tensor(t, 100, 100)

    def test_one_dimensional_rejected(self) -> None:
        with self.assertRaises(ShapeError):
            decode([np.zeros((7,), dtype=np.float32)], 100, 100)

    def test_five_columns_has_no_scores(self) -> None:
        t = np.array([[0.5, 0.5, 0.2, 0.2, 0.99]], dtype=np.float32)
        self.assertEqual(decode([t], 100, 100), [])

    def test_empty_rows(self) -> None:
        self.assertEqual(decode([np.zeros((0, 85), dtype=np.float32)], 416, 416), [])

    def test_zero_tensors(self) -> None:
        self.assertEqual(decode([], 100, 100), [])

    def test_zero_tensors_strict(self) -> None:
        with self.assertRaises(EmptyInputError):
            decode([], 100, 100, require_tensors=True)
        self.assertTrue(issubclass(EmptyInputError, DetectionError))

    def test_round_to_pixels_truncates(self) -> None:
        t = np.array([_row(0.5, 0.5, 0.25, 0.25, 0.9)], dtype=np.float64)
        (exact,) = decode([t], 101, 101)
        (rounded,) = decode([t], 101, 101, round_to_pixels=True)
        self.assertAlmostEqual(exact.box.left, 37.875)
        self.assertEqual(rounded.box.left, 38.0)
        self.assertEqual(rounded.box.width, 25.0)

    def test_negative_size_is_not_an_error(self) -> None:
        t = np.array([_row(0.5, 0.5, -0.1, 0.0, 0.9)], dtype=np.float32)
        (cand,) = decode([t], 100, 100)
        self.assertLess(cand.box.width, 0.0)
        self.assertEqual(cand.box.area, 0.0)


if __name__ == "__main__":
    unittest.main()
