import numpy as np
import pytest

from detection import apply_threshold, effective_blur_kernel, segment
from models import AnalysisConfig, ThresholdMode


@pytest.mark.parametrize(
    "requested,expected",
    [(0, 0), (-3, 0), (0.5, 0), (1, 1), (2.7, 3), (4, 5), (5, 5)],
)
def test_effective_blur_kernel(requested, expected):
    assert effective_blur_kernel(requested) == expected


def test_otsu_separates_square(square_image):
    seg = segment(square_image, AnalysisConfig())

    assert seg.mask.shape == square_image.shape[:2]
    assert seg.mask.dtype == np.uint8
    assert set(np.unique(seg.mask)) == {0, 255}
    assert np.count_nonzero(seg.mask) == 100
    assert seg.mask[50, 50] == 255
    assert seg.mask[0, 0] == 0


def test_fixed_binary_threshold_is_127():
    gray = np.array([[126, 127, 128, 255]], dtype=np.uint8)
    threshold, mask = apply_threshold(gray, ThresholdMode.BINARY)

    assert threshold == 127
    assert mask.tolist() == [[0, 0, 255, 255]]


def test_custom_threshold():
    gray = np.array([[150, 200, 201, 250]], dtype=np.uint8)
    config = AnalysisConfig(threshold_mode=ThresholdMode.CUSTOM, threshold_value=200)
    seg = segment(gray, config)

    assert seg.threshold == 200
    assert seg.mask.tolist() == [[0, 0, 255, 255]]


def test_invert(square_image):
    plain = segment(square_image, AnalysisConfig())
    inverted = segment(square_image, AnalysisConfig(invert=True))

    np.testing.assert_array_equal(inverted.mask, 255 - plain.mask)


def test_rgba_input(square_image):
    alpha = np.full(square_image.shape[:2] + (1,), 255, dtype=np.uint8)
    rgba = np.concatenate([square_image, alpha], axis=2)
    seg = segment(rgba, AnalysisConfig())

    assert np.count_nonzero(seg.mask) == 100


def test_blur_keeps_shape(square_image):
    seg = segment(square_image, AnalysisConfig(blur_kernel=4, threshold_mode="binary"))

    assert seg.mask.shape == square_image.shape[:2]
    assert seg.mask[50, 50] == 255
    # Blurring softens the corners of the square below the fixed threshold.
    assert seg.mask[45, 45] == 0


def test_input_is_not_modified(square_image):
    before = square_image.copy()
    segment(square_image, AnalysisConfig(blur_kernel=3, invert=True))
    np.testing.assert_array_equal(square_image, before)
