import pytest

from clustering import label_components
from counting import count_points, filter_components
from models import AnalysisConfig, ConnectedComponent


def test_min_area_five_keeps_all(three_squares_mask):
    result = filter_components(label_components(three_squares_mask), 5)
    assert result.count == 3
    assert len(result.regions) == 3


def test_min_area_ten_drops_all(three_squares_mask):
    result = filter_components(label_components(three_squares_mask), 10)
    assert result.count == 0
    assert result.regions == ()


def test_min_area_is_inclusive(three_squares_mask):
    assert filter_components(label_components(three_squares_mask), 9).count == 3


def test_zero_min_area_equals_component_count(three_squares_mask):
    components = label_components(three_squares_mask)
    assert filter_components(components, 0).count == len(components)


def test_count_decreases_with_min_area():
    components = [
        ConnectedComponent(label=i + 1, area=area, bbox=(i, 0, 1, 1))
        for i, area in enumerate([1, 4, 4, 9, 16, 25, 100])
    ]
    counts = [filter_components(components, m).count for m in range(0, 120, 3)]
    assert all(b <= a for a, b in zip(counts, counts[1:]))
    assert counts[0] == len(components)
    assert counts[-1] == 0


def test_filter_preserves_order():
    components = [
        ConnectedComponent(label=3, area=50, bbox=(0, 0, 5, 10)),
        ConnectedComponent(label=1, area=2, bbox=(9, 9, 1, 2)),
        ConnectedComponent(label=2, area=7, bbox=(5, 5, 7, 1)),
    ]
    result = filter_components(components, 5)
    assert [c.label for c in result.regions] == [3, 2]


def test_count_points_on_image(three_squares_image):
    result = count_points(three_squares_image, AnalysisConfig(min_area=5))
    assert result.count == 3
    assert result.threshold_used is not None


def test_dark_dots_need_inversion(dark_dots_image):
    inverted = count_points(dark_dots_image, AnalysisConfig(min_area=5, invert=True))
    plain = count_points(dark_dots_image, AnalysisConfig(min_area=5))

    assert inverted.count == 3
    # Without inversion the white background is the only blob.
    assert plain.count == 1


@pytest.mark.parametrize("mode", ["otsu", "binary", "custom"])
def test_all_threshold_modes_count_white_squares(three_squares_image, mode):
    config = AnalysisConfig(min_area=5, threshold_mode=mode, threshold_value=100)
    assert count_points(three_squares_image, config).count == 3
