import numpy as np

from clustering import label_components


def test_three_squares(three_squares_mask):
    components = label_components(three_squares_mask)

    assert len(components) == 3
    assert all(c.area == 9 for c in components)
    assert all(c.label >= 1 for c in components)
    assert sorted(c.bbox for c in components) == [(2, 2, 3, 3), (5, 30, 3, 3), (20, 10, 3, 3)]


def test_centroid_of_square(three_squares_mask):
    components = label_components(three_squares_mask)
    by_bbox = {c.bbox: c for c in components}

    assert by_bbox[(20, 10, 3, 3)].centroid == (21.0, 11.0)


def test_diagonal_neighbours_are_connected():
    mask = np.zeros((5, 5), dtype=np.uint8)
    mask[1, 1] = 255
    mask[2, 2] = 255
    mask[3, 3] = 255

    components = label_components(mask)
    assert len(components) == 1
    assert components[0].area == 3
    assert components[0].bbox == (1, 1, 3, 3)


def test_background_only():
    assert label_components(np.zeros((10, 10), dtype=np.uint8)) == []
    assert label_components(np.zeros((0, 0), dtype=np.uint8)) == []


def test_full_foreground_is_one_region():
    components = label_components(np.full((4, 6), 255, dtype=np.uint8))
    assert len(components) == 1
    assert components[0].area == 24
    assert components[0].bbox == (0, 0, 6, 4)


def test_boolean_mask_is_accepted():
    mask = np.zeros((6, 6), dtype=bool)
    mask[0:2, 0:2] = True
    mask[4:6, 4:6] = True

    components = label_components(mask)
    assert sorted(c.area for c in components) == [4, 4]
