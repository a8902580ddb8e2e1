import pytest
import numpy as np

from phantomkit.core.errors import InvalidParameter
from phantomkit.core.generators import (
    CheckerParams,
    DeltaParams,
    checker_image,
    constant_spacing,
    delta_image,
    render_checkerboard,
)


# =============================================================================
# Checkerboard
# =============================================================================

def test_checker_reference_pattern():
    expected = np.array([
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 1, 0, 1, 0, 1, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 1, 0, 1, 0, 1, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ], dtype=np.float64)

    image = checker_image((8, 8), (2, 3), (2, 1))

    assert image.dtype == np.float64
    np.testing.assert_array_equal(image, expected)


@pytest.mark.parametrize("size", [(1, 1), (8, 8), (7, 13), (81, 81), (64, 5)])
def test_checker_shape_and_values(size):
    image = checker_image(size, (3, 2), (1, 2))
    assert image.shape == size
    assert set(np.unique(image)) <= {0.0, 1.0}


def test_checker_default_layout_fills_board():
    image = checker_image()
    assert image.shape == (81, 81)
    # 8 cells of 9 px + 9 stripes of 1 px
    assert image.sum() == 8 * 8 * 9 * 9


@pytest.mark.parametrize("stripe", [(1, 1), (2, 3), (3, 1)])
def test_single_cell_has_zero_border_and_filled_interior(stripe):
    image = checker_image((12, 12), (1, 1), stripe)
    sx, sy = stripe

    assert not image[:sx, :].any()
    assert not image[:, :sy].any()
    assert not image[-sx:, :].any()
    assert not image[:, -sy:].any()
    assert image[sx, sy] == 1.0


def test_single_cell_without_stripe_fills_everything():
    image = checker_image((5, 7), (1, 1), (0, 0))
    assert image.all()


def test_non_divisible_layout_leaves_trailing_remainder():
    # cells of 2 px: 1 + 2 + 1 + 2 + 1 = 7, one spare row/column at the end
    image = checker_image((8, 8), (2, 2), (1, 1))
    assert image.shape == (8, 8)
    assert not image[-1, :].any()
    assert not image[:, -1].any()
    assert image[1:3, 1:3].all()
    assert image[4:6, 4:6].all()


def test_overcrowded_layout_gives_zero_array():
    image = checker_image((4, 4), (5, 5), (1, 1))
    assert image.shape == (4, 4)
    assert not image.any()


def test_alternate_colours_cells_by_parity():
    image = checker_image((8, 8), (4, 4), (0, 0), alternate=True)

    assert image[0:2, 0:2].all()
    assert not image[0:2, 2:4].any()
    assert not image[2:4, 0:2].any()
    assert image[2:4, 2:4].all()
    assert image.sum() == 8 * 4


@pytest.mark.parametrize("size", [(0, 8), (8, 0), (-1, 4), (8.0, 8), (True, 8), 8, "88"])
def test_checker_rejects_bad_size(size):
    with pytest.raises(InvalidParameter) as exc:
        checker_image(size)
    assert exc.value.parameter == "size"


def test_checker_rejects_zero_count():
    with pytest.raises(InvalidParameter) as exc:
        checker_image((8, 8), (0, 2))
    assert exc.value.parameter == "checkers_count"


def test_checker_rejects_negative_stripe():
    with pytest.raises(InvalidParameter) as exc:
        CheckerParams(stripe_width=(-1, 1))
    assert exc.value.parameter == "stripe_width"


def test_checker_params_normalize_numpy_ints():
    params = CheckerParams(checkers_count=np.array([2, 3]), stripe_width=(np.int64(2), 1))
    assert params.checkers_count == (2, 3)
    assert params.stripe_width == (2, 1)
    np.testing.assert_array_equal(
        render_checkerboard((8, 8), params), checker_image((8, 8), (2, 3), (2, 1))
    )


def test_generators_return_fresh_arrays():
    first = checker_image((8, 8), (2, 2))
    second = checker_image((8, 8), (2, 2))
    np.testing.assert_array_equal(first, second)
    assert not np.shares_memory(first, second)


# =============================================================================
# Delta
# =============================================================================

def test_delta_reference_two_blocks():
    expected = np.array([
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 1, 1, 0, 0, 1, 1],
        [0, 0, 1, 1, 0, 0, 1, 1],
        [0, 0, 1, 1, 0, 0, 1, 1],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ], dtype=np.float64)

    image = delta_image(
        (8, 8), 2,
        size_of_point=(3, 2),
        distance_of_points=(lambda i: 0, lambda i: 4),
        pivot=(2, 2),
    )

    np.testing.assert_array_equal(image, expected)


def test_delta_reference_l_shape():
    expected = np.array([
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 1, 1, 0, 0, 0, 0],
        [0, 0, 1, 1, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 1, 1, 0, 1, 1, 0],
        [0, 0, 1, 1, 0, 1, 1, 0],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ], dtype=np.float64)

    image = delta_image(
        (8, 8), 3,
        size_of_point=(2, 2),
        distance_of_points=(lambda x: 3 if x == 2 else 0, lambda x: -3 if x == 3 else 3),
        pivot=(2, 2),
    )

    np.testing.assert_array_equal(image, expected)


@pytest.mark.parametrize("pivot", [(0, 0), (5, 5), (-3, 2), (100, 100)])
def test_delta_zero_points_is_zero_array(pivot):
    image = delta_image((6, 9), 0, size_of_point=(4, 4), pivot=pivot, circular_shape=True)
    assert image.shape == (6, 9)
    assert not image.any()


@pytest.mark.parametrize(
    "pivot, region",
    [
        ((-1, 2), (slice(0, 2), slice(2, 5))),   # top edge
        ((4, 2), (slice(4, 6), slice(2, 5))),    # bottom edge
        ((2, -2), (slice(2, 5), slice(0, 1))),   # left edge
        ((2, 5), (slice(2, 5), slice(5, 7))),    # right edge
        ((-2, -2), (slice(0, 1), slice(0, 1))),  # corner
    ],
)
def test_delta_clips_at_each_edge(pivot, region):
    image = delta_image((6, 7), 1, size_of_point=(3, 3), pivot=pivot)

    expected = np.zeros((6, 7))
    expected[region] = 1.0
    np.testing.assert_array_equal(image, expected)


def test_delta_points_fully_outside_are_dropped():
    image = delta_image(
        (5, 5), 4,
        size_of_point=(2, 2),
        distance_of_points=(constant_spacing(3), constant_spacing(3)),
        pivot=(0, 0),
    )
    expected = np.zeros((5, 5))
    expected[0:2, 0:2] = 1.0
    expected[3:5, 3:5] = 1.0
    np.testing.assert_array_equal(image, expected)


def test_delta_circular_points_are_inscribed_ellipses():
    image = delta_image((5, 5), 1, size_of_point=(5, 5), circular_shape=True)

    assert image[2, 2] == 1.0
    assert image[0, 2] == 1.0 and image[2, 0] == 1.0
    for corner in [(0, 0), (0, 4), (4, 0), (4, 4)]:
        assert image[corner] == 0.0
    np.testing.assert_array_equal(image, image.T)
    np.testing.assert_array_equal(image, image[::-1, ::-1])


def test_delta_integer_spacing_is_constant():
    from_ints = delta_image((10, 10), 3, distance_of_points=(3, 1), pivot=(1, 1))
    from_funcs = delta_image(
        (10, 10), 3, distance_of_points=(lambda i: 3, lambda i: 1), pivot=(1, 1)
    )
    np.testing.assert_array_equal(from_ints, from_funcs)
    assert from_ints.sum() == 3


def test_delta_default_spacing_is_diagonal():
    image = delta_image((6, 6), 3)
    assert [tuple(p) for p in np.argwhere(image)] == [(0, 0), (2, 2), (4, 4)]


def test_delta_rejects_non_integer_offsets():
    with pytest.raises(InvalidParameter) as exc:
        delta_image((8, 8), 2, distance_of_points=(lambda i: 1.5, lambda i: 0))
    assert exc.value.parameter == "distance_of_points"


@pytest.mark.parametrize(
    "kwargs, parameter",
    [
        ({"num_of_points": -1}, "num_of_points"),
        ({"num_of_points": 2.0}, "num_of_points"),
        ({"num_of_points": 1, "size_of_point": (0, 2)}, "size_of_point"),
        ({"num_of_points": 1, "pivot": (1.5, 0)}, "pivot"),
        ({"num_of_points": 1, "distance_of_points": ("a", 1)}, "distance_of_points"),
        ({"num_of_points": 1, "circular_shape": "yes"}, "circular_shape"),
    ],
)
def test_delta_params_validation(kwargs, parameter):
    with pytest.raises(InvalidParameter) as exc:
        DeltaParams(**kwargs)
    assert exc.value.parameter == parameter
