import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal, assert_equal

from config.settings import FORMULA_HARRIS, FORMULA_REFERENCE
from models.errors import InvalidInputError
from models.gradient_field import GradientFieldBuilder, compute_cornerness


# 3x3 patch with a bright 2x2 block in the bottom-right corner
PATCH = np.array(
    [[0, 0, 0],
     [0, 10, 10],
     [0, 10, 10]],
    dtype=np.uint8,
)


def test_gradients_patch():
    builder = GradientFieldBuilder()
    grad_x, grad_y = builder.compute_gradients(PATCH.astype(np.float64))
    assert_array_equal(grad_x, [[0, 0, 0], [-10, 10, 0], [-10, 10, 0]])
    assert_array_equal(grad_y, [[0, -10, -10], [0, 10, 10], [0, 0, 0]])


def test_cornerness_patch_reference():
    field = compute_cornerness(PATCH, window_radius=3, formula=FORMULA_REFERENCE)
    assert_equal(field.shape, (3, 3))
    # det(M) only: the truncated k removes the trace term
    assert_allclose(field.at(row=1, col=1), 150000.0)
    assert_allclose(field.at(row=0, col=0), 200000.0)
    assert_allclose(field.at(row=2, col=2), 200000.0)


def test_cornerness_patch_harris():
    field = compute_cornerness(PATCH, window_radius=3, formula=FORMULA_HARRIS, k=0.05)
    assert_allclose(field.at(row=1, col=1), 118000.0)
    assert_allclose(field.at(row=0, col=0), 128000.0)
    assert_allclose(field.at(row=2, col=2), 128000.0)


def test_cornerness_reference_truncates_k():
    field = compute_cornerness(PATCH, window_radius=3, formula=FORMULA_REFERENCE, k=1.5)
    # int(1.5) == 1, trace(M) at the center is 800
    assert_allclose(field.at(row=1, col=1), 150000.0 - 800.0)


def test_single_pixel_window_has_zero_determinant():
    rng = np.random.default_rng(5)
    image = rng.integers(0, 255, size=(16, 16), dtype=np.uint8)
    field = compute_cornerness(image, window_radius=1)
    assert_allclose(field.values, 0.0, atol=1e-6)


def test_box_sum_ones():
    builder = GradientFieldBuilder()
    ones = np.ones((5, 7))
    assert_array_equal(builder.box_sum(ones, 3), np.full((5, 7), 9.0))
    assert_array_equal(builder.box_sum(ones, 4), np.full((5, 7), 16.0))
    assert_array_equal(builder.box_sum(ones, 1), ones)


def test_box_sum_matches_explicit_window():
    builder = GradientFieldBuilder()
    field = np.arange(36, dtype=np.float64).reshape(6, 6)
    result = builder.box_sum(field, 3)
    assert_equal(result[2, 3], field[1:4, 2:5].sum())
    # row -1 reflects to row 1
    assert_equal(result[0, 3], field[1, 2:5].sum() + field[0:2, 2:5].sum())


def test_to_gray_uses_luminance_weights():
    builder = GradientFieldBuilder()
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    image[0, 0] = (0, 255, 0)  # green, BGR order
    image[0, 1] = (255, 0, 0)  # blue
    image[1, 0] = (0, 0, 255)  # red
    gray = builder.to_gray(image)
    assert_equal(gray.dtype, np.float64)
    assert_equal(gray[0, 0], 150)
    assert_equal(gray[0, 1], 29)
    assert_equal(gray[1, 0], 76)
    assert_equal(gray[1, 1], 0)


def test_to_gray_channel_layouts_agree():
    rng = np.random.default_rng(0)
    bgr = rng.integers(0, 255, size=(12, 10, 3), dtype=np.uint8)
    bgra = np.dstack([bgr, np.full((12, 10), 255, dtype=np.uint8)])
    builder = GradientFieldBuilder()
    assert_array_equal(builder.to_gray(bgr), builder.to_gray(bgra))

    gray = rng.integers(0, 255, size=(12, 10), dtype=np.uint8)
    assert_array_equal(builder.to_gray(gray[..., np.newaxis]), builder.to_gray(gray))


@pytest.mark.parametrize("dtype", [np.uint8, np.uint16, np.float32, np.float64, np.int32])
def test_cornerness_dtypes(dtype):
    image = np.zeros((20, 20, 3), dtype=dtype)
    image[10:, 10:] = 100
    field = compute_cornerness(image, window_radius=3)
    assert_equal(field.shape, (20, 20))
    assert field.max() > 0


@pytest.mark.parametrize("formula", [FORMULA_REFERENCE, FORMULA_HARRIS])
def test_blank_image_zero_response(formula):
    image = np.full((32, 24, 3), 128, dtype=np.uint8)
    field = compute_cornerness(image, window_radius=5, formula=formula)
    assert_allclose(field.max(), 0.0, atol=1e-9)


@pytest.mark.parametrize("window_radius", [7, 25, 64])
def test_window_larger_than_image(window_radius):
    image = np.zeros((4, 6), dtype=np.uint8)
    image[2:, 3:] = 50
    field = compute_cornerness(image, window_radius=window_radius)
    assert_equal(field.shape, (4, 6))
    assert np.all(np.isfinite(field.values))


def test_one_pixel_image():
    field = compute_cornerness(np.array([[7]], dtype=np.uint8), window_radius=3)
    assert_array_equal(field.values, [[0.0]])


def test_fresh_fields_per_call():
    image = np.zeros((16, 16), dtype=np.uint8)
    image[8:, 8:] = 255
    builder = GradientFieldBuilder()
    first = builder.compute_cornerness(image, 3)
    second = builder.compute_cornerness(image, 3)
    assert first.values is not second.values
    assert_array_equal(first.values, second.values)
    first.values[:] = -1
    assert second.max() > 0


@pytest.mark.parametrize(
    "image",
    [
        None,
        [[1, 2], [3, 4]],
        np.zeros((0, 5)),
        np.zeros((5, 0, 3)),
        np.zeros(5),
        np.zeros((2, 2, 2, 2)),
        np.zeros((4, 4, 2)),
        np.array([["a", "b"], ["c", "d"]]),
    ],
)
def test_invalid_image(image):
    with pytest.raises(InvalidInputError):
        compute_cornerness(image, window_radius=3)


@pytest.mark.parametrize("window_radius", [0, -3, 2.5, True, None, "5"])
def test_invalid_window_radius(window_radius):
    with pytest.raises(InvalidInputError):
        compute_cornerness(np.zeros((8, 8), dtype=np.uint8), window_radius=window_radius)


def test_invalid_formula():
    with pytest.raises(InvalidInputError):
        GradientFieldBuilder(formula="shi-tomasi")
    with pytest.raises(InvalidInputError):
        GradientFieldBuilder(k=float("nan"))


def test_numpy_integer_window_radius():
    field = compute_cornerness(PATCH, window_radius=np.int64(3))
    assert_allclose(field.at(row=1, col=1), 150000.0)
