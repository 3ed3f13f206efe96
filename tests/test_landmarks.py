import numpy as np
import pytest

from gaze_filter.errors import LandmarkError
from gaze_filter.landmarks import gaze_sample, iris_centers
from conftest import make_landmarks


def test_iris_centers_average_each_ring():
    left, right = iris_centers(make_landmarks((0.42, 0.51), (0.58, 0.49)))
    assert (left.x, left.y) == pytest.approx((0.42, 0.51))
    assert (right.x, right.y) == pytest.approx((0.58, 0.49))


def test_gaze_sample_is_midpoint():
    sample = gaze_sample(make_landmarks((0.4, 0.5), (0.6, 0.7)))
    assert sample.x == pytest.approx(0.5)
    assert sample.y == pytest.approx(0.6)


def test_two_column_landmarks_are_accepted():
    sample = gaze_sample(make_landmarks(dims=2))
    assert sample.x == pytest.approx(0.5)


def test_too_few_landmarks_raise():
    with pytest.raises(LandmarkError):
        gaze_sample(make_landmarks(n_points=476))


def test_wrong_shape_raises_value_error():
    with pytest.raises(ValueError):
        iris_centers(np.zeros(478))
