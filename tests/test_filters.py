import pytest

from gaze_filter.config import PointFilterConfig
from gaze_filter.domain import Point
from gaze_filter.filters import EMAFilter, Kalman1D, PointFilterChain


def test_ema_first_sample_passes_through():
    ema = EMAFilter(0.2)
    assert ema.value is None
    assert ema.next(3.0, -4.0) == Point(3.0, -4.0)


def test_ema_converges_geometrically_to_constant_input():
    ema = EMAFilter(0.2)
    ema.next(0.0, 0.0)
    for n in range(1, 31):
        out = ema.next(1.0, 2.0)
        assert out.x == pytest.approx(1.0 - 0.8**n)
        assert out.y == pytest.approx(2.0 * (1.0 - 0.8**n))
    assert out.x == pytest.approx(1.0, abs=1e-2)


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_ema_rejects_invalid_alpha(alpha):
    with pytest.raises(ValueError):
        EMAFilter(alpha)


def test_kalman_approaches_constant_monotonically():
    kf = Kalman1D(initial_estimate=0.0)
    previous = kf.estimate
    for _ in range(30):
        estimate = kf.next(5.0)
        assert previous < estimate <= 5.0
        previous = estimate
    assert previous == pytest.approx(5.0, abs=1e-6)


def test_kalman_approaches_from_above_too():
    kf = Kalman1D(initial_estimate=10.0)
    values = [kf.next(-2.0) for _ in range(40)]
    assert all(a > b for a, b in zip(values, values[1:]))
    assert values[-1] == pytest.approx(-2.0, abs=1e-6)


def test_kalman_variance_settles_at_steady_state():
    # Q=0.05, R=0.1: P converges to 0.05 and the gain to 0.5
    kf = Kalman1D(process_noise=0.05, measurement_noise=0.1, initial_variance=1.0)
    for _ in range(50):
        kf.next(0.0)
    assert kf.variance == pytest.approx(0.05)


def test_kalman_rejects_non_positive_noise():
    with pytest.raises(ValueError):
        Kalman1D(process_noise=0.0)
    with pytest.raises(ValueError):
        Kalman1D(measurement_noise=-1.0)


def test_chain_first_call_returns_input():
    chain = PointFilterChain()
    assert chain.next(0.3, 0.7) == Point(0.3, 0.7)


def test_chain_holds_constant_input_without_drift():
    chain = PointFilterChain()
    for _ in range(20):
        out = chain.next(0.42, 0.58)
    assert out.x == pytest.approx(0.42)
    assert out.y == pytest.approx(0.58)


def test_chain_follows_step_and_lags_behind_ema():
    chain = PointFilterChain(PointFilterConfig(ema_alpha=0.5))
    chain.next(0.0, 0.0)
    previous = 0.0
    for _ in range(40):
        out = chain.next(1.0, 1.0)
        assert previous <= out.x <= 1.0
        previous = out.x
    assert previous == pytest.approx(1.0, abs=1e-3)

    lagging = PointFilterChain(PointFilterConfig(ema_alpha=0.5))
    lagging.next(0.0, 0.0)
    first = lagging.next(1.0, 0.0)
    # EMA alone would give 0.5; the Kalman stage only moves part of the way
    assert 0.0 < first.x < 0.5


def test_chain_axes_are_independent():
    chain = PointFilterChain()
    chain.next(0.5, 0.5)
    for _ in range(10):
        out = chain.next(0.9, 0.5)
    assert out.y == pytest.approx(0.5)
    assert out.x > 0.5


def test_ema_is_idempotent_once_converged():
    ema = EMAFilter(0.3)
    ema.next(0.25, 0.75)
    for _ in range(5):
        out = ema.next(0.25, 0.75)
        assert (out.x, out.y) == pytest.approx((0.25, 0.75))
