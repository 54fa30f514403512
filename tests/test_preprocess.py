import numpy as np
import pytest

from seismic_ttf.preprocess import normalize_signal, preprocess_signal, reshape_signal


def test_normalize_zscore():
    z = normalize_signal([1.0, 2.0, 3.0, 4.0, 5.0])
    assert np.mean(z) == pytest.approx(0.0, abs=1e-12)
    assert np.std(z) == pytest.approx(1.0)


def test_normalize_flat_is_zeros():
    z = normalize_signal([0.1, 0.1, 0.1])
    assert z.tolist() == [0.0, 0.0, 0.0]


def test_normalize_returns_new_array():
    x = np.array([1.0, 5.0])
    z = normalize_signal(x)
    assert z is not x
    assert x.tolist() == [1.0, 5.0]


@pytest.mark.parametrize("n", [1, 2188, 2189, 5000])
def test_grid_shape_is_fixed(n):
    x = np.random.default_rng(n).normal(size=n)
    grid = preprocess_signal(x)
    assert grid.shape == (199, 11)
    assert grid.size == 2189
    assert np.isin(grid, normalize_signal(x)).all()


def test_row_major_wraparound():
    grid = reshape_signal(np.arange(5.0), rows=3, cols=4)
    assert grid.tolist() == [
        [0.0, 1.0, 2.0, 3.0],
        [4.0, 0.0, 1.0, 2.0],
        [3.0, 4.0, 0.0, 1.0],
    ]


def test_long_signal_keeps_prefix():
    x = np.arange(5000.0)
    grid = reshape_signal(x)
    assert grid.ravel().tolist() == x[:2189].tolist()


def test_bad_shape():
    with pytest.raises(ValueError):
        reshape_signal([1.0], rows=0, cols=11)


def test_downsample_keeps_every_kth_sample():
    from seismic_ttf.preprocess import downsample_signal

    x = np.arange(2500.0)
    out = downsample_signal(x, max_points=1000)
    # ceil(2500 / 1000) = 3
    assert out.tolist() == x[::3].tolist()
    assert out.size <= 1000


def test_downsample_short_signal_untouched():
    from seismic_ttf.preprocess import downsample_signal

    assert downsample_signal([1.0, 2.0], max_points=1000).tolist() == [1.0, 2.0]
    assert downsample_signal(np.arange(1000.0), max_points=1000).size == 1000
    with pytest.raises(ValueError):
        downsample_signal([1.0], max_points=0)
