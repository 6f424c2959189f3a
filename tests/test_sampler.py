import numpy as np
import pytest

from mandelbrot_set import Region, collect_stable, grid_shape, sample, sample_bands

DEFAULT_REGION = Region(-2.0, 0.5, -1.5, 1.5)


def test_unit_square_at_density_ten() -> None:
    grid = sample(Region(0.0, 1.0, 0.0, 1.0), 10)

    assert grid.shape == (10, 10)
    assert grid.dtype == np.complex128
    assert grid[0, 0] == 0j
    assert grid[0, -1].real == 1.0
    assert grid[-1, 0].imag == 1.0
    assert grid[-1, -1] == complex(1.0, 1.0)


def test_rows_share_imaginary_part_and_columns_share_real_part() -> None:
    grid = sample(DEFAULT_REGION, 4)

    assert np.all(grid.imag == grid.imag[:, :1])
    assert np.all(grid.real == grid.real[:1, :])
    assert np.all(np.diff(grid.real[0]) > 0)
    assert np.all(np.diff(grid.imag[:, 0]) > 0)


def test_default_region_at_density_two() -> None:
    assert grid_shape(DEFAULT_REGION, 2) == (6, 5)
    grid = sample(DEFAULT_REGION, 2)

    np.testing.assert_array_equal(grid.real[0], [-2.0, -1.375, -0.75, -0.125, 0.5])
    assert grid[0, 0] == complex(-2.0, -1.5)
    assert grid[-1, -1] == complex(0.5, 1.5)


def test_zero_density_gives_empty_grid() -> None:
    grid = sample(DEFAULT_REGION, 0)

    assert grid.shape == (0, 0)
    assert collect_stable(grid, 20).shape == (0, 2)


def test_axis_rounding_to_zero_gives_empty_grid() -> None:
    grid = sample(Region(0.0, 1.0, 0.0, 0.04), 10)

    assert grid.shape == (0, 10)
    assert grid.size == 0
    assert len(collect_stable(grid, 5)) == 0


def test_bands_reassemble_the_grid() -> None:
    full = sample(DEFAULT_REGION, 4)
    bands = list(sample_bands(DEFAULT_REGION, 4, 5))

    assert [offset for offset, _ in bands] == [0, 5, 10]
    assert all(band.shape[0] <= 5 for _, band in bands)
    np.testing.assert_array_equal(np.vstack([band for _, band in bands]), full)


def test_bands_of_empty_grid() -> None:
    assert list(sample_bands(DEFAULT_REGION, 0, 8)) == []


def test_band_rows_must_be_positive() -> None:
    with pytest.raises(ValueError):
        list(sample_bands(DEFAULT_REGION, 4, 0))


def test_negative_density_is_rejected() -> None:
    with pytest.raises(ValueError):
        sample(DEFAULT_REGION, -1)


@pytest.mark.parametrize(
    "bounds",
    [(1.0, 1.0, 0.0, 1.0), (2.0, 1.0, 0.0, 1.0), (0.0, 1.0, 0.5, -0.5)],
)
def test_region_bounds_must_be_ordered(bounds) -> None:
    with pytest.raises(ValueError):
        Region(*bounds)
