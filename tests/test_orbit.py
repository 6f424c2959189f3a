import pytest

from mandelbrot_set import Orbit, OrbitParameters, julia_orbit, mandelbrot_orbit


def test_mandelbrot_orbit_starts_at_zero() -> None:
    assert list(mandelbrot_orbit(1, limit=5)) == [0, 1, 2, 5, 26, 677]


def test_julia_orbit_starts_at_c() -> None:
    assert list(julia_orbit(2, 1, limit=4)) == [2, 5, 26, 677, 458330]


def test_limit_is_the_index_of_the_last_term() -> None:
    assert list(mandelbrot_orbit(3, limit=0)) == [0]
    assert list(mandelbrot_orbit(1, limit=3)) == [0, 1, 2, 5]
    assert len(list(mandelbrot_orbit(3, limit=7))) == 8


def test_unbounded_orbit_is_consumed_lazily() -> None:
    orbit = mandelbrot_orbit(-1)

    assert not orbit.bounded
    assert orbit.take(6) == [0, -1, 0, -1, 0, -1]
    assert next(orbit) == 0


def test_terms_are_exact_big_integers() -> None:
    terms = mandelbrot_orbit(1).take(12)

    for previous, current in zip(terms, terms[1:]):
        assert current == previous * previous + 1
    assert terms[-1] > 10 ** 150


def test_take_stops_at_the_limit() -> None:
    orbit = julia_orbit(0, 1, limit=3)

    assert orbit.bounded
    assert orbit.take(10) == [0, 1, 2, 5]
    assert orbit.take(10) == []


def test_new_orbit_restarts_from_the_start_value() -> None:
    params = OrbitParameters(start=0, addend=2, limit=4)

    first = list(Orbit(params))
    second = list(Orbit(params))
    assert first == second == [0, 2, 6, 38, 1446]


def test_negative_limit_is_rejected() -> None:
    with pytest.raises(ValueError):
        mandelbrot_orbit(1, limit=-1)
