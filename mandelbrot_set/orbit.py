"""Lazy integer orbits of the quadratic map ``z -> z**2 + c``.

Python integers are unbounded, so the terms are exact however fast they grow.
Nothing in the plotting pipeline consumes these orbits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OrbitParameters:
    """Starting value, addend and optional last index of an orbit.

    A ``limit`` of ``n`` produces the terms ``z_0`` through ``z_n``.
    """

    start: int
    addend: int
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")


def mandelbrot_orbit(c: int, limit: Optional[int] = None) -> "Orbit":
    """Orbit of ``c`` under the Mandelbrot recurrence, starting from zero."""

    return Orbit(OrbitParameters(start=0, addend=c, limit=limit))


def julia_orbit(c: int, p: int, limit: Optional[int] = None) -> "Orbit":
    """Orbit starting at ``c`` with ``p`` as the Julia parameter."""

    return Orbit(OrbitParameters(start=c, addend=p, limit=limit))


class Orbit:
    """Iterator over ``z_0, z_1, ...`` for the given parameters.

    Unbounded when ``params.limit`` is ``None``; use :meth:`take` rather than
    ``list()`` on such orbits. Build a new ``Orbit`` to start over.
    """

    def __init__(self, params: OrbitParameters):
        self.params = params
        self._z = params.start
        self._count = 0

    @property
    def bounded(self) -> bool:
        return self.params.limit is not None

    def __iter__(self) -> "Orbit":
        return self

    def __next__(self) -> int:
        limit = self.params.limit
        if limit is not None and self._count > limit:
            raise StopIteration
        term = self._z
        self._z = self._z * self._z + self.params.addend
        self._count += 1
        return term

    def take(self, n: int) -> list[int]:
        """Return up to ``n`` further terms."""

        terms = []
        for _ in range(n):
            try:
                terms.append(next(self))
            except StopIteration:
                break
        return terms

    def __repr__(self) -> str:
        return f"Orbit({self.params!r}, produced={self._count})"
