#!/usr/bin/env python3
"""
Quadratic polynomials for the supply/demand model.

A Polynomial is an immutable value `a*x^2 + b*x + c`. Adding or subtracting a
plain number shifts only the constant term, which is how taxes and outside
benefits move a curve vertically.
"""
import math
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Polynomial:
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0

    def y(self, x: float) -> float:
        """Value at x."""
        return self.a * x * x + self.b * x + self.c

    def solutions(self) -> List[float]:
        """
        Real roots, found through the discriminant b^2 - 4ac.

        Two roots when the discriminant is positive, a single double root when
        it is exactly zero and none when it is negative. Complex roots are never
        produced; callers must handle the empty list.
        """
        if self.a == 0:
            # Linear or constant.
            if self.b == 0:
                return []
            return [-self.c / self.b]

        discriminant = self.b * self.b - 4.0 * self.a * self.c
        if discriminant > 0:
            root = math.sqrt(discriminant)
            return [
                (-self.b + root) / 2.0 / self.a,
                (-self.b - root) / 2.0 / self.a,
            ]
        if discriminant == 0:
            return [-self.b / 2.0 / self.a]
        return []

    def integral(self, x: float) -> float:
        """Definite integral from 0 to x."""
        return self.a / 3.0 * x ** 3 + self.b / 2.0 * x ** 2 + self.c * x

    def __add__(self, other):
        if isinstance(other, Polynomial):
            return Polynomial(self.a + other.a, self.b + other.b, self.c + other.c)
        if isinstance(other, (int, float)):
            return Polynomial(self.a, self.b, self.c + other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Polynomial):
            return Polynomial(self.a - other.a, self.b - other.b, self.c - other.c)
        if isinstance(other, (int, float)):
            return Polynomial(self.a, self.b, self.c - other)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, (int, float)):
            return Polynomial(-self.a, -self.b, other - self.c)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, (int, float)):
            return Polynomial(self.a * other, self.b * other, self.c * other)
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> "Polynomial":
        return Polynomial(-self.a, -self.b, -self.c)
