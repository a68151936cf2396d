"""Real root solvers for polynomials up to the third degree.

Every solver returns a ``(count, roots)`` pair. ``count`` is the number of
real solutions, or -1 when all coefficients are zero and any value is a
solution. Callers must branch on the count and never assume a root exists.
"""

import math

EPSILON = 1e-14


def solve_linear(a: float, b: float) -> tuple[int, list[float]]:
    """Solve a*x + b = 0.

    Args:
        a: Linear coefficient
        b: Constant term

    Returns:
        Tuple of (count, roots); count is -1 when a and b are both zero
    """
    if abs(a) < EPSILON:
        if b == 0:
            return -1, []
        return 0, []
    return 1, [-b / a]


def solve_quadratic(a: float, b: float, c: float) -> tuple[int, list[float]]:
    """Solve a*x^2 + b*x + c = 0.

    A near-zero leading coefficient falls through to the linear solver.

    Examples:
        >>> solve_quadratic(1.0, -3.0, 2.0)
        (2, [2.0, 1.0])
        >>> solve_quadratic(0.0, 0.0, 5.0)
        (0, [])
    """
    if abs(a) < EPSILON:
        return solve_linear(b, c)

    discriminant = b * b - 4 * a * c
    if discriminant > 0:
        discriminant = math.sqrt(discriminant)
        return 2, [(-b + discriminant) / (2 * a), (-b - discriminant) / (2 * a)]
    if discriminant == 0:
        return 1, [-b / (2 * a)]
    return 0, []


def _solve_cubic_normed(a: float, b: float, c: float) -> tuple[int, list[float]]:
    """Solve x^3 + a*x^2 + b*x + c = 0."""
    a2 = a * a
    q = (a2 - 3 * b) / 9
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54
    r2 = r * r
    q3 = q * q * q

    if r2 < q3:
        # Three real roots, trigonometric form
        t = r / math.sqrt(q3)
        t = max(-1.0, min(1.0, t))
        t = math.acos(t)
        a /= 3
        q = -2 * math.sqrt(q)
        return 3, [
            q * math.cos(t / 3) - a,
            q * math.cos((t + 2 * math.pi) / 3) - a,
            q * math.cos((t - 2 * math.pi) / 3) - a,
        ]

    # Cardano
    aa = -math.pow(abs(r) + math.sqrt(r2 - q3), 1 / 3.0)
    if r < 0:
        aa = -aa
    bb = 0.0 if aa == 0 else q / aa
    a /= 3
    x0 = aa + bb - a
    x1 = -0.5 * (aa + bb) - a
    imaginary = 0.5 * math.sqrt(3.0) * (aa - bb)
    if abs(imaginary) < EPSILON:
        return 2, [x0, x1]
    return 1, [x0]


def solve_cubic(a: float, b: float, c: float, d: float) -> tuple[int, list[float]]:
    """Solve a*x^3 + b*x^2 + c*x + d = 0.

    A near-zero leading coefficient falls through to the quadratic solver.

    Args:
        a: Cubic coefficient
        b: Quadratic coefficient
        c: Linear coefficient
        d: Constant term

    Returns:
        Tuple of (count, roots). Roots are not sorted.
    """
    if abs(a) < EPSILON:
        return solve_quadratic(b, c, d)
    return _solve_cubic_normed(b / a, c / a, d / a)
