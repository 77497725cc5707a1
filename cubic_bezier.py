import numpy as np

# A cubic bezier is a (4, 2) array holding p0, c1, c2, p1 in that order.


def bezier_point(degree, bezier, t):
    # Compute the point on the Bezier curve at parameter t
    # t may be a scalar (returns shape (2,)) or an array (returns shape (n, 2))
    t = np.asarray(t, dtype=float)[..., np.newaxis]
    if degree == 1:
        return (1.0 - t) * bezier[0] + t * bezier[1]
    if degree == 2:
        return (1.0 - t)**2 * bezier[0] + 2 * (1.0 - t) * t * bezier[1] + t**2 * bezier[2]
    if degree == 3:
        return (1.0 - t)**3 * bezier[0] + 3 * (1.0 - t)**2 * t * bezier[1] + 3 * (1.0 - t) * t**2 * bezier[2] + t**3 * bezier[3]
    raise ValueError(f"unsupported bezier degree {degree}")


def hodograph(bezier):
    # Control points of the derivative curve, one degree lower
    degree = len(bezier) - 1
    return degree * (bezier[1:] - bezier[:-1])


def q(bezier, t):
    return bezier_point(3, bezier, t)


def q_prime(bezier, t):
    """First derivative: 3(1-t)^2 (c1-p0) + 6(1-t)t (c2-c1) + 3t^2 (p1-c2)."""
    return bezier_point(2, hodograph(bezier), t)


def q_prime_prime(bezier, t):
    """Second derivative: 6(1-t)(p0 - 2c1 + c2) + 6t(c1 - 2c2 + p1)."""
    return bezier_point(1, hodograph(hodograph(bezier)), t)


def straight_bezier(p0, p1):
    # Degenerate cubic with the inner control points collapsed onto the ends
    return np.array([p0, p0, p1, p1], dtype=float)
