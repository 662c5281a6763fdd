"""
Copyright 2024 Gergely Bencsik
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at
    http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math
import numpy as np
from scipy.optimize import bisect
from scipy.special import comb
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate


def points_to_array(points) -> np.ndarray:
    if len(points) == 0:
        return np.empty((0, VSHAPE))
    return np.array([(p.x, p.y) for p in points], dtype=float)


def array_to_points(arr: np.ndarray):
    return [Coordinate(float(x), float(y)) for x, y in arr]


def rotate_points(points, angle: float):
    """Rotate a sequence of Coordinates about the origin."""
    if len(points) == 0:
        return []
    c = np.cos(angle)
    s = np.sin(angle)
    rot_mat = np.array([[c, -s], [s, c]])
    # row vectors, so multiply with the transpose from the right
    return array_to_points(points_to_array(points) @ rot_mat.transpose())


def normalise_angle(angle: float) -> float:
    """Map an angle into the range [0, 2pi)."""
    angle = math.fmod(angle, 2 * PI)
    if angle < 0:
        angle += 2 * PI
    return angle


def mid_point(p1: Coordinate, p2: Coordinate) -> Coordinate:
    return Coordinate((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def involute_plus_offset(
    radius: float, off_x: float, off_y: float, phi: float, phi_offset: float = 0
) -> Coordinate:
    """Point on an involute or on a trochoid of a base circle.

    The tracing point is the end of a string unwound from the base circle by
    angle ``phi``, plus an offset measured in the frame that rotates with
    the string. With zero offset this is the involute.

    Parameters
    ----------
    radius : float
        Radius of the base circle the string unwinds from.
    off_x : float
        Radial offset of the tracing point.
    off_y : float
        Tangential offset of the tracing point.
    phi : float
        Unwinding angle.
    phi_offset : float
        Angle of the start of the involute on the base circle.

    Returns
    -------
    Coordinate
    """
    c = math.cos(phi + phi_offset)
    s = math.sin(phi + phi_offset)
    x = radius * (c + phi * s) + off_x * c - off_y * s
    y = radius * (s - phi * c) + off_x * s + off_y * c
    return Coordinate(x, y)


def epicycloid(radius: float, locus_radius: float, phi: float) -> Coordinate:
    """Point traced by a circle of radius locus_radius rolling round the
    outside of a circle of radius radius. phi is the angle of the contact
    point, the curve starts at (radius, 0)."""
    return Coordinate.from_polar(radius + locus_radius, phi) + Coordinate.from_polar(
        locus_radius, -PI + phi * (1 + radius / locus_radius)
    )


def hypocycloid(radius: float, locus_radius: float, phi: float) -> Coordinate:
    """Point traced by a circle rolling round the inside of a circle."""
    return Coordinate.from_polar(radius - locus_radius, phi) + Coordinate.from_polar(
        locus_radius, phi * (1 - radius / locus_radius)
    )


def circle_points(
    start_angle: float,
    end_angle: float,
    step: float,
    radius: float,
    centre: Coordinate = Coordinate(),
):
    """Points on a circular arc at fixed angular step.

    The last point is always exactly at end_angle, even when the angular
    span is not a multiple of the step.
    """
    if step <= 0:
        raise ValueError(f"Angular step must be positive, got {step}")
    if radius < 0:
        raise ValueError(f"Radius must not be negative, got {radius}")
    span = end_angle - start_angle
    n = int(np.ceil(span / step)) if span > 0 else 0
    angles = start_angle + step * np.arange(n)
    angles = np.append(angles[angles < end_angle], end_angle)
    arr = np.stack([np.cos(angles), np.sin(angles)], axis=-1) * radius
    return array_to_points(arr + centre.as_array())


def root_binary_search(func: callable, lower: float, upper: float, delta: float):
    """Find the root of a monotonic function between two bounds.

    Raises ValueError if func(lower) and func(upper) have the same sign.
    """
    if delta <= 0:
        raise ValueError(f"Search resolution must be positive, got {delta}")
    f_lower = func(lower)
    f_upper = func(upper)
    if np.sign(f_lower) == np.sign(f_upper):
        raise ValueError(
            f"Function must change sign between {lower} and {upper}, "
            f"got {f_lower} and {f_upper}"
        )
    return bisect(func, lower, upper, xtol=delta)


def perpendicular_distance(p0: Coordinate, p1: Coordinate, p2: Coordinate) -> float:
    """Distance of p0 from the infinite line through p1 and p2."""
    numerator = abs(
        (p2.y - p1.y) * p0.x - (p2.x - p1.x) * p0.y + p2.x * p1.y - p2.y * p1.x
    )
    return numerator / math.hypot(p2.x - p1.x, p2.y - p1.y)


def _perpendicular_distances(arr: np.ndarray, p1: np.ndarray, p2: np.ndarray):
    d = p2 - p1
    numerator = np.abs(d[1] * arr[:, 0] - d[0] * arr[:, 1] + p2[0] * p1[1] - p2[1] * p1[0])
    return numerator / np.hypot(d[0], d[1])


def _index_of_farthest_point_within_margin(arr, start, max_error):
    for i in range(start + 2, len(arr)):
        dists = _perpendicular_distances(arr[start + 1 : i], arr[start], arr[i])
        if np.any(dists > max_error):
            return i - 1
    return len(arr) - 1


def _reduction_pass(points, max_error: float):
    arr = points_to_array(points)
    result = []
    start = 0
    while start < len(points) - 1:
        result.append(points[start])
        start = _index_of_farthest_point_within_margin(arr, start, max_error)
    result.append(points[-1])
    return result


def linear_reduction(points, max_error: float):
    """Drop points that lie within max_error of the straight line joining
    their retained neighbours.

    In each pass, from every retained point the farthest later point is
    found such that every point between them is within max_error of the
    chord. Passes repeat until nothing more is dropped, so reducing the
    result again returns it unchanged. Each dropped point is within
    max_error of the chord that replaced it in the pass that dropped it.
    The first and last points are always retained.
    """
    points = list(points)
    while len(points) >= 3:
        reduced = _reduction_pass(points, max_error)
        if len(reduced) == len(points):
            break
        points = reduced
    return points


def circle_centres(p1: Coordinate, p2: Coordinate, radius: float):
    """Centres of the two circles of given radius through p1 and p2.

    The first centre is on the right hand side of the direction p1->p2.
    """
    mid = mid_point(p1, p2)
    chord = p2 - p1
    half_sqr = (chord.x**2 + chord.y**2) / 4
    if half_sqr == 0:
        raise ValueError("Circle centres are undefined for coincident points")
    if half_sqr > radius**2:
        raise ValueError(
            f"Points are {2 * math.sqrt(half_sqr)} apart, "
            f"too far for a circle of radius {radius}"
        )
    h = math.sqrt(radius**2 - half_sqr)
    normal = Coordinate(chord.y, -chord.x) / chord.magnitude
    return mid + normal * h, mid - normal * h


def point_in_circle(point: Coordinate, centre: Coordinate, radius: float) -> bool:
    return (point.x - centre.x) ** 2 + (point.y - centre.y) ** 2 < radius**2


def solve_quadratic(a: float, b: float, c: float):
    """Real roots of ax^2+bx+c=0 in increasing order."""
    if a == 0:
        if b == 0:
            return ()
        return (-c / b,)
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return ()
    if discriminant == 0:
        return (-b / (2 * a),)
    root = math.sqrt(discriminant)
    return tuple(sorted(((-b - root) / (2 * a), (-b + root) / (2 * a))))


def circle_line_intersection(m: float, c: float, centre: Coordinate, radius: float):
    """Intersections of the line y=mx+c with a circle."""
    # substitute the line into the circle equation
    dy = c - centre.y
    xs = solve_quadratic(
        1 + m * m,
        2 * (m * dy - centre.x),
        centre.x**2 + dy * dy - radius * radius,
    )
    return [Coordinate(x, m * x + c) for x in xs]


def line_intersection(m0: float, c0: float, m1: float, c1: float):
    """Crossing of the lines y=m0x+c0 and y=m1x+c1, None if parallel."""
    if m0 == m1:
        return None
    x = (c1 - c0) / (m0 - m1)
    return Coordinate(x, m0 * x + c0)


def _between(v, r1, r2):
    return r1 > v >= r2 or r2 > v >= r1


def _gradient(p1: Coordinate, p2: Coordinate) -> float:
    if p2.x == p1.x:
        return np.finfo(float).max
    return (p2.y - p1.y) / (p2.x - p1.x)


def segment_intersection(
    p11: Coordinate, p12: Coordinate, p21: Coordinate, p22: Coordinate
):
    """Crossing point of segments p11-p12 and p21-p22, or None."""
    m1 = _gradient(p12, p11)
    m2 = _gradient(p22, p21)
    if m1 == m2:
        return None
    x = (p22.y - p12.y + m1 * p12.x - m2 * p22.x) / (m1 - m2)
    y = m1 * (x - p11.x) + p11.y
    if _between(x, p11.x, p12.x) and _between(y, p11.y, p12.y):
        return Coordinate(x, y)
    return None


def interpolate(x, xp: np.ndarray, fp: np.ndarray):
    """Linear interpolation that extrapolates from the end segments.
    xp must be increasing."""
    x = np.asarray(x, dtype=float)
    y = np.interp(x, xp, fp)
    lo = x < xp[0]
    hi = x > xp[-1]
    y[lo] = fp[0] + (x[lo] - xp[0]) * (fp[1] - fp[0]) / (xp[1] - xp[0])
    y[hi] = fp[-1] + (x[hi] - xp[-1]) * (fp[-1] - fp[-2]) / (xp[-1] - xp[-2])
    return y


def resample_on_x(points, xs):
    """Y values of a polyline sorted by decreasing X at the given X values,
    extrapolating colinearly beyond its ends."""
    if len(points) < 2:
        raise ValueError("List must have at least two points in it")
    arr = points_to_array(points)[::-1]
    return interpolate(xs, arr[:, 0], arr[:, 1])


def _resample_union(points1, points2):
    xs = np.union1d(points_to_array(points1)[:, 0], points_to_array(points2)[:, 0])
    xs = xs[::-1]
    return xs, resample_on_x(points1, xs), resample_on_x(points2, xs)


def closest_point(points1, points2) -> Coordinate:
    """Point of points1 where the Y separation from points2 stops decreasing.

    Both lists are sorted by decreasing X. They are resampled onto the
    union of their X values, then walked from the largest X. The walk stops
    at the first local minimum of the separation, not the global one.
    """
    xs, y1, y2 = _resample_union(points1, points2)
    separation = np.abs(y1 - y2)
    closest = 0
    for i in range(1, len(xs) - 1):
        if separation[i] < separation[closest]:
            closest = i
        else:
            break
    return Coordinate(float(xs[closest]), float(y1[closest]))


def intersection(points1, points2):
    """First crossing of two polylines sorted by decreasing X, or None."""
    xs, y1, y2 = _resample_union(points1, points2)
    for i in range(len(xs) - 1):
        crossing = segment_intersection(
            Coordinate(xs[i], y1[i]),
            Coordinate(xs[i + 1], y1[i + 1]),
            Coordinate(xs[i], y2[i]),
            Coordinate(xs[i + 1], y2[i + 1]),
        )
        if crossing is not None:
            return crossing
    return None


def bezier(t, points):
    # n is the number of points, degree of polynomial is n-1
    n = np.shape(points)[0]
    d = n - 1
    t = np.asarray(t, dtype=float)[..., np.newaxis]
    output = np.zeros(t.shape[:-1] + points.shape[1:])
    for k in range(n):
        output = output + points[k] * comb(d, k) * (t**k) * ((1 - t) ** (d - k))
    return output


def involute_bezier_points(
    module: float,
    teeth: int,
    pressure_angle: float,
    order: int,
    dedendum: float,
    addendum: float,
):
    """Control points of a Bezier curve approximating an involute flank.

    The involute between the dedendum and addendum radii is fitted by a
    Chebyshev interpolant in the curve parameter, which is then converted
    to the Bernstein basis.

    Parameters
    ----------
    module : float
        Gear module.
    teeth : int
        Number of teeth.
    pressure_angle : float
        Pressure angle in radians.
    order : int
        Degree of the Bezier curve.
    dedendum : float
        Start of the flank relative to the pitch circle, in modules
        (negative below the pitch circle).
    addendum : float
        End of the flank relative to the pitch circle, in modules.

    Returns
    -------
    list of Coordinate
        order+1 control points.
    """
    pitch_radius = module * teeth / 2
    base_radius = pitch_radius * np.cos(pressure_angle)
    addendum_radius = pitch_radius + addendum * module
    # avoid the cusp of the involute on the base circle
    dedendum_radius = max(pitch_radius + dedendum * module, base_radius * 1.0001)
    start_angle = np.sqrt(dedendum_radius**2 - base_radius**2) / base_radius
    end_angle = np.sqrt(addendum_radius**2 - base_radius**2) / base_radius

    def involute_xy(t):
        phi = start_angle + t * (end_angle - start_angle)
        return (
            base_radius * (np.cos(phi) + phi * np.sin(phi)),
            base_radius * (np.sin(phi) - phi * np.cos(phi)),
        )

    cheb_x = np.polynomial.Chebyshev.interpolate(
        lambda t: involute_xy(t)[0], order, domain=[0, 1]
    )
    cheb_y = np.polynomial.Chebyshev.interpolate(
        lambda t: involute_xy(t)[1], order, domain=[0, 1]
    )
    power_x = np.zeros(order + 1)
    power_y = np.zeros(order + 1)
    cx = cheb_x.convert(kind=np.polynomial.Polynomial).coef
    cy = cheb_y.convert(kind=np.polynomial.Polynomial).coef
    power_x[: len(cx)] = cx
    power_y[: len(cy)] = cy
    control = []
    for i in range(order + 1):
        x = 0.0
        y = 0.0
        for j in range(i + 1):
            weight = comb(i, j) / comb(order, j)
            x += weight * power_x[j]
            y += weight * power_y[j]
        control.append(Coordinate(x, y))
    return control
