import os
import sys
import numpy as np
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from pathcompact.compacter.DeviationMetric import perpendicular_offset, shortest_distance_to_segment
from pathcompact.compacter.SubproblemSolver import SubproblemResult, SubproblemSolver
from pathcompact.geometry.PointFloat import PointFloat


def pts(*xy):
    return np.array(xy, dtype=float).reshape(-1, 2)


def plain_perpendicular(start, end, mid, square_segment_length):
    return perpendicular_offset(start, end, mid, square_segment_length)


@pytest.mark.parametrize("n", [0, 1, 2])
def test_short_ranges_are_solved(n):
    arr = pts(*[(i, i * i) for i in range(n)])
    out = SubproblemSolver.solve(arr, 0, n, perpendicular_offset, 1.0)
    assert out.result is SubproblemResult.Solved
    assert out.kept == tuple(range(n))
    assert out.resolved


def test_collinear_range_linearizes():
    arr = pts((0, 0), (1, 1), (2, 2), (3, 3))
    out = SubproblemSolver.solve(arr, 0, 4, perpendicular_offset, 0.25)
    assert out.result is SubproblemResult.Linearize
    assert out.kept == (0, 3)


def test_zero_tolerance_straight_range_linearizes():
    arr = pts((0, 0), (1, 1), (2, 2), (3, 3))
    out = SubproblemSolver.solve(arr, 0, 4, perpendicular_offset, 0.0)
    assert out.result is SubproblemResult.Linearize


def test_divides_at_largest_deviation():
    arr = pts((0, 0), (1, 0.5), (2, 3), (3, 0.2), (4, 0))
    out = SubproblemSolver.solve(arr, 0, 5, perpendicular_offset, 1.0)
    assert out.result is SubproblemResult.Divide
    assert out.division_index == 2
    assert not out.resolved


def test_deviation_equal_to_tolerance_divides():
    # (1, 1) is exactly 1.0 away from the chord
    arr = pts((0, 0), (1, 1), (2, 0))
    out = SubproblemSolver.solve(arr, 0, 3, perpendicular_offset, 1.0)
    assert out.result is SubproblemResult.Divide
    assert out.division_index == 1


@pytest.mark.parametrize("metric", [perpendicular_offset, plain_perpendicular])
def test_ties_pick_leftmost(metric):
    arr = pts((0, 0), (1, 1), (2, 1), (3, 0))
    out = SubproblemSolver.solve(arr, 0, 4, metric, 0.5)
    assert out.result is SubproblemResult.Divide
    assert out.division_index == 1


def test_plain_function_metric_matches_batch():
    arr = pts((0, 0), (1, 0.5), (2, 3), (3, 0.2), (4, 0))
    a = SubproblemSolver.solve(arr, 0, 5, perpendicular_offset, 1.0)
    b = SubproblemSolver.solve(arr, 0, 5, plain_perpendicular, 1.0)
    assert a == b


def test_identical_points_linearize_without_nan():
    arr = np.full((10, 2), 5.0)
    out = SubproblemSolver.solve(arr, 0, 10, perpendicular_offset, 0.0)
    assert out.result is SubproblemResult.Linearize
    assert out.kept == (0, 9)


def test_offsets_are_relative_to_range_start():
    arr = pts((100, 100), (0, 0), (1, 0), (2, 5), (3, 0), (4, 0), (-7, 3))
    out = SubproblemSolver.solve(arr, 1, 5, perpendicular_offset, 1.0)
    assert out.result is SubproblemResult.Divide
    assert out.division_index == 2


@pytest.mark.parametrize("tol_sq", [0.0, 0.01, 0.25, 1.0])
def test_three_point_ranges(tol_sq):
    # (1, 0.5) sits 0.25 (squared) off the chord
    out = SubproblemSolver.solve(pts((0, 0), (1, 0.5), (2, 0)), 0, 3, perpendicular_offset, tol_sq)
    if tol_sq > 0.25:
        assert out.result is SubproblemResult.Linearize
        assert out.kept == (0, 2)
    else:
        assert out.result is SubproblemResult.Divide
        assert out.division_index == 1


def test_three_point_degenerate_chord():
    out = SubproblemSolver.solve(pts((1, 1), (1, 1), (1, 1)), 0, 3, shortest_distance_to_segment, 0.0)
    assert out.result is SubproblemResult.Linearize
    out = SubproblemSolver.solve(pts((1, 1), (4, 5), (1, 1)), 0, 3, shortest_distance_to_segment, 25.0)
    assert out.result is SubproblemResult.Divide
    out = SubproblemSolver.solve(pts((1, 1), (4, 5), (1, 1)), 0, 3, shortest_distance_to_segment, 26.0)
    assert out.result is SubproblemResult.Linearize


@pytest.mark.parametrize("metric", [perpendicular_offset, shortest_distance_to_segment])
@pytest.mark.parametrize("length", [3, 4, 8, 9, 12])
def test_short_and_long_ranges_agree_with_vectorised_metric(metric, length):
    rng = np.random.default_rng(length)
    for _ in range(50):
        arr = np.cumsum(rng.normal(size=(length, 2)), axis=0)
        tol_sq = float(rng.uniform(0.0, 2.0))
        out = SubproblemSolver.solve(arr, 0, length, metric, tol_sq)
        dev = metric.batch(PointFloat(*arr[0]), PointFloat(*arr[-1]), arr[1:-1],
                           float(np.sum((arr[-1] - arr[0]) ** 2)))
        i = int(np.argmax(dev))
        if dev[i] < tol_sq or dev[i] == 0.0:
            assert out.result is SubproblemResult.Linearize
        else:
            assert out.result is SubproblemResult.Divide
            assert out.division_index == i + 1
