import os
import sys
import numpy as np
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from pathcompact.geometry.PointBuffer import PointBuffer
from pathcompact.geometry.PointFloat import PointFloat


def test_from_tuples_and_points():
    a = PointBuffer.from_points([(0, 0), (1.5, 2)])
    b = PointBuffer.from_points([PointFloat(0, 0), PointFloat(1.5, 2)])
    assert a.as_tuples() == b.as_tuples() == [(0.0, 0.0), (1.5, 2.0)]
    assert len(a) == a.capacity == 2


def test_from_array_copies():
    arr = np.array([[1.0, 2.0], [3.0, 4.0]])
    buf = PointBuffer.from_points(arr)
    arr[0, 0] = 99.0
    assert buf[0] == PointFloat(1.0, 2.0)


def test_empty_input():
    buf = PointBuffer.from_points([])
    assert len(buf) == 0
    assert buf.as_array().shape == (0, 2)


def test_indexing_respects_logical_length():
    buf = PointBuffer.empty(5)
    buf.data[:2] = [[1, 1], [2, 2]]
    buf.length = 2
    assert buf[-1] == PointFloat(2, 2)
    assert list(buf) == [PointFloat(1, 1), PointFloat(2, 2)]
    with pytest.raises(IndexError):
        buf[2]


def test_copy_is_independent():
    buf = PointBuffer.empty(8)
    buf.data[:3] = [[0, 0], [1, 0], [2, 0]]
    buf.length = 3
    dup = buf.copy()
    assert dup.capacity == 8
    assert buf.as_tuples() == dup.as_tuples()
    dup.data[0] = [5, 5]
    assert buf[0] == PointFloat(0, 0)


def test_rejects_bad_shapes():
    with pytest.raises(ValueError):
        PointBuffer(np.zeros((3, 3)), 0)
    with pytest.raises(ValueError):
        PointBuffer(np.zeros((3, 2)), 4)


@pytest.mark.parametrize("bad", [[1, 2, 3], [(1, 2, 3)], [(1, "y")], [None]])
def test_rejects_entries_that_are_not_pairs(bad):
    with pytest.raises(ValueError, match="Bad point"):
        PointBuffer.from_points(bad)
