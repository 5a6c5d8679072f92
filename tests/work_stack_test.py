import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from pathcompact.compacter.CompacterConfig import CompacterConfig
from pathcompact.compacter.WorkStack import StackAllocationError, WorkItem, WorkStack


def test_lifo_order():
    stack = WorkStack()
    stack.push(WorkItem(0, 0, 10))
    stack.push(WorkItem(4, 4, 6))
    assert len(stack) == 2
    assert stack.pop() == WorkItem(4, 4, 6)
    assert stack.pop() == WorkItem(0, 0, 10)
    assert not stack


def test_grows_in_fixed_chunks():
    stack = WorkStack(CompacterConfig(stack_unit=2))
    assert stack.capacity == 2
    for i in range(5):
        stack.push(WorkItem(i, i, 3))
    assert stack.capacity == 6
    assert stack.peak == 5
    # contents survive regrowth
    assert [stack.pop().source_offset for _ in range(5)] == [4, 3, 2, 1, 0]


def test_limit_raises_without_corrupting_stack():
    stack = WorkStack(CompacterConfig(stack_unit=2, max_stack_items=3))
    for i in range(3):
        stack.push(WorkItem(i, i, 3))
    with pytest.raises(StackAllocationError):
        stack.push(WorkItem(9, 9, 3))
    assert len(stack) == 3
    assert stack.pop() == WorkItem(2, 2, 3)


def test_allocation_error_is_a_memory_error():
    assert issubclass(StackAllocationError, MemoryError)


def test_pop_empty():
    with pytest.raises(IndexError):
        WorkStack().pop()


@pytest.mark.parametrize("kwargs", [{"stack_unit": 0}, {"max_stack_items": 0}])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        CompacterConfig(**kwargs)
