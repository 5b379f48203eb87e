import pytest

from .Stack import Stack, StackUnderflow, StackOverflow, STACK_LIMIT, join_states
from .fold  import NONZERO

def stack_test():
    s = Stack((1, 2, 3))
    s.dup(-3)
    assert s.state() == (1, 2, 3, 1)
    s.swap(-4)
    assert s.state() == (1, 2, 3, 1)
    s.swap(-2)
    assert s.state() == (1, 2, 1, 3)
    assert s.pop() == 3
    assert len(s) == 3

def stack_errors_test():
    with pytest.raises(StackUnderflow):
        Stack().pop()
    with pytest.raises(StackUnderflow):
        Stack((1,)).dup(-2)
    with pytest.raises(StackUnderflow):
        Stack((1,)).swap(-2)
    with pytest.raises(StackOverflow):
        Stack([0] * STACK_LIMIT).push(1)

def join_states_test():
    assert join_states([(1, 2), (1, 3)]) == (1, None)
    assert join_states([(NONZERO, 2), (NONZERO, 2)]) == (NONZERO, 2)
    assert join_states([(NONZERO,), (1,)]) == (None,)
    assert join_states([(0,)]) == (0,)
