"""Tests for the growable LIFO stack."""

import pytest

from stackcalc.stack import Stack, StackUnderflow


# --- construction ---

def test_new_stack_is_empty():
    s = Stack(4)
    assert s.empty()
    assert s.size() == 0
    assert s.capacity() == 4


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity_rejected(capacity):
    with pytest.raises(ValueError):
        Stack(capacity)


# --- push / pop / top ---

def test_lifo_order():
    s = Stack(8)
    for i in range(5):
        s.push(i)
    assert [s.pop() for _ in range(5)] == [4, 3, 2, 1, 0]
    assert s.empty()


def test_top_does_not_remove():
    s = Stack(2)
    s.push("x")
    assert s.top() == "x"
    assert s.size() == 1


def test_top_returns_the_stored_object():
    s = Stack(2)
    s.push([1])
    s.top().append(2)
    assert s.pop() == [1, 2]


def test_pop_empty_raises_underflow():
    s = Stack(1)
    with pytest.raises(StackUnderflow):
        s.pop()
    with pytest.raises(IndexError):
        s.top()


# --- growth ---

def test_capacity_doubles_when_full():
    s = Stack(2)
    s.push(1)
    s.push(2)
    assert s.capacity() == 2
    s.push(3)
    assert s.capacity() == 4
    assert s.size() == 3
    assert s.top() == 3


def test_many_pushes_keep_every_item():
    s = Stack(1)
    for i in range(1000):
        s.push(i)
    assert s.size() == 1000
    assert list(s) == list(range(1000))


# --- clear / iteration / repr ---

def test_clear_keeps_allocation():
    s = Stack(2)
    for i in range(5):
        s.push(i)
    cap = s.capacity()
    s.clear()
    assert s.empty()
    assert len(s) == 0
    assert s.capacity() == cap


def test_iterates_bottom_to_top():
    s = Stack(4)
    for ch in "abc":
        s.push(ch)
    assert list(s) == ["a", "b", "c"]


def test_repr():
    s = Stack(4)
    for i in (1, 2, 3):
        s.push(i)
    assert repr(s) == "Stack[1, 2, 3]"
    assert repr(Stack(1)) == "Stack[]"
