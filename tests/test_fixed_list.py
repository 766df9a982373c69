import pytest

from gnbcore.fixed_list import FixedList


def udatas(lst):
    return [node.udata for node in lst]


def test_push_returns_node_with_position_and_data():
    lst = FixedList(3)
    first = lst.push("a")
    second = lst.push("b")
    assert (first.idx, first.udata) == (0, "a")
    assert (second.idx, second.udata) == (1, "b")
    assert len(lst) == 2


def test_push_into_full_list_raises():
    lst = FixedList(1)
    lst.push("a")
    with pytest.raises(IndexError):
        lst.push("b")


def test_pop_moves_last_into_gap():
    lst = FixedList(4)
    a = lst.push("a")
    lst.push("b")
    c = lst.push("c")
    lst.pop(a)
    assert udatas(lst) == ["c", "b"]
    assert c.idx == 0


def test_pop_last_node():
    lst = FixedList(3)
    lst.push("a")
    b = lst.push("b")
    lst.pop(b)
    assert udatas(lst) == ["a"]


def test_positions_match_iteration_order():
    lst = FixedList(5)
    nodes = [lst.push(i) for i in range(5)]
    lst.pop(nodes[1])
    lst.pop(nodes[3])
    assert [node.idx for node in lst] == list(range(len(lst)))
    assert sorted(udatas(lst)) == [0, 2, 4]


def test_popped_slot_is_reused():
    lst = FixedList(2)
    a = lst.push("a")
    lst.push("b")
    lst.pop(a)
    lst.push("c")
    assert sorted(udatas(lst)) == ["b", "c"]
    assert len(lst) == 2


def test_pop_twice_raises():
    lst = FixedList(2)
    a = lst.push("a")
    lst.push("b")
    lst.pop(a)
    with pytest.raises(ValueError):
        lst.pop(a)


def test_pop_from_empty_raises():
    lst = FixedList(2)
    node = lst.push("a")
    lst.pop(node)
    with pytest.raises(ValueError):
        lst.pop(node)
    assert len(lst) == 0


def test_pop_node_of_other_list_raises():
    one = FixedList(2)
    other = FixedList(2)
    one.push("a")
    foreign = other.push("x")
    with pytest.raises(ValueError):
        one.pop(foreign)