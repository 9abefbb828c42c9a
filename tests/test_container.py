"""Tests for Container routed access and the Python protocol sugar."""

import pytest

from signalarray import Container, IndexChange, LengthChange, Notification
from signalarray.container import MAX_PADDING


class TestRead:
    def test_length_and_index(self):
        c = Container([1, 2, 3])
        assert c.read("length") == 3
        assert c.read("1") == 2
        assert c.read(2) == 3
        assert c.read("1.0") == 2

    def test_out_of_range_index_is_none(self):
        c = Container([1])
        assert c.read("5") is None
        assert c.get(-5) is None

    def test_negative_index_counts_from_end(self):
        c = Container([1, 2, 3])
        assert c.get(-1) == 3

    def test_unknown_names_are_absent(self):
        c = Container([1])
        assert c.read("1.5") is None
        assert c.read("nope") is None
        assert c.read("nan") is None

    def test_operation_names_return_bound_wrappers(self):
        c = Container([1])
        push = c.read("append")
        push(2)
        assert c.slice() == [1, 2]

    def test_public_names_return_bound_methods(self):
        c = Container([1])
        assert c.read("subscribe") == c.subscribe
        assert c.read("version") == 0


class TestWrite:
    def test_index_write_notifies(self):
        c = Container([1, 2, 3])
        log = []
        c.subscribe(log.append)
        assert c.write("1", 9) is True
        assert log == [
            Notification(key="index:1", change=IndexChange(index=1, old_value=2, new_value=9), version=1)
        ]
        assert c.slice() == [1, 9, 3]

    def test_write_past_end_pads_with_none(self):
        c = Container([1])
        c.set(3, "x")
        assert c.slice() == [1, None, None, "x"]

    def test_negative_index_write(self):
        c = Container([1, 2])
        assert c.set(-1, 5) is True
        assert c.slice() == [1, 5]
        assert c.set(-10, 5) is False
        assert c.version == 1

    def test_length_truncates_and_extends(self):
        c = Container([1, 2, 3])
        log = []
        c.subscribe(log.append)
        assert c.write("length", 1) is True
        assert c.slice() == [1]
        c.length = 3
        assert c.slice() == [1, None, None]
        assert [n.change for n in log] == [
            LengthChange(old_value=3, new_value=1),
            LengthChange(old_value=1, new_value=3),
        ]
        assert [n.key for n in log] == ["length", "length"]

    def test_invalid_length_raises(self):
        c = Container([1])
        with pytest.raises(ValueError):
            c.length = -1

    def test_rejected_write_changes_nothing(self):
        c = Container([1, 2])
        log = []
        c.subscribe(log.append)
        assert c.write("foo", 1) is False
        assert c.write("1.5", 1) is False
        assert log == []
        assert c.version == 0
        assert c.slice() == [1, 2]

    def test_version_increments_once_per_write(self):
        c = Container([1, 2, 3])
        for i, value in enumerate([7, 8, 9]):
            c[i] = value
            assert c.version == i + 1


class TestHas:
    def test_membership(self):
        c = Container([1, 2])
        assert c.has("0")
        assert c.has(1)
        assert not c.has("2")
        assert c.has("length")
        assert c.has("append")
        assert c.has("derived_map")
        assert not c.has("nope")
        assert not c.has(None)


class TestSugar:
    def test_item_access(self):
        c = Container([1, 2, 3])
        assert c[0] == 1
        c[0] = 10
        assert c[0] == 10
        assert c[0:2] == [10, 2]
        assert c[::2] == [10, 3]

    def test_bad_item_assignment_raises(self):
        c = Container([1])
        with pytest.raises(TypeError):
            c["foo"] = 1
        with pytest.raises(IndexError):
            c[-5] = 1

    def test_len_iter_contains(self):
        c = Container([1, 2, 3])
        assert len(c) == 3
        assert list(c) == [1, 2, 3]
        assert 2 in c
        assert 5 not in c

    def test_unknown_attribute(self):
        c = Container([1])
        with pytest.raises(AttributeError):
            c.nope

    def test_wraps_list_in_place(self):
        data = [1, 2]
        c = Container(data)
        c.append(3)
        assert data == [1, 2, 3]

    def test_accepts_any_iterable(self):
        assert Container(range(3)).slice() == [0, 1, 2]
        assert Container().slice() == []

    def test_repr(self):
        assert repr(Container([1])) == "Container([1])"


class TestReadOnlyHelpers:
    def test_helpers(self):
        c = Container([1, 2, 3, 4])
        assert c.map(lambda x: x * 10) == [10, 20, 30, 40]
        assert c.filter(lambda x: x % 2 == 0) == [2, 4]
        assert c.reduce(lambda a, b: a + b) == 10
        assert c.reduce(lambda a, b: a + b, 5) == 15
        assert c.find(lambda x: x > 2) == 3
        assert c.find(lambda x: x > 10) is None
        assert c.find_index(lambda x: x > 2) == 2
        assert c.find_index(lambda x: x > 10) == -1
        assert c.includes(3)
        assert c.slice(1, 3) == [2, 3]

    def test_helpers_do_not_notify(self):
        c = Container([1, 2])
        c.map(str)
        c.filter(bool)
        assert c.version == 0


class TestPaddingLimit:
    def test_far_index_write_is_rejected(self):
        c = Container([1])
        log = []
        c.subscribe(log.append)
        assert c.write("1e12", "x") is False
        assert c.set(MAX_PADDING + 2, "x") is False
        assert c.slice() == [1]
        assert log == []
        with pytest.raises(IndexError):
            c["1e12"] = "x"

    def test_padding_up_to_limit_is_accepted(self):
        c = Container([])
        assert c.set(MAX_PADDING, "x") is True
        assert len(c) == MAX_PADDING + 1

    def test_far_length_write_is_rejected(self):
        c = Container([1])
        assert c.write("length", 10 ** 12) is False
        assert c.version == 0
        with pytest.raises(ValueError):
            c.length = 10 ** 12
        assert c.slice() == [1]
