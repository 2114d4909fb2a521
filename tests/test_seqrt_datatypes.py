import copy
import pytest
from seqrt.seqrt_datatypes import Sequence, Absent

# --- Construction ---

def test_of_builds_dense_sequence():
    s = Sequence.of(1, 2, 3)
    assert len(s) == 3
    assert s.length == 3
    assert list(s) == [1, 2, 3]

def test_empty_sequence():
    s = Sequence()
    assert len(s) == 0
    assert list(s) == []

def test_none_is_a_value_not_a_hole():
    s = Sequence.of(None)
    assert len(s) == 1
    assert s.is_set(0)
    assert s.at(0) is None

# --- Assignment & holes ---

def test_assignment_past_end_leaves_holes():
    s = Sequence()
    s[3] = "x"
    assert len(s) == 4
    assert [s.is_set(i) for i in range(4)] == [False, False, False, True]
    assert s.at(0) is Absent
    assert s.at(3) == "x"

def test_append_and_overwrite():
    s = Sequence.of(1)
    s.append(2)
    s[0] = 10
    assert list(s) == [10, 2]

def test_negative_assignment_raises():
    s = Sequence.of(1, 2)
    with pytest.raises(IndexError):
        s[-1] = 5

def test_non_integer_index_raises():
    s = Sequence.of(1, 2)
    with pytest.raises(TypeError):
        s.at("0")
    with pytest.raises(TypeError):
        s[1.5] = 3
    with pytest.raises(TypeError):
        s.at(True)

def test_getitem_follows_python_protocol():
    s = Sequence.of(1, 2, 3)
    assert s[0] == 1
    assert s[-1] == 3
    with pytest.raises(IndexError):
        _ = s[3]
    with pytest.raises(TypeError):
        _ = s[0:1]

def test_iteration_yields_absent_for_holes():
    s = Sequence.of("a")
    s[2] = "c"
    assert list(s) == ["a", Absent, "c"]

def test_absent_is_falsy_and_renders_empty():
    assert not Absent
    assert str(Absent) == ""
    assert copy.deepcopy(Absent) is Absent

def test_absent_assignment_occupies_slot():
    s = Sequence()
    s[0] = Absent
    assert len(s) == 1
    assert s.is_set(0)
    assert s.at(0) is Absent

# --- at ---

def test_at_reads_stored_elements():
    s = Sequence.of(10, 20, 30)
    for i in range(3):
        assert s.at(i) == s[i]

def test_at_negative_wraps_relative_to_length():
    s = Sequence.of(1, 2, 3, 4, 5)
    assert s.at(-1) == s.at(len(s) - 1) == 5
    assert s.at(-5) == 1

@pytest.mark.parametrize("index", [5, 100, -6, -100])
def test_at_out_of_range_is_absent(index):
    s = Sequence.of(1, 2, 3, 4, 5)
    assert s.at(index) is Absent

def test_at_on_empty_is_absent():
    assert Sequence().at(0) is Absent
    assert Sequence().at(-1) is Absent

# --- concat ---

def test_concat_appends_without_gap():
    a = Sequence.of(1, 2, 3, 4, 5)
    c = a.concat(Sequence.of(6, 7, 8))
    assert len(c) == 8
    assert c.at(5) == 6
    assert c.at(7) == 8

def test_concat_preserves_holes():
    a = Sequence()
    a[1] = "b"
    b = Sequence()
    b[1] = "y"
    c = a.concat(b)
    assert len(c) == 4
    assert [c.is_set(i) for i in range(4)] == [False, True, False, True]

def test_concat_with_gap_leaves_unset_slots():
    a = Sequence.of(1, 2)
    c = a.concat(Sequence.of(3), gap=2)
    assert len(c) == 5
    assert c.at(2) is Absent and not c.is_set(2)
    assert c.at(3) is Absent
    assert c.at(4) == 3

def test_concat_empty_other_adds_no_gap():
    a = Sequence.of(1, 2)
    assert len(a.concat(Sequence(), gap=2)) == 2

def test_concat_accepts_plain_iterables():
    c = Sequence.of(1).concat([2, 3])
    assert c == Sequence.of(1, 2, 3)

def test_concat_rejects_non_iterables():
    with pytest.raises(TypeError):
        Sequence.of(1).concat(5)
    with pytest.raises(TypeError):
        Sequence.of(1).concat("ab")

def test_concat_does_not_alias_inputs():
    a = Sequence.of(1, 2)
    b = Sequence.of(3)
    c = a.concat(b)
    c[0] = 100
    c[5] = 200
    assert a == Sequence.of(1, 2)
    assert b == Sequence.of(3)

# --- join ---

@pytest.mark.parametrize("sep", ["", ",", " - "])
def test_join_empty_is_empty_string(sep):
    assert Sequence().join(sep) == ""

def test_join_basic():
    assert Sequence.of(1, 2, 3).join("-") == "1-2-3"
    assert Sequence.of(1, 2, 3, 4, 5).join("/") == "1/2/3/4/5"

def test_join_renders_holes_and_none_as_empty():
    s = Sequence.of(None)
    s[2] = "c"
    assert s.join("|") == "||c"

def test_join_default_separator_and_nesting():
    s = Sequence.of(1, Sequence.of(2, 3))
    assert s.join() == "1,2,3"
    assert str(s) == "1,2,3"

def test_join_rejects_non_string_separator():
    with pytest.raises(TypeError):
        Sequence.of(1, 2).join(0)
    with pytest.raises(TypeError):
        Sequence.of(1, 2).join(None)

# --- map ---

def test_map_preserves_length_and_order():
    s = Sequence.of(1, 2, 3)
    calls = []
    def double(v, i):
        calls.append(i)
        return v * 2
    m = s.map(double)
    assert len(m) == len(s)
    assert list(m) == [2, 4, 6]
    assert calls == [0, 1, 2]

def test_map_visits_holes_with_absent():
    s = Sequence()
    s[2] = 5
    seen = []
    m = s.map(lambda v, i: seen.append((v, i)) or i)
    assert seen == [(Absent, 0), (Absent, 1), (5, 2)]
    assert list(m) == [0, 1, 2]

def test_map_does_not_mutate_source():
    s = Sequence.of(1, 2)
    s.map(lambda v, i: v + 1)
    assert list(s) == [1, 2]

def test_map_propagates_callback_errors():
    def boom(v, i):
        raise RuntimeError("boom")
    with pytest.raises(RuntimeError, match="boom"):
        Sequence.of(1).map(boom)

# --- find ---

def test_find_returns_first_match():
    s = Sequence.of(1, 2, 3, 4, 5)
    assert s.find(lambda x, i: x % 2 == 0) == 2

def test_find_short_circuits():
    s = Sequence.of(1, 2, 3, 4, 5)
    visited = []
    def pred(x, i):
        visited.append(i)
        return x == 2
    s.find(pred)
    assert visited == [0, 1]

def test_find_absent_when_no_match_or_empty():
    assert Sequence.of(1, 3).find(lambda x, i: x % 2 == 0) is Absent
    assert Sequence().find(lambda x, i: True) is Absent

def test_find_can_match_a_hole():
    s = Sequence()
    s[1] = 1
    assert s.find(lambda x, i: i == 0) is Absent

def test_find_propagates_predicate_errors():
    with pytest.raises(ZeroDivisionError):
        Sequence.of(1).find(lambda x, i: 1 / 0)

# --- Equality & conversion ---

def test_equality_distinguishes_holes_from_none():
    a = Sequence()
    a[1] = 1
    b = Sequence.of(None, 1)
    assert a != b
    assert b == Sequence.of(None, 1)
    assert a != [None, 1]

def test_to_list_fills_holes():
    s = Sequence.of("a")
    s[2] = "c"
    assert s.to_list() == ["a", None, "c"]
    assert s.to_list(hole="?") == ["a", "?", "c"]

def test_join_renders_self_reference_as_empty():
    s = Sequence.of(1, 2)
    s[2] = s
    assert s.join("-") == "1-2-"
    assert str(s) == "1,2,"

def test_join_renders_shared_nested_sequence_twice():
    inner = Sequence.of("x")
    assert Sequence.of(inner, inner).join("|") == "x|x"
