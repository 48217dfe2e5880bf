import pytest
from markov.tuples import Direction, TextTuple


def test_forward_shift_fills_then_slides():
    t = TextTuple(3)
    for w in ["foo", "bar", "baz"]:
        t.shift(w, Direction.FORWARD)
    assert t.encode() == "foo bar baz"

    t.shift("quux", Direction.FORWARD)
    assert t.encode() == "bar baz quux"

    for w in ["foo", "bar", "baz"]:
        t.shift(w, Direction.FORWARD)
    assert t.encode() == "foo bar baz"


def test_backward_shift_is_the_mirror():
    t = TextTuple(3)
    for w in ["foo", "bar", "baz"]:
        t.shift(w, Direction.BACKWARD)
    assert t.encode() == "baz bar foo"

    t.shift("quux", Direction.BACKWARD)
    assert t.encode() == "quux baz bar"


def test_length_never_changes():
    t = TextTuple(2)
    for w in "a b c d e".split():
        t.shift(w)
        assert len(t) == 2 and t.order == 2


def test_new_tuple_is_empty_words():
    assert TextTuple(3).elements() == ["", "", ""]


def test_copy_is_independent():
    t = TextTuple.from_words(["a", "b"])
    c = t.copy()
    t.shift("z")
    assert c.encode() == "a b"
    assert t.encode() == "b z"


def test_elements_returns_a_copy():
    t = TextTuple.from_words(["a", "b"])
    t.elements().append("c")
    assert t.order == 2


def test_encode_decode_round_trip():
    t = TextTuple.from_words(["The", "quick", "brown,", "fox!"])
    back = TextTuple.decode(t.encode())
    assert back == t
    assert back.order == 4
    assert str(back) == "The quick brown, fox!"


def test_decode_infers_order_from_fields():
    assert TextTuple.decode("  a   b\tc ").order == 3


@pytest.mark.parametrize("order", [0, -1])
def test_order_must_be_positive(order):
    with pytest.raises(ValueError):
        TextTuple(order)
