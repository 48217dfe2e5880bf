import pytest
from markov.errors import NoMatch
from markov.ingest import ingest


@pytest.mark.e2e
def test_prefixes_containing_word_across_two_streams(store):
    ingest(store, ["foo bar baz foo baz bar foo bar bar baz bar baz foo"], 2, "test")
    ingest(store, ["baz foo bar baz baz foo foo foo bar baz"], 2, "test")

    res = store.find_prefixes_containing("baz")
    assert sorted(p.tuple.encode() for p in res) == sorted(
        ["bar baz", "baz foo", "foo baz", "baz bar", "baz baz"]
    )
    assert all(p.order == 2 for p in res)
    assert [p.id for p in res] == sorted(p.id for p in res)


@pytest.mark.e2e
def test_search_is_token_based_and_case_insensitive(store):
    ingest(store, ["The quick brown fox jumps"], 2, "test")
    hits = [p.tuple.encode() for p in store.find_prefixes_containing("the")]
    assert hits == ["The quick"]
    # "qu" is not a token of any prefix
    with pytest.raises(NoMatch):
        store.find_prefixes_containing("qu")


@pytest.mark.e2e
def test_search_ignores_punctuation(store):
    ingest(store, ["hello, world! again and again"], 2, "test")
    hits = [p.tuple.encode() for p in store.find_prefixes_containing("world")]
    assert hits == ["hello, world!", "world! again"]


@pytest.mark.e2e
def test_multi_word_argument_is_a_phrase(store):
    ingest(store, ["a b c a c b"], 2, "test")
    hits = [p.tuple.encode() for p in store.find_prefixes_containing("c a")]
    assert hits == ["c a"]


@pytest.mark.e2e
def test_no_match_raises(store):
    ingest(store, ["one two three"], 1, "test")
    with pytest.raises(NoMatch) as ei:
        store.find_prefixes_containing("zebra")
    assert ei.value.word == "zebra"


@pytest.mark.e2e
def test_empty_or_symbol_only_query_is_no_match(store):
    ingest(store, ["one two three"], 1, "test")
    for q in ["", "   ", "!!!"]:
        with pytest.raises(NoMatch):
            store.find_prefixes_containing(q)


@pytest.mark.e2e
def test_non_ascii_words_are_found_as_stored(store):
    ingest(store, ["die Straße ist lang", "ein Café am Eck"], 2, "test")
    hits = [p.tuple.encode() for p in store.find_prefixes_containing("Straße")]
    assert hits == ["die Straße", "Straße ist"]
    # lowercase only, no "ß" -> "ss" folding
    with pytest.raises(NoMatch):
        store.find_prefixes_containing("strasse")
    # accents are ignored
    assert [p.tuple.encode() for p in store.find_prefixes_containing("CAFE")] == ["ein Café", "Café am"]


@pytest.mark.e2e
def test_double_quotes_in_the_query_are_literal(store):
    ingest(store, ['he said "hi" twice'], 2, "test")
    hits = [p.tuple.encode() for p in store.find_prefixes_containing('"hi"')]
    assert hits == ['said "hi"', '"hi" twice']
