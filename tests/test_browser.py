from datetime import datetime, timezone

from wortschatz.browser import filter_words, page_window, paginate
from wortschatz.models import WordRecord


def record(german, pos="Noun", translation="", definition=""):
    return WordRecord(
        german=german,
        part_of_speech=pos,
        article="der" if pos == "Noun" else "–",
        definition=definition or f"Definition of {german}",
        translation=translation or german,
        created_at=datetime.now(timezone.utc),
    )


WORDS = [
    record("apfel", translation="apple"),
    record("arbeiten", pos="Verb", translation="to work"),
    record("hund", translation="dog", definition="Ein Haustier"),
    record("schnell", pos="Adjective", translation="fast"),
]


def test_no_filters_returns_everything():
    assert filter_words(WORDS) == WORDS


def test_filter_by_part_of_speech():
    assert [w.german for w in filter_words(WORDS, pos="Noun")] == ["apfel", "hund"]


def test_filter_by_first_letter():
    assert [w.german for w in filter_words(WORDS, alpha="A")] == ["apfel", "arbeiten"]


def test_search_covers_translation_and_definition():
    assert [w.german for w in filter_words(WORDS, search="DOG")] == ["hund"]
    assert [w.german for w in filter_words(WORDS, search="haustier")] == ["hund"]


def test_filters_combine():
    assert [w.german for w in filter_words(WORDS, pos="Verb", alpha="a", search="work")] == ["arbeiten"]
    assert filter_words(WORDS, pos="Adverb") == []


def test_paginate_middle_page():
    page = paginate(list(range(25)), page=2, per_page=10)

    assert page["items"] == list(range(10, 20))
    assert page["total_pages"] == 3
    assert (page["start_item"], page["end_item"]) == (11, 20)
    assert page["page_numbers"] == [1, 2, 3]


def test_paginate_clamps_page_and_handles_empty():
    assert paginate(list(range(5)), page=9)["current_page"] == 1
    empty = paginate([], page=1)
    assert empty["items"] == []
    assert empty["total_pages"] == 1
    assert (empty["start_item"], empty["end_item"]) == (0, 0)


def test_page_window_shows_at_most_five_pages():
    assert page_window(1, 10) == [1, 2, 3, 4, 5]
    assert page_window(6, 10) == [4, 5, 6, 7, 8]
    assert page_window(10, 10) == [6, 7, 8, 9, 10]
    assert page_window(2, 3) == [1, 2, 3]


def test_filters_ignore_case():
    assert [w.german for w in filter_words(WORDS, pos="noun")] == ["apfel", "hund"]
    assert filter_words(WORDS, pos="all", alpha="ALL") == WORDS
