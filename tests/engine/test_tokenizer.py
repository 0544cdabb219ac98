from __future__ import annotations

from yoficator.tokenizer import iter_candidates


def _words(text: str) -> list[str]:
    return [candidate.text for candidate in iter_candidates(text)]


def test_candidates_start_with_any_letter_and_continue_lowercase() -> None:
    assert _words("Зеленая елка, ЕЛКА и еж.") == ["Зеленая", "елка"]


def test_candidate_spans_point_into_the_text() -> None:
    text = "Там елка"
    candidates = list(iter_candidates(text))

    assert [(c.start, c.end) for c in candidates] == [(0, 3), (4, 8)]
    assert all(text[c.start : c.end] == c.text for c in candidates)
    assert candidates[1].first == "е"
    assert candidates[1].rest == "лка"


def test_scan_is_restartable() -> None:
    text = "Береза и елка"
    assert _words(text) == _words(text) == ["Береза", "елка"]


def test_word_before_abbreviation_continuation_is_not_a_candidate() -> None:
    assert _words("мед. училище") == ["училище"]
    assert _words("мед.\xa0училище") == ["училище"]
    assert _words("мед.\n\tучилище") == ["училище"]


def test_word_before_two_capitals_is_not_a_candidate() -> None:
    assert _words("пять долл. США") == ["пять"]


def test_word_before_period_and_punctuation_is_not_a_candidate() -> None:
    assert _words("мед.,") == []
    assert _words("мед. (см") == []
    assert _words("мед.)") == []


def test_no_shorter_prefix_of_a_rejected_word_matches() -> None:
    assert _words("прим. ред") == ["ред"]


def test_sentence_final_words_are_candidates() -> None:
    assert _words("Купил мед.") == ["Купил", "мед"]
    assert _words("Купил мед. Вкусный") == ["Купил", "мед", "Вкусный"]
    assert _words("Купил мед!") == ["Купил", "мед"]


def test_capital_inside_a_word_starts_a_new_candidate() -> None:
    assert _words("приВет") == ["при", "Вет"]


def test_latin_and_digits_break_words() -> None:
    assert _words("abc елка2024 xyzберезаq") == ["елка", "береза"]
