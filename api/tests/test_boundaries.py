"""Tests for boundary predicates and keyword extraction."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from stages.boundaries import (
    alpha_char_count,
    contains_word,
    count_words,
    ends_with_punctuation,
    ends_with_punctuation_or_bracket,
    ends_with_punctuation_or_bracket_or_next_capital,
    ends_with_punctuation_or_next_capital,
    ends_with_strong_punctuation,
    ends_with_strong_punctuation_or_next_capital,
    extract_last_word,
    is_excluded_word,
    is_valid_t1_frame3,
    starts_with_capital,
)


class TestPunctuation:
    @pytest.mark.parametrize("text", ["Done.", "Wait!", "Why?", "And then-", "So;", "Well,", "  trailing.  "])
    def test_ends_with_punctuation(self, text):
        assert ends_with_punctuation(text)

    @pytest.mark.parametrize("text", ["no mark", "closing)", "", "   "])
    def test_not_ends_with_punctuation(self, text):
        assert not ends_with_punctuation(text)

    def test_strong_is_sentence_final_only(self):
        assert ends_with_strong_punctuation("Stop.")
        assert ends_with_strong_punctuation("Stop!")
        assert ends_with_strong_punctuation("Stop?")
        assert not ends_with_strong_punctuation("Stop,")
        assert not ends_with_strong_punctuation("Stop;")
        assert not ends_with_strong_punctuation("Stop-")

    def test_bracket_variant(self):
        assert ends_with_punctuation_or_bracket("(laughs)")
        assert ends_with_punctuation_or_bracket("[music]")
        assert ends_with_punctuation_or_bracket("cut off-")
        assert not ends_with_punctuation_or_bracket("a comma,")


class TestNextCapital:
    def test_starts_with_capital(self):
        assert starts_with_capital("Hello")
        assert starts_with_capital("  I think so")
        assert starts_with_capital("- Where are you?")
        assert starts_with_capital('"Run," he said')
        assert not starts_with_capital("hello")
        assert not starts_with_capital("42 problems")
        assert not starts_with_capital("")

    def test_punctuation_short_circuits(self):
        assert ends_with_punctuation_or_next_capital("done.", "lowercase")
        assert ends_with_strong_punctuation_or_next_capital("done!", None)

    def test_falls_back_to_next_capital(self):
        assert ends_with_punctuation_or_next_capital("no mark", "Next line")
        assert ends_with_strong_punctuation_or_next_capital("no mark", "Next line")
        assert ends_with_punctuation_or_bracket_or_next_capital("no mark", "Next line")

    def test_no_mark_and_lowercase_next(self):
        assert not ends_with_punctuation_or_next_capital("no mark", "next line")
        assert not ends_with_strong_punctuation_or_next_capital("a comma,", "next line")

    def test_missing_next_record(self):
        assert not ends_with_strong_punctuation_or_next_capital("no mark", None)


class TestExtractLastWord:
    def test_strips_punctuation(self):
        assert extract_last_word("What a day!") == "day"

    def test_lowercases(self):
        assert extract_last_word("ANSWER!") == "answer"

    def test_contraction_letters_only(self):
        assert extract_last_word("I don't.") == "dont"

    def test_multiline(self):
        assert extract_last_word("First line\nsecond Line.") == "line"

    def test_none_when_no_letters(self):
        assert extract_last_word("It cost 42!") is None
        assert extract_last_word("") is None
        assert extract_last_word("   ") is None


class TestExcludedWords:
    @pytest.mark.parametrize("word", ["yes", "No", "YOU", "nothing", "three"])
    def test_excluded(self, word):
        assert is_excluded_word(word)

    def test_content_word_allowed(self):
        assert not is_excluded_word("banana")


class TestFrameChecks:
    def test_count_words(self):
        assert count_words("one two  three") == 3
        assert count_words("  ") == 0
        assert count_words("line one\nline two") == 4

    def test_valid_t1_frame3(self):
        assert is_valid_t1_frame3("Answer!")
        assert is_valid_t1_frame3("  Banana. ")

    @pytest.mark.parametrize("text", ["Yes!", "Go home.", "Wait,", "", "42!", "Nothing."])
    def test_invalid_t1_frame3(self, text):
        assert not is_valid_t1_frame3(text)

    def test_contains_word(self):
        assert contains_word("I love a good Pickle.", "pickle")
        assert not contains_word("Pickles everywhere", "pickle")
        assert not contains_word("", "pickle")

    def test_contains_word_escapes_pattern(self):
        assert not contains_word("axb", "a.b")

    def test_alpha_char_count(self):
        assert alpha_char_count("Hi, you 2!") == 5
