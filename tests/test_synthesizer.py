"""Unit tests for the synthesizer module.

WHY: Sentence inference is the heart of the project. A wrong comparison
against the gap threshold or a missed capital changes every transcript
the tool produces, and the display path must agree with the flat text.

HOW: Tests cover each rule of the algorithm:
  - Empty and single-token inputs
  - Sentence starts after long silences, joins across short ones
  - "?" for question words before a long gap, "." otherwise
  - No double punctuation, no crash on empty words
  - Per-token display formatting and its agreement with synthesize()
  - Greedy line wrapping, active-token and click-position lookups
  - Timing diagnostics

RULES:
- Gaps are chosen well away from the threshold, except in the explicit
  boundary test where the subtraction is exact in binary floating point.
"""

import pytest

from transcribe_audio.core.ir import WordToken, make_tokens
from transcribe_audio.core.synthesizer import (
    build_display_lines,
    display_texts,
    find_timing_issues,
    format_for_display,
    highlight,
    max_chars_for_width,
    synthesize,
    token_active_at,
    token_at_position,
    wrap_into_lines,
)


class TestSynthesizeBasics:

    def test_empty_sequence(self):
        assert synthesize([]) == ""

    def test_single_token(self):
        assert synthesize(make_tokens([("hello", 0, 0.5)])) == "Hello."

    def test_single_empty_token(self):
        assert synthesize(make_tokens([("", 0, 0.5)])) == ""

    def test_single_token_already_punctuated(self):
        assert synthesize(make_tokens([("done.", 0, 0.5)])) == "Done."

    def test_short_gap_joins_with_space(self):
        tokens = make_tokens([("the", 0, 0.3), ("cat", 0.35, 0.3)])
        assert synthesize(tokens) == "The cat."

    def test_question_word_before_long_gap(self):
        tokens = make_tokens([("how", 0, 0.3), ("are", 1.0, 0.3)])
        assert synthesize(tokens) == "How? Are."

    def test_sample(self, sample_tokens, sample_text):
        assert synthesize(sample_tokens) == sample_text


class TestSentenceBoundaries:

    def test_long_gap_ends_statement_with_period(self):
        tokens = make_tokens([("yes", 0, 0.2), ("okay", 1.0, 0.2)])
        assert synthesize(tokens) == "Yes. Okay."

    def test_gap_equal_to_threshold_ends_sentence(self):
        # 1.0 - (0.0 + 0.4) == 0.6 exactly
        tokens = make_tokens([("so", 0.0, 0.4), ("yes", 1.0, 0.2)])
        assert synthesize(tokens) == "So. Yes."

    def test_question_word_is_case_insensitive(self):
        tokens = make_tokens([("WHY", 0, 0.2), ("not", 1.0, 0.2)])
        assert synthesize(tokens) == "WHY? Not."

    def test_question_word_without_gap_gets_nothing(self):
        tokens = make_tokens([("how", 0, 0.2), ("much", 0.25, 0.2)])
        assert synthesize(tokens) == "How much."

    def test_last_token_gets_period_even_if_question_word(self):
        tokens = make_tokens([("where", 0, 0.2), ("is", 0.25, 0.2)])
        assert synthesize(tokens) == "Where is."

    def test_negative_silence_is_a_short_gap(self):
        tokens = make_tokens([("a", 0, 1.0), ("b", 0.5, 0.2)])
        assert synthesize(tokens) == "A b."

    def test_previous_end_uses_token_end(self):
        tokens = make_tokens([("one", 0, 0.2), ("two", 1.0, 0.5), ("three", 1.6, 0.2)])
        assert synthesize(tokens) == "One. Two three."

    def test_custom_threshold(self):
        tokens = make_tokens([("the", 0, 0.3), ("cat", 0.35, 0.3)])
        assert synthesize(tokens, gap_threshold=0.01) == "The. Cat."

    def test_capitalizes_only_first_character(self):
        tokens = make_tokens([("iPhone", 0, 0.3), ("sales", 0.35, 0.3)])
        assert synthesize(tokens) == "IPhone sales."

    def test_first_letter_never_lowercase(self, sample_tokens):
        assert synthesize(sample_tokens)[0].isupper()


class TestExistingPunctuation:

    def test_no_double_punctuation_before_gap(self):
        tokens = make_tokens([("really?", 0, 0.3), ("yes", 1.5, 0.3)])
        assert synthesize(tokens) == "Really? Yes."

    def test_no_double_punctuation_at_end(self):
        tokens = make_tokens([("go", 0, 0.3), ("now!", 0.35, 0.3)])
        assert synthesize(tokens) == "Go now!"

    def test_punctuated_word_does_not_force_capital_after_short_gap(self):
        tokens = make_tokens([("wow!", 0, 0.2), ("ok", 0.25, 0.2)])
        assert synthesize(tokens) == "Wow! ok."

    def test_clause_mark_replaced_before_long_gap(self):
        tokens = make_tokens([("hello,", 0, 0.3), ("world", 1.5, 0.3)])
        assert synthesize(tokens) == "Hello. World."

    def test_clause_mark_on_question_word(self):
        tokens = make_tokens([("how,", 0, 0.3), ("now", 1.5, 0.3)])
        assert synthesize(tokens) == "How? Now."

    def test_clause_mark_replaced_at_end(self):
        tokens = make_tokens([("well", 0, 0.3), ("then,", 0.35, 0.3)])
        assert synthesize(tokens) == "Well then."
        assert synthesize(make_tokens([("fine;", 0, 0.3)])) == "Fine."

    def test_clause_mark_kept_after_short_gap(self):
        tokens = make_tokens([("hello,", 0, 0.3), ("world", 0.35, 0.3)])
        assert synthesize(tokens) == "Hello, world."
        assert display_texts(tokens) == ["Hello,", "world."]

    def test_empty_word_in_sequence_does_not_crash(self):
        tokens = make_tokens([("", 0, 0.1), ("ok", 0.15, 0.1)])
        assert synthesize(tokens) == " ok."


class TestPurity:

    def test_input_not_mutated(self, sample_tokens):
        before = list(sample_tokens)
        synthesize(sample_tokens)
        display_texts(sample_tokens)
        build_display_lines(sample_tokens, 20)
        assert sample_tokens == before
        assert sample_tokens[0].text == "the"

    def test_repeated_calls_identical(self, sample_tokens):
        assert synthesize(sample_tokens) == synthesize(sample_tokens)


class TestFormatForDisplay:

    def test_sample_display(self, sample_tokens, sample_display):
        assert [format_for_display(t, sample_tokens) for t in sample_tokens] == sample_display

    def test_idempotent(self, sample_tokens):
        token = sample_tokens[5]
        first = format_for_display(token, sample_tokens)
        second = format_for_display(token, sample_tokens)
        assert first == second == "Can?"

    def test_period_only_mode(self, sample_tokens):
        assert format_for_display(sample_tokens[5], sample_tokens, question_marks=False) == "Can."

    def test_already_punctuated_returned_after_capitalization(self):
        tokens = make_tokens([("ok", 0, 0.2), ("really?", 1.0, 0.2), ("yes", 1.25, 0.2)])
        assert format_for_display(tokens[1], tokens) == "Really?"

    def test_identity_by_key_not_text(self):
        tokens = make_tokens([("you", 0, 0.2), ("you", 0.25, 0.2), ("you", 1.5, 0.2)])
        assert [format_for_display(t, tokens) for t in tokens] == ["You", "you.", "You."]

    def test_directly_built_tokens_keep_their_own_identity(self):
        tokens = [
            WordToken("the", 0.0, 0.3),
            WordToken("cat", 0.35, 0.3),
            WordToken("sat", 0.7, 0.3),
        ]
        assert len({t.key for t in tokens}) == 3
        assert [format_for_display(t, tokens) for t in tokens] == ["The", "cat", "sat."]
        assert highlight(tokens, 0.8) == "The cat [sat.]"

    def test_unknown_token_returns_raw_text(self, sample_tokens):
        stranger = WordToken(text="x", start=0.0, duration=1.0, key=99)
        assert format_for_display(stranger, sample_tokens) == "x"

    def test_single_empty_token(self):
        tokens = make_tokens([("", 0, 0.5)])
        assert format_for_display(tokens[0], tokens) == ""

    def test_display_joins_to_synthesized_text(self, sample_tokens):
        assert " ".join(display_texts(sample_tokens)) == synthesize(sample_tokens)

    @pytest.mark.parametrize("triples", [
        [("hello", 0, 0.5)],
        [("how", 0, 0.3), ("are", 1.0, 0.3)],
        [("really?", 0, 0.3), ("yes", 1.5, 0.3)],
        [("", 0, 0.1), ("ok", 0.15, 0.1)],
        [("a", 0, 1.0), ("b", 0.5, 0.2)],
        [("hello,", 0, 0.3), ("how,", 1.5, 0.3), ("then;", 3.0, 0.3)],
    ])
    def test_display_agrees_with_synthesize(self, triples):
        tokens = make_tokens(triples)
        assert " ".join(display_texts(tokens)) == synthesize(tokens)


class TestWrapIntoLines:

    def test_sample_wraps_greedily(self, sample_tokens):
        lines = wrap_into_lines(sample_tokens, 20)
        assert [[t.text for t in line] for line in lines] == [
            ["the", "meeting", "starts"],
            ["at", "nine", "can", "you"],
            ["come"],
        ]

    def test_never_drops_or_reorders(self, sample_tokens):
        for width in (1, 5, 12, 20, 90):
            lines = wrap_into_lines(sample_tokens, width)
            assert [t for line in lines for t in line] == sample_tokens
            assert all(line for line in lines)

    def test_overlong_token_alone_on_its_line(self):
        tokens = make_tokens([("hi", 0, 0.1), ("extraordinarily", 0.2, 0.5), ("yo", 0.8, 0.1)])
        lines = wrap_into_lines(tokens, 8)
        assert [[t.text for t in line] for line in lines] == [["hi"], ["extraordinarily"], ["yo"]]

    def test_overlong_first_token_does_not_leave_empty_line(self):
        tokens = make_tokens([("extraordinarily", 0, 0.5), ("yo", 0.6, 0.1)])
        lines = wrap_into_lines(tokens, 8)
        assert [[t.text for t in line] for line in lines] == [["extraordinarily"], ["yo"]]

    def test_exact_fit_stays_on_line(self):
        # "ab " + "cd " == 6 characters
        tokens = make_tokens([("ab", 0, 0.1), ("cd", 0.2, 0.1)])
        assert len(wrap_into_lines(tokens, 6)) == 1
        assert len(wrap_into_lines(tokens, 5)) == 2

    def test_empty_input(self):
        assert wrap_into_lines([], 10) == []


class TestBuildDisplayLines:

    def test_lines_carry_display_text(self, sample_tokens):
        lines = build_display_lines(sample_tokens, 20)
        assert [line.text for line in lines] == [
            "The meeting starts",
            "at nine. Can? You",
            "come.",
        ]
        assert [line.char_count for line in lines] == [19, 16, 5]
        assert lines[1].start == pytest.approx(1.20)

    def test_max_chars_for_width(self):
        assert max_chars_for_width(700) == 100
        assert max_chars_for_width(50) == 10
        assert max_chars_for_width(0) == 10


class TestLookups:

    def test_active_token(self, sample_tokens):
        assert token_active_at(sample_tokens, 0.1).text == "the"
        assert token_active_at(sample_tokens, 2.6).key == 5

    def test_active_token_start_inclusive(self, sample_tokens):
        assert token_active_at(sample_tokens, 0.35).text == "meeting"

    def test_no_token_in_gap(self, sample_tokens):
        assert token_active_at(sample_tokens, 2.0) is None

    def test_none_before_first_and_after_last(self, sample_tokens):
        assert token_active_at(sample_tokens, -0.1) is None
        assert token_active_at(sample_tokens, sample_tokens[-1].end) is None
        assert token_active_at(sample_tokens, 10.0) is None

    def test_overlap_first_match_wins(self):
        tokens = make_tokens([("a", 0, 1.0), ("b", 0.5, 1.0)])
        assert token_active_at(tokens, 0.7).text == "a"

    def test_empty_sequence(self):
        assert token_active_at([], 0.0) is None

    def test_token_at_position(self, sample_tokens):
        lines = build_display_lines(sample_tokens, 20)
        # Row 1 renders as "at nine. Can? You "
        assert token_at_position(lines, 1, 0).text == "at"
        assert token_at_position(lines, 1, 2).text == "at"
        assert token_at_position(lines, 1, 3).text == "nine"
        assert token_at_position(lines, 1, 10).key == 5
        assert token_at_position(lines, 1, 17).text == "you"

    def test_token_at_position_out_of_range(self, sample_tokens):
        lines = build_display_lines(sample_tokens, 20)
        assert token_at_position(lines, 1, 18) is None
        assert token_at_position(lines, 3, 0) is None
        assert token_at_position(lines, -1, 0) is None
        assert token_at_position(lines, 0, -1) is None

    def test_highlight_marks_active_word(self, sample_tokens):
        assert highlight(sample_tokens, 2.6) == "The meeting starts at nine. [Can?] You come."

    def test_highlight_without_active_word(self, sample_tokens, sample_text):
        assert highlight(sample_tokens, 2.0) == sample_text


class TestTimingIssues:

    def test_clean_sequence(self, sample_tokens):
        assert find_timing_issues(sample_tokens) == []

    def test_reports_each_kind(self):
        tokens = make_tokens([("a", 0, -0.1), ("b", -0.5, 0.2)])
        issues = find_timing_issues(tokens)
        assert [(i.key, i.kind) for i in issues] == [
            (0, "negative_duration"),
            (1, "negative_start"),
            (1, "non_monotonic"),
        ]

    def test_malformed_timing_still_synthesizes(self):
        tokens = make_tokens([("late", 2.0, 0.2), ("early", 0.0, 0.2)])
        assert synthesize(tokens) == "Late early."
