"""Tests for answer-embedding pattern detection."""
from __future__ import annotations

from models.shared import AnswerType
from scoring.patterns import (
    check_shared_number,
    check_shared_percentage,
    check_yes_no_restatement,
    compute_word_overlap,
    detect_answer_embedding,
)

SCENARIO_CLAIM = "Minister Kao said Taiwan has plans to produce tanks in the near future."
MEETING_CLAIM = "The ambassador met Minister Kao on March 3, 1975 to discuss tank production."


class TestSharedNumber:
    def test_multi_digit_number(self) -> None:
        match = check_shared_number("Were 4,500 troops deployed?", "Kao deployed 4,500 troops.")
        assert match.found
        assert "4,500" in match.reason

    def test_single_digit_ignored(self) -> None:
        assert not check_shared_number("Were 3 divisions moved?", "Kao moved 3 divisions.").found

    def test_different_numbers(self) -> None:
        assert not check_shared_number("Were 400 troops deployed?", "Kao deployed 4,500 troops.").found

    def test_year_is_not_an_answer_by_default(self) -> None:
        question = "What did a senior minister discuss with an ambassador in early 1975?"
        assert not check_shared_number(question, MEETING_CLAIM, AnswerType.WHAT).found

    def test_year_is_the_answer_for_when_questions(self) -> None:
        question = "When in 1975 did the ambassador meet the minister?"
        assert check_shared_number(question, MEETING_CLAIM, AnswerType.WHEN).found

    def test_year_sized_quantity_for_numeric_answer(self) -> None:
        match = detect_answer_embedding(
            "How many tanks, 1800, will be withdrawn?",
            "The USSR will withdraw 1800 tanks from Hungary.",
            AnswerType.NUMERIC,
        )
        assert match.found
        assert match.reason == 'Contains number "1800" from claim'

    def test_year_sized_quantity_outside_time_context(self) -> None:
        match = detect_answer_embedding(
            "Why were 2000 troops moved to the border?",
            "Kao moved 2000 troops to the border after the talks failed.",
            AnswerType.WHY,
        )
        assert match.found
        assert "2000" in match.reason

    def test_numeric_answer_ignores_time_context(self) -> None:
        question = "How many meetings took place in 1975?"
        assert check_shared_number(question, MEETING_CLAIM, AnswerType.NUMERIC).found

    def test_month_and_day_mark_time_window(self) -> None:
        question = "What did the ambassador discuss on March 3, 1975?"
        assert not check_shared_number(question, MEETING_CLAIM, AnswerType.WHAT).found


class TestSharedPercentage:
    def test_percent_spellings_match(self) -> None:
        match = check_shared_percentage("Was there a 5% reduction?", "Forces saw a 5 percent reduction.")
        assert match.found
        assert "5 percent" in match.reason

    def test_different_percentages(self) -> None:
        assert not check_shared_percentage("Was there a 7% cut?", "Forces saw a 5 percent cut.").found


class TestYesNoRestatement:
    def test_restated_claim(self) -> None:
        match = check_yes_no_restatement("Did the minister say Taiwan has plans to produce tanks?", SCENARIO_CLAIM)
        assert match.found
        assert match.reason == "Yes/no question restates claim"

    def test_not_a_yes_no_question(self) -> None:
        assert not check_yes_no_restatement("What did Taiwan plan to produce?", SCENARIO_CLAIM).found

    def test_low_overlap(self) -> None:
        assert not check_yes_no_restatement("Did the talks in Vienna collapse?", SCENARIO_CLAIM).found

    def test_word_overlap_empty_question(self) -> None:
        assert compute_word_overlap([], ["tanks"]) == 0.0
        assert compute_word_overlap(["the", "of"], ["tanks"]) == 0.0


class TestPriority:
    def test_number_wins_over_percentage(self) -> None:
        match = detect_answer_embedding("Was there a 15% cut?", "Forces saw a 15 percent cut.")
        assert match.found
        assert match.reason.startswith("Contains number")

    def test_percentage_wins_over_restatement(self) -> None:
        match = detect_answer_embedding(
            "Was there a 5% reduction in forces?",
            "There was a 5 percent reduction in forces.",
        )
        assert match.reason.startswith("Contains percentage")

    def test_nothing_embedded(self) -> None:
        question = "What did a senior minister discuss with an ambassador in early 1975?"
        assert not detect_answer_embedding(question, MEETING_CLAIM).found
