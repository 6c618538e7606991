"""
Unit tests for Quiz Session.

Tests option shuffling, grading, points, score recording and daily goals.
"""

import random
import unittest
from datetime import datetime, timezone

from kotoba.catalog import load_catalog
from kotoba.models.learner_profile import LearnerModel
from kotoba.models.quiz_session import QuestionResponse, QuizResult, QuizSession
from kotoba.stores.quiz_store import QuizStore
from kotoba.utils.clock import FixedClock
from kotoba.utils.persistence import MemoryPersistence


class TestQuestionResponse(unittest.TestCase):
    """Test QuestionResponse dataclass."""

    def test_question_response_to_dict(self):
        """Test converting QuestionResponse to dictionary."""
        response = QuestionResponse(
            question_id="quiz-01-q-01",
            question_text="おはよう",
            learner_answer="Good morning",
            correct_answer="Good morning",
            is_correct=True,
            points_awarded=1,
            answered_at=datetime(2024, 11, 19, 9, 0, tzinfo=timezone.utc),
        )
        result = response.to_dict()
        self.assertEqual(result["question_id"], "quiz-01-q-01")
        self.assertTrue(result["is_correct"])
        self.assertEqual(result["answered_at"], "2024-11-19T09:00:00+00:00")


class TestQuizSession(unittest.TestCase):
    """Test QuizSession against the built-in greetings quiz."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FixedClock(datetime(2024, 11, 19, 9, 0, tzinfo=timezone.utc))
        self.persistence = MemoryPersistence()
        self.learner = LearnerModel(self.persistence, clock=self.clock)
        self.quiz_store = QuizStore(self.persistence, catalog=load_catalog(), clock=self.clock)
        self.quiz = self.quiz_store.get_quiz("quiz-01")
        self.session = QuizSession(
            self.quiz,
            self.learner,
            self.quiz_store,
            rng=random.Random(42),
            clock=self.clock,
        )

    def answer_all_correctly(self):
        for question in self.quiz.questions:
            self.session.submit_answer(question.id, question.correct_answer)

    def test_session_creation(self):
        """Test a new session starts at the first question."""
        self.assertTrue(self.session.session_id.startswith("qs-"))
        self.assertEqual(self.session.total_questions, 2)
        self.assertEqual(self.session.current_question.id, "quiz-01-q-01")
        self.assertEqual(self.session.score, 0)
        self.assertFalse(self.session.is_complete)

    def test_answer_options_contain_all_answers(self):
        """Test options are the correct answer plus the distractors."""
        options = self.session.answer_options("quiz-01-q-01")
        self.assertEqual(
            sorted(options),
            sorted(["Good morning", "Good evening", "Good afternoon", "Hello"]),
        )

    def test_answer_options_order_fixed(self):
        """Test the shuffle happens once per question."""
        first = self.session.answer_options("quiz-01-q-02")
        first.reverse()
        second = self.session.answer_options("quiz-01-q-02")
        self.assertEqual(second, list(reversed(first)))

    def test_answer_options_unknown_question(self):
        """Test options for a question outside the quiz."""
        with self.assertRaises(ValueError):
            self.session.answer_options("quiz-01-q-99")

    def test_correct_answer_awards_point(self):
        """Test a correct answer grants one point immediately."""
        response = self.session.submit_answer("quiz-01-q-01", "Good morning")

        self.assertTrue(response.is_correct)
        self.assertEqual(response.points_awarded, 1)
        self.assertEqual(self.learner.points, 1)
        self.assertEqual(self.session.current_question.id, "quiz-01-q-02")

    def test_wrong_answer_awards_nothing(self):
        """Test a wrong answer grants no points."""
        response = self.session.submit_answer("quiz-01-q-02", "Goodbye")

        self.assertFalse(response.is_correct)
        self.assertEqual(response.correct_answer, "Good afternoon")
        self.assertEqual(self.learner.points, 0)

    def test_empty_answer_rejected(self):
        """Test blank answers are rejected."""
        with self.assertRaises(ValueError):
            self.session.submit_answer("quiz-01-q-01", "  ")

    def test_answer_twice_rejected(self):
        """Test a question can only be answered once."""
        self.session.submit_answer("quiz-01-q-01", "Hello")
        with self.assertRaises(ValueError):
            self.session.submit_answer("quiz-01-q-01", "Good morning")
        self.assertEqual(self.learner.points, 0)

    def test_complete_records_score_and_goal(self):
        """Test completing stores the best score and ticks the quiz goal."""
        self.answer_all_correctly()

        result = self.session.complete()

        self.assertIsInstance(result, QuizResult)
        self.assertEqual(result.score, 2)
        self.assertEqual(result.total_questions, 2)
        self.assertEqual(result.points_earned, 2)
        self.assertEqual(result.best_score, 2)
        self.assertTrue(self.session.is_complete)
        self.assertIsNone(self.session.current_question)
        self.assertEqual(self.quiz_store.get_best_score("quiz-01"), 2)
        self.assertEqual(
            self.quiz_store.progress_for("quiz-01").correct_answers,
            {"quiz-01-q-01", "quiz-01-q-02"},
        )
        self.assertTrue(self.learner.daily_goals.quiz_completed)

    def test_unanswered_questions_count_as_wrong(self):
        """Test completing early scores only what was answered."""
        self.session.submit_answer("quiz-01-q-01", "Good morning")

        result = self.session.complete()

        self.assertEqual(result.score, 1)
        self.assertEqual(result.total_questions, 2)

    def test_best_score_kept_across_sessions(self):
        """Test a worse attempt reports the earlier best score."""
        self.answer_all_correctly()
        self.session.complete()

        retry = QuizSession(self.quiz, self.learner, self.quiz_store, clock=self.clock)
        retry.submit_answer("quiz-01-q-01", "Hello")
        result = retry.complete()

        self.assertEqual(result.score, 0)
        self.assertEqual(result.best_score, 2)
        self.assertEqual(self.learner.points, 2)

    def test_complete_twice_rejected(self):
        """Test a session can only be completed once."""
        self.session.complete()
        with self.assertRaises(ValueError):
            self.session.complete()

    def test_no_answers_after_completion(self):
        """Test answering a completed session fails."""
        self.session.complete()
        with self.assertRaises(ValueError):
            self.session.submit_answer("quiz-01-q-01", "Good morning")

    def test_to_dict(self):
        """Test converting a session to dictionary."""
        self.session.submit_answer("quiz-01-q-01", "Good morning")
        self.session.complete()

        data = self.session.to_dict()

        self.assertEqual(data["quiz_id"], "quiz-01")
        self.assertEqual(data["score"], 1)
        self.assertEqual(len(data["responses"]), 1)
        self.assertIsNotNone(data["completed_at"])


if __name__ == "__main__":
    unittest.main()
