"""
Complete workflow example: Session → Lessons → Quiz → Search → Summary

Demonstrates end-to-end integration of all components:
1. Start a learner session (streak and daily goals)
2. Study a built-in lesson and author a custom one
3. Take the greetings quiz
4. Search flashcards with the debounced search
5. Print the home-screen summary
"""

import random
import sys
import tempfile
from pathlib import Path

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from kotoba import KotobaApp, config
from kotoba.models.authoring import build_flashcard


def main():
    config.configure_logging()
    data_dir = Path(tempfile.mkdtemp(prefix="kotoba-demo-"))
    app = KotobaApp.create(data_dir=data_dir)

    # ==================== Step 1: Start Session ====================
    print("=" * 60)
    print("STEP 1: Starting Session")
    print("=" * 60)

    app.learner.update_name("Aiko")

    def on_points(event):
        gained = event.points - event.previous_points
        print(f"  +{gained} points (level {event.level})")

    app.learner.subscribe(on_points)
    status = app.activate_session()

    print(f"✓ Welcome {app.learner.profile.name}, streak {status['streak']}")
    print(f"  Storage: {data_dir}")
    print()

    # ==================== Step 2: Lessons ====================
    print("=" * 60)
    print("STEP 2: Studying Lessons")
    print("=" * 60)

    lesson = app.lessons.get_lesson("lesson-01")
    for card in lesson.flashcards[:5]:
        app.lessons.mark_card_completed(lesson.id, card.id)
    app.lessons.lesson_accessed(lesson)
    print(f"✓ {lesson.title}: {app.lessons.get_progress(lesson.id):.0%} complete")

    custom = app.lessons.create_custom_lesson(
        "Animals",
        [
            build_flashcard("猫", "Cat", furigana="neko"),
            build_flashcard("犬", "Dog", furigana="inu"),
        ],
    )
    print(f"✓ Created custom lesson {custom.lesson_number}: {custom.title}")

    if not app.lessons.delete_lesson(0):
        print("  Built-in lessons can't be deleted")
    print()

    # ==================== Step 3: Quiz ====================
    print("=" * 60)
    print("STEP 3: Taking a Quiz")
    print("=" * 60)

    rng = random.Random(7)
    session = app.start_quiz("quiz-01", rng=rng)
    while session.current_question is not None:
        question = session.current_question
        pick = rng.choice(session.answer_options(question.id))
        response = session.submit_answer(question.id, pick)
        mark = "✓" if response.is_correct else "✗"
        print(f"  {mark} {question.question} ({question.furigana}): {pick}")

    result = session.complete()
    print(f"✓ Score {result.score}/{result.total_questions}, best {result.best_score}")
    print()

    # ==================== Step 4: Search ====================
    print("=" * 60)
    print("STEP 4: Searching Flashcards")
    print("=" * 60)

    def show(results):
        for r in results:
            print(f"  {r.japanese_text} = {r.english_text} (Lesson {r.lesson_number})")

    for partial in ["w", "wa", "wat", "water"]:
        app.search.submit(partial, show)
    app.search.wait(timeout=5)
    print()

    # ==================== Step 5: Summary ====================
    print("=" * 60)
    print("STEP 5: Learner Summary")
    print("=" * 60)

    summary = app.get_learner_summary()
    goals = summary["daily_goals"]
    print(f"✓ Level {summary['level']} with {summary['points']} points")
    print(f"  Daily goals: {goals['completed_count']}/3 complete")
    for recent in summary["recent_lessons"]:
        print(f"  Recent: {recent['title']} ({recent['progress']:.0%})")

    app.close()


if __name__ == "__main__":
    main()
