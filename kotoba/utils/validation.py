"""
Validation utilities for Kotoba.

Two layers:
- JSON Schema validation of persisted records and bundled catalog data
- Draft validation of user-authored lessons, flashcards and quizzes

Persisted records that fail schema validation are discarded by the caller;
drafts that fail validation must not be saved.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from jsonschema import Draft7Validator, FormatChecker, ValidationError

from ..config import config


class ContentValidationError(ValueError):
    """Raised when user-authored content is missing required fields."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ValidationResult:
    """
    Result of a validation attempt.

    Attributes:
        valid: Whether data passed validation
        errors: List of error messages
        data: The validated data
    """

    def __init__(self, valid: bool, errors: list[str], data: Any = None):
        self.valid = valid
        self.errors = errors
        self.data = data

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.valid:
            return "Validation passed"
        return f"Validation failed with {len(self.errors)} error(s):\n" + "\n".join(
            f"  - {error}" for error in self.errors
        )

    def raise_for_errors(self) -> None:
        if not self.valid:
            raise ContentValidationError(self.errors)


class SchemaValidator:
    """
    JSON Schema validator for one record type.

    Usage:
        validator = SchemaValidator("path/to/schema.json")
        result = validator.validate(data)
        if not result:
            print(result.errors)
    """

    def __init__(self, schema_path: Path | str):
        """
        Initialize validator with a schema file.

        Args:
            schema_path: Path to JSON Schema file
        """
        self.schema_path = Path(schema_path)
        with open(self.schema_path, "r", encoding="utf-8") as f:
            self.schema = json.load(f)
        # FormatChecker enforces "date" and friends
        self.validator = Draft7Validator(self.schema, format_checker=FormatChecker())

    def validate(self, data: Any) -> ValidationResult:
        """
        Validate data against schema.

        Args:
            data: Decoded JSON value

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = [self._format_error(error) for error in self.validator.iter_errors(data)]
        if errors:
            return ValidationResult(valid=False, errors=errors, data=data)
        return ValidationResult(valid=True, errors=[], data=data)

    def check(self, data: Any) -> None:
        """
        Validate and raise on the first problem.

        Raises:
            ValidationError: If data is invalid
        """
        result = self.validate(data)
        if not result.valid:
            raise ValidationError("\n".join(result.errors))

    def _format_error(self, error: ValidationError) -> str:
        """Convert ValidationError to a human-readable message."""
        path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        schema_path = "/".join(str(p) for p in error.schema_path)
        return f"At '{path}': {error.message} [validator={error.validator}, schema_path=/{schema_path}]"


_validators: Dict[str, SchemaValidator] = {}
_validators_lock = threading.Lock()


def get_validator(schema_name: str, schemas_dir: Optional[Path] = None) -> SchemaValidator:
    """Get cached validator for a bundled schema, e.g. ``"learner_profile"``."""
    directory = Path(schemas_dir) if schemas_dir else config.paths.schemas_dir
    schema_path = directory / f"{schema_name}.schema.json"
    key = str(schema_path)
    with _validators_lock:
        if key not in _validators:
            _validators[key] = SchemaValidator(schema_path)
        return _validators[key]


# ==================== Authoring drafts ====================


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return None if is_blank(value) else value


def validate_flashcard_draft(front: str, back: str) -> ValidationResult:
    """Check the fields a flashcard cannot be saved without."""
    errors = []
    if is_blank(front):
        errors.append("Flashcard front (Japanese) is required")
    if is_blank(back):
        errors.append("Flashcard back (English) is required")
    return ValidationResult(valid=not errors, errors=errors)


def validate_lesson_draft(title: str, flashcards: Sequence[Any]) -> ValidationResult:
    errors = []
    if is_blank(title):
        errors.append("Lesson title is required")
    if not flashcards:
        errors.append("A lesson needs at least one flashcard")
    return ValidationResult(valid=not errors, errors=errors)


def validate_question_draft(
    question: str,
    correct_answer: str,
    wrong_answers: Sequence[str],
) -> ValidationResult:
    """
    Check a quiz question draft.

    The first wrong answer is mandatory; later ones may be left blank.
    """
    errors = []
    if is_blank(question):
        errors.append("Question text is required")
    if is_blank(correct_answer):
        errors.append("Correct answer is required")
    if not wrong_answers or is_blank(wrong_answers[0]):
        errors.append("At least one wrong answer is required")
    return ValidationResult(valid=not errors, errors=errors)


def validate_quiz_draft(title: str, questions: Sequence[Any]) -> ValidationResult:
    errors = []
    if is_blank(title):
        errors.append("Quiz title is required")
    if not questions:
        errors.append("A quiz needs at least one question")
    return ValidationResult(valid=not errors, errors=errors)


