from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime

QuestionType = Literal["multiple_choice", "true_false", "short_answer", "essay"]

TRUE_FALSE_OPTIONS = ["true", "false"]


def validate_question_fields(
    question_type: str,
    options: Optional[List[str]],
    correct_answer: Optional[str]
) -> Optional[List[str]]:
    """Check answer/options rules for a question type; returns the options to store"""
    if question_type == "multiple_choice":
        cleaned = [o.strip() for o in options or [] if o and o.strip()]
        if len(cleaned) < 2:
            raise ValueError("Multiple choice questions need at least 2 options")
        if not correct_answer:
            raise ValueError("Multiple choice questions need a correct answer")
        if correct_answer not in cleaned:
            raise ValueError("Correct answer must be one of the options")
        return cleaned
    if question_type == "true_false":
        if not correct_answer:
            raise ValueError("True/false questions need a correct answer")
        if correct_answer not in TRUE_FALSE_OPTIONS:
            raise ValueError("True/false answer must be 'true' or 'false'")
        return list(TRUE_FALSE_OPTIONS)
    return None


class QuestionBase(BaseModel):
    question_text: str
    question_type: QuestionType = "multiple_choice"
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    points: int = Field(1, ge=1)

    @field_validator("question_text")
    @classmethod
    def text_not_empty(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Question text is required")
        return value

    @field_validator("correct_answer")
    @classmethod
    def strip_answer(cls, value):
        if value is None:
            return value
        return value.strip() or None

    @model_validator(mode="after")
    def check_type_rules(self):
        if self.question_type == "true_false" and self.correct_answer:
            self.correct_answer = self.correct_answer.lower()
        self.options = validate_question_fields(self.question_type, self.options, self.correct_answer)
        return self


class QuestionCreate(QuestionBase):
    exam_id: str = Field(min_length=1)


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = None
    question_type: Optional[QuestionType] = None
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    points: Optional[int] = Field(None, ge=1)

    @field_validator("question_text")
    @classmethod
    def text_not_empty(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Question text is required")
        return value


class BulkQuestionCreate(BaseModel):
    exam_id: str = Field(min_length=1)
    questions: List[QuestionBase] = Field(min_length=1)


class QuestionResponse(BaseModel):
    id: str
    exam_id: str
    question_text: str
    question_type: str
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    points: int = 1
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkQuestionResponse(BaseModel):
    exam_id: str
    created: int
    questions: List[QuestionResponse]
