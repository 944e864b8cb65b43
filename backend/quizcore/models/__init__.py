from quizcore.models.user import User, UserRole
from quizcore.models.quiz import Question, QuestionType, Quiz
from quizcore.models.attempt import AnswerVerdict, QuizAttempt, QuizAttemptAnswer

__all__ = [
    "User",
    "UserRole",
    "Quiz",
    "Question",
    "QuestionType",
    "QuizAttempt",
    "QuizAttemptAnswer",
    "AnswerVerdict",
]
