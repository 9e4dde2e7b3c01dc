from .vocabulary import DailyStatsRow, QuizResult, Word

__all__ = ["Word", "DailyStatsRow", "QuizResult"]
