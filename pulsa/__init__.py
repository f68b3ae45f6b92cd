"""Pulsa learning platform API: courses, quizzes, progress, certificates and badges."""

__version__ = "0.1.0"
