"""ExamFlow: turn scanned exams into multiple-choice question sets."""

__version__ = "0.1.0"
