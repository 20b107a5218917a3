"""
Quiz Runner: terminal multiple-choice quiz with persistent progress.

Components:
- Question / QuestionSource: loading and validating the question file
- ProgressStore: questions ever answered correctly
- CategoryStore: which categories are included
- SessionController: filter / shuffle / navigate / answer state machine
"""

__version__ = "1.0.0"
