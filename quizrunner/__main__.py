"""
Entry point for running the quiz runner as a module.

Usage:
    python -m quizrunner play
    python -m quizrunner stats
    python -m quizrunner --help
"""
from .cli.app import main

if __name__ == "__main__":
    main()
