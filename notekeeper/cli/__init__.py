"""
CLI Module.

Interactive shell over the note sessions, built with Rich.

Architecture:
- The shell is a thin presentation layer
- All note rules live in notekeeper.backend (service and sessions)
- The shell talks to the sessions in-process

Usage:
    python cli.py --service shell
    python cli.py --service shell --memory
"""
