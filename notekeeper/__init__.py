"""
Notekeeper.

- backend/: Note management core, stores, sessions, configuration
- cli/: Interactive shell over the note sessions (Rich)
"""
