"""Operator-facing harness.

This package contains the interactive side:
- Reading operator turns and printing model replies
- Session lifecycle and exit status
- The issue model an execution environment binds the prompt's API to

Structure:
- session.py: Session loop
- issues.py: Issue model and triage registry
- cli/__main__.py: Entry point
"""
