"""
Application Layer for the training session core.

This package contains:
- ports/: Abstract collaborator interfaces (what the session machine needs)
- use_cases/: The training session state machine
- exceptions: Errors shared with the infrastructure and AI layers
"""
