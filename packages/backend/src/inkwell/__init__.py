"""Inkwell — blog backend.

User accounts with bcrypt-hashed passwords, stateless JWT sessions,
and posts/comments that only their author may change.
"""

__version__ = "0.1.0"
