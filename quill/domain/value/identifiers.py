"""Strongly typed identifiers for Quill domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting. Identifiers are integer surrogate
keys assigned by the store.
"""

from typing import NewType

# Core domain entity identifiers
PostId = NewType("PostId", int)
TagId = NewType("TagId", int)
UserId = NewType("UserId", int)
CommentId = NewType("CommentId", int)
