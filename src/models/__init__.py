"""
In-memory post and comment records exchanged with the XML codec.
"""

from .post import Comment, Post, utc_now

__all__ = ["Comment", "Post", "utc_now"]
