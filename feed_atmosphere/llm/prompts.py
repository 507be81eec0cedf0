"""Prompt rendering for topic summaries."""

from __future__ import annotations

from typing import Sequence

from ..core.types import Post


PROMPT_HEADER = (
    "Summarize the following Bluesky timeline posts into the top 5 most discussed topics. "
    "Format it as a numbered list with a short description for each topic.\n"
    "Use reposts to help sort the recurring themes, and use likes as a potential "
    "lightly weighted filtering mechanism.\n\n"
)


def format_prompt(posts: Sequence[Post]) -> str:
    parts = [PROMPT_HEADER]
    for idx, post in enumerate(posts, start=1):
        parts.append(
            f"Post {idx}:\n"
            f"Author: {post.author}\n"
            f"Text: {post.text}\n"
            f"Likes: {post.like_count}\n"
            f"Reposts: {post.repost_count}\n\n"
        )
    return "".join(parts)
