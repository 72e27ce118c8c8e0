"""Shared FastAPI dependencies."""

from fastapi import Request


def get_score_rubric(request: Request) -> str:
    """Name of the rubric the app was configured to persist scores with."""
    return request.app.state.settings.score_rubric
