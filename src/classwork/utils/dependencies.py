# File location: src/classwork/utils/dependencies.py
from fastapi import Request

from src.classwork.context import ClassworkContext


def get_context(request: Request) -> ClassworkContext:
    """The context the app was built with, shared by every request."""
    return request.app.state.context
