# File: src/classwork/exceptions.py

class ClassworkError(Exception):
    """Base class for every error that crosses a backend or controller boundary."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(ClassworkError):
    pass


class Conflict(ClassworkError):
    pass


class Unavailable(ClassworkError):
    pass


class ValidationFailed(ClassworkError):
    pass


class InvalidTransition(ValidationFailed):
    def __init__(self, current, target):
        super().__init__(f"Cannot move a submission from '{current or 'new'}' to '{target}'")
        self.current = current
        self.target = target


class SnapshotLoadError(Unavailable):
    pass
