"""
Exception hierarchy for the site build pipeline.
"""

from typing import Optional


class DirectoryBuildError(Exception):
    """
    Raised when a build stage fails unexpectedly.

    Args:
        message: Error description
        stage: Name of the stage that failed (load, resolve, infer, ...)
        original_error: Underlying exception, when there is one
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.stage = stage
        self.original_error = original_error

        if stage:
            full_message = f"{message} (stage='{stage}')"
        else:
            full_message = message

        super().__init__(full_message)
