"""
Shared pipeline contracts for ListingHub builds.

Exports the error context and result types used by every build stage.
"""

from .exceptions import DirectoryBuildError
from .types import BuildResult, ErrorContext

__all__ = ["BuildResult", "DirectoryBuildError", "ErrorContext"]
