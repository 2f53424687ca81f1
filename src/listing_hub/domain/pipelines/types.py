"""
Core data types shared by the build pipeline stages.

``ErrorContext`` gives every stage the same structured shape for failure
logs, and ``BuildResult`` is the return value of a complete site build.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class ErrorContext:
    """
    Structured error context for pipeline failures.

    Attributes:
        error_type: Classification of error (e.g., 'archive', 'unexpected')
        operation: Specific operation that failed (e.g., 'read_members')
        stage: Pipeline stage where the error occurred (load, resolve, ...)
        error_message: Human-readable error message
        details: Additional context-specific details
        member: Optional archive member involved in the failure
    """

    error_type: str
    operation: str
    stage: str
    error_message: str
    details: Dict[str, Any] = field(default_factory=dict)
    member: Optional[str] = None

    def to_log_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        log_dict: Dict[str, Any] = {
            "error_type": self.error_type,
            "operation": self.operation,
            "stage": self.stage,
            "error_message": self.error_message,
        }
        if self.member:
            log_dict["member"] = self.member
        if self.details:
            log_dict["details"] = self.details
        return log_dict


@dataclass
class BuildResult:
    """
    Structured return value for a complete site build.

    Attributes:
        success: Whether the build completed without fatal errors
        output_dir: Root directory the site was written to
        salons: Number of salon listings projected
        cities: Number of cities projected
        states: Number of states projected
        categories: Number of categories projected
        pages_written: HTML pages written (companies, cities, states, sitemap)
        sitemap_files: Sitemap XML files written, relative to output_dir
        duration_ms: End-to-end duration in milliseconds
        metrics: Per-stage metadata for observability
    """

    success: bool
    output_dir: Path
    salons: int = 0
    cities: int = 0
    states: int = 0
    categories: int = 0
    pages_written: int = 0
    sitemap_files: List[str] = field(default_factory=list)
    duration_ms: float = 0.0
    metrics: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation (useful for logging/tests)."""
        return {
            "success": self.success,
            "output_dir": str(self.output_dir),
            "salons": self.salons,
            "cities": self.cities,
            "states": self.states,
            "categories": self.categories,
            "pages_written": self.pages_written,
            "sitemap_files": list(self.sitemap_files),
            "duration_ms": self.duration_ms,
            "metrics": self.metrics,
        }

    def summary(self) -> str:
        """Concise human-readable summary."""
        return (
            f"success={self.success} salons={self.salons} cities={self.cities} "
            f"states={self.states} categories={self.categories} "
            f"pages={self.pages_written} sitemaps={len(self.sitemap_files)} "
            f"duration_ms={self.duration_ms:.2f} output={self.output_dir}"
        )
