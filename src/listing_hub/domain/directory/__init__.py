"""Directory domain.

Cross-links salon listings with cities, states and categories:

1. Resolve: id indices and city state names
2. Infer: city/state ids from salon addresses (case-insensitive name match)
3. Aggregate: salon and city counts by strict id equality
4. Project: view models with slugs and membership lists
"""

from .aggregation import aggregate_counts
from .inference import build_name_index, infer_links
from .models import (
    Category,
    CategoryView,
    City,
    CityView,
    Salon,
    SalonView,
    State,
    StateView,
)
from .observability import LinkageStats, collect_linkage_stats
from .projection import ProjectedDirectory, project_directory, split_multi_value
from .resolver import Directory, build_index, resolve_entities
from .service import DirectoryProcessingResult, load_directory, process_directory

__all__ = [
    # Models
    "Category",
    "CategoryView",
    "City",
    "CityView",
    "Salon",
    "SalonView",
    "State",
    "StateView",
    # Stages
    "Directory",
    "ProjectedDirectory",
    "aggregate_counts",
    "build_index",
    "build_name_index",
    "infer_links",
    "project_directory",
    "resolve_entities",
    "split_multi_value",
    # Observability
    "LinkageStats",
    "collect_linkage_stats",
    # Service
    "DirectoryProcessingResult",
    "load_directory",
    "process_directory",
]
