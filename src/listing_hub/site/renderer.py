"""
HTML page rendering for the static site.

Pages are Jinja2 templates shipped inside the package. Rendering is a pure
function of the view models and the site configuration; writing the result
to disk is the job of ``SiteWriter``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from listing_hub.config import SiteConfig
from listing_hub.domain.directory.models import CityView, SalonView, StateView


def excerpt(text: Optional[str], length: int = 150) -> str:
    """Truncate text to ``length`` characters, appending '...' when cut."""
    if not text:
        return ""
    if len(text) > length:
        return text[:length] + "..."
    return text


def create_environment() -> Environment:
    """Build the Jinja2 environment used for pages and sitemaps."""
    env = Environment(
        loader=PackageLoader("listing_hub", "site/templates"),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["excerpt"] = excerpt
    return env


class PageRenderer:
    """
    Render company, city, state and sitemap pages.

    Args:
        site: Site metadata shared by every page
        featured_limit: Providers featured on a state page
        nearby_city_limit: Cities listed under "Nearby Cities"
        sitemap_city_limit: Cities listed on the HTML sitemap page
        environment: Optional pre-built Jinja2 environment
    """

    def __init__(
        self,
        site: SiteConfig,
        featured_limit: int = 5,
        nearby_city_limit: int = 5,
        sitemap_city_limit: int = 100,
        environment: Optional[Environment] = None,
    ):
        self.site = site
        self.featured_limit = featured_limit
        self.nearby_city_limit = nearby_city_limit
        self.sitemap_city_limit = sitemap_city_limit
        self.env = environment or create_environment()
        self.year = datetime.now(timezone.utc).year

    def _render(self, template_name: str, **context) -> str:
        context.setdefault("coordinates", None)
        context.setdefault("map_label", "")
        return self.env.get_template(template_name).render(
            site=self.site, year=self.year, **context
        )

    def render_company(self, salon: SalonView) -> str:
        """Render a company page; a map is included when coordinates are valid."""
        title = salon.title or ""
        return self._render(
            "company.html",
            title=title,
            description=salon.description
            or f"Professional {self.site.service_noun.lower()} services at {title}",
            salon=salon,
            coordinates=salon.coordinates(),
            map_label=title,
        )

    def render_city(
        self,
        city: CityView,
        salons: Sequence[SalonView],
        state_cities: Iterable[CityView] = (),
    ) -> str:
        """
        Render a city page.

        Args:
            city: City being rendered
            salons: Salons listed for the city (from ``city.salon_ids``)
            state_cities: Cities sharing the city's state_id, in source order
        """
        nearby: List[CityView] = [c for c in state_cities if c.id != city.id][
            : self.nearby_city_limit
        ]
        name = city.name or ""
        state_name = city.state_name or ""
        return self._render(
            "city.html",
            title=f"{name}, {state_name}",
            description=(
                f"Find {self.site.service_noun.lower()} and permanent hair removal "
                f"services in {name}, {state_name}."
            ),
            city=city,
            salons=list(salons),
            nearby_cities=nearby,
        )

    def render_state(
        self,
        state: StateView,
        cities: Sequence[CityView],
        salons: Sequence[SalonView],
    ) -> str:
        """Render a state page with its city grid and featured providers."""
        name = state.name or ""
        return self._render(
            "state.html",
            title=name,
            description=(
                f"Find {self.site.service_noun.lower()} and permanent hair removal "
                f"services in {name}."
            ),
            state=state,
            cities=list(cities),
            salons=list(salons),
            featured_limit=self.featured_limit,
        )

    def render_sitemap_page(
        self, states: Sequence[StateView], cities: Sequence[CityView]
    ) -> str:
        """Render the human-readable sitemap page."""
        return self._render(
            "sitemap.html",
            title="Sitemap",
            description=(
                f"Complete sitemap of {self.site.service_noun.lower()} providers, "
                "cities, and states"
            ),
            states=list(states),
            cities=list(cities),
            city_limit=self.sitemap_city_limit,
        )


__all__ = ["PageRenderer", "create_environment", "excerpt"]
