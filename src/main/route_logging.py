from collections import Counter
from dataclasses import dataclass, field

from fastapi import FastAPI
from fastapi.routing import APIRoute

from loggers import get_logger

logger = get_logger(__name__)

UNTAGGED = "<untagged>"


@dataclass
class RouteSummary:
    routes: list[APIRoute] = field(default_factory=list)
    by_method: Counter[str] = field(default_factory=Counter)
    by_tag: Counter[str] = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return len(self.routes)


def _docs_paths(application: FastAPI) -> set[str]:
    paths = {application.openapi_url, application.docs_url, application.redoc_url}
    if application.docs_url and application.swagger_ui_oauth2_redirect_url:
        paths.add(application.swagger_ui_oauth2_redirect_url)
    return {path for path in paths if path}


def summarize_routes(application: FastAPI) -> RouteSummary:
    """Counts the application's own endpoints, leaving out the docs pages."""
    docs_paths = _docs_paths(application)
    summary = RouteSummary()

    for route in application.routes:
        if not isinstance(route, APIRoute) or route.path in docs_paths:
            continue
        summary.routes.append(route)
        summary.by_method.update(route.methods or ())
        summary.by_tag.update(route.tags or [UNTAGGED])

    return summary


def log_routes_summary(application: FastAPI, include_debug_list: bool = False) -> None:
    summary = summarize_routes(application)
    logger.info(
        "API endpoints summary: total=%s methods=%s tags=%s",
        summary.total,
        dict(summary.by_method),
        dict(summary.by_tag),
    )

    if not include_debug_list:
        return

    for route in sorted(summary.routes, key=lambda r: (r.path, sorted(r.methods))):
        logger.debug(
            "Route: %s %s -> %s", ",".join(sorted(route.methods)), route.path, route.name
        )
