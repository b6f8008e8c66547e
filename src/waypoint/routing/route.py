"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from waypoint.routing.handlers import RouteHandler


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``catch_all`` routes (registered through ``use()``) match their own
    path and every path nested under it.
    """

    path: str
    handler: RouteHandler
    catch_all: bool = False

    def effective_path(self, prefix: str = "") -> str:
        """The route path as seen from the outermost router."""
        return prefix + self.path

    def template(self, prefix: str = "") -> str:
        """The template handed to the pattern compiler."""
        path = self.effective_path(prefix)
        if self.catch_all:
            return path + "/*"
        return path


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A route that matched a request path, with its captured params."""

    route: Route
    effective_path: str
    params: dict[str, str]
