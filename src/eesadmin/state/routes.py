"""Route store: route history, latest computation and manual recompute."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from eesadmin._api import routes as routes_api
from eesadmin.models._base import parse_api_timestamp
from eesadmin.models.result import ApiResult
from eesadmin.models.route import Route, RouteComputation
from eesadmin.state._base import EntityStore


def _history_document(data: Any) -> Mapping[str, Any] | None:
    """Most recent computation document of a history reply.

    History replies are arrays sorted newest first; some deployments send
    a single document instead.
    """
    if isinstance(data, list):
        first = data[0] if data else None
        return first if isinstance(first, Mapping) else None
    if isinstance(data, Mapping) and data.get("routes"):
        return data
    return None


class RoutesStore(EntityStore[Route]):
    """Routes of the most recent computation for the selected floor.

    Routes have no identity of their own, so the collection is keyed by
    position in the server's list.
    """

    name = "routes"
    operations = ("list", "latest", "compute")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.latest: RouteComputation | None = None
        self.selected_floor_id: str | None = None
        self.last_computed: datetime | None = None

    def _replace_all(self, items: Iterable[Route]) -> None:
        self._items = {str(index): route for index, route in enumerate(items)}

    @property
    def hazardous_routes(self) -> list[Route]:
        return [route for route in self.items if route.exceeds_thresholds]

    def select_floor(self, floor_id: str | None) -> None:
        self.selected_floor_id = floor_id

    def clear(self) -> None:
        self._items = {}
        self.latest = None

    async def fetch_history(self, floor_id: str) -> ApiResult:
        """Keep the routes of the newest history document and its timestamp."""

        def commit(result: ApiResult) -> None:
            document = _history_document(result.data)
            if document is None:
                self._replace_all([])
                return
            routes = [Route.model_validate(item) for item in document.get("routes") or []]
            self._replace_all(routes)
            self.last_computed = parse_api_timestamp(document.get("computedAt"))

        return await self._run("list", routes_api.get_route_history(self._transport, floor_id), commit)

    async def fetch_latest(self, floor_id: str) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.latest = None if result.data is None else RouteComputation.model_validate(result.data)

        return await self._run("latest", routes_api.get_latest_routes(self._transport, floor_id), commit)

    async def compute(self, floor_id: str) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.latest = None if result.data is None else RouteComputation.model_validate(result.data)
            self.last_computed = self._clock()

        return await self._run("compute", routes_api.compute_routes(self._transport, floor_id), commit)
