"""Record store: floor scoped, filtered and paginated detection records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from eesadmin._api import records as records_api
from eesadmin._constants import DEFAULT_PAGE_SIZE
from eesadmin.models.record import Pagination, Record, parse_record_page
from eesadmin.models.result import ApiResult
from eesadmin.state._base import EntityStore

FLOOR_REQUIRED_MESSAGE = "Floor ID is required"


class RecordFilters(BaseModel):
    """Listing filters; ``floor_id`` is mandatory when listing."""

    model_config = ConfigDict(frozen=True)

    floor_id: str | None = None
    camera_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class RecordsStore(EntityStore[Record]):
    """One page of records for the filtered floor."""

    name = "records"
    operations = ("list", "current", "delete")

    def __init__(self, *args: Any, page_size: int = DEFAULT_PAGE_SIZE, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.filters = RecordFilters()
        self.page = 1
        self.page_size = page_size
        self.total = 0
        self.total_pages = 1
        self.has_next_page = False
        self.has_prev_page = False

    @property
    def pagination(self) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.page_size,
            total=self.total,
            total_pages=self.total_pages,
            has_next_page=self.has_next_page,
            has_prev_page=self.has_prev_page,
        )

    @property
    def hazard_records(self) -> list[Record]:
        return [record for record in self.items if record.is_hazard]

    # ------------------------------------------------------------------
    # Filters and paging
    # ------------------------------------------------------------------

    def set_filters(self, **changes: str | None) -> RecordFilters:
        """Merge *changes* into the filters and go back to page 1."""
        self.filters = self.filters.model_copy(update=changes)
        self.page = 1
        return self.filters

    def clear_filters(self) -> None:
        self.filters = RecordFilters()
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = page

    def set_page_size(self, page_size: int) -> None:
        self.page_size = page_size
        self.page = 1

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list(
        self,
        *,
        floor_id: str | None = None,
        camera_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResult:
        """Load one page of records.

        Arguments left as ``None`` fall back to the store's filters and
        paging. Without a floor the call is rejected locally.
        """
        floor_id = floor_id or self.filters.floor_id
        if not floor_id:
            return self._reject_locally("list", FLOOR_REQUIRED_MESSAGE)
        requested_page = page or self.page
        requested_limit = limit or self.page_size

        def commit(result: ApiResult) -> None:
            parsed = parse_record_page(result.data, default_limit=requested_limit, requested_page=requested_page)
            self._replace_all(parsed.records)
            info = parsed.pagination
            self.total = info.total
            self.page = info.page
            self.page_size = info.limit
            self.total_pages = info.total_pages
            self.has_next_page = info.has_next_page
            self.has_prev_page = info.has_prev_page

        call = records_api.list_records(
            self._transport,
            floor_id=floor_id,
            camera_id=camera_id or self.filters.camera_id,
            start_date=start_date or self.filters.start_date,
            end_date=end_date or self.filters.end_date,
            page=requested_page,
            limit=requested_limit,
        )
        return await self._run("list", call, commit)

    async def fetch(self, record_id: str) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self._current = Record.model_validate(result.data)

        return await self._run("current", records_api.get_record(self._transport, record_id), commit)

    async def delete(self, record_id: str) -> ApiResult:
        def commit(result: ApiResult) -> None:
            if record_id in self._items:
                self.total = max(0, self.total - 1)
            self._remove(record_id)

        return await self._run("delete", records_api.delete_record(self._transport, record_id), commit)
