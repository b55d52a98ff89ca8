"""Glue between DRF views and :mod:`apps.common.listing`."""
from typing import Callable, Mapping, Optional, Sequence

from rest_framework.response import Response

from apps.api.exceptions import ApplicationError
from apps.api.utils import error_response
from apps.common import get_logger
from apps.common.listing import (
    Column,
    ListQuery,
    ListState,
    PagedCollection,
    PageResult,
)

logger = get_logger(__name__).bind(component="api", layer="listing")


def paged_list_response(
    request,
    *,
    fetch: Callable[[ListQuery], PageResult],
    columns: Sequence[Column],
    items_key: str,
    default_sort_field: str = "createdAt",
    default_sort_order: str = "desc",
    filter_keys: Sequence[str] = ("filter",),
    filter_defaults: Optional[Mapping[str, str]] = None,
) -> Response:
    """Parse the list query from ``request``, load one page and render it."""
    sortable = [column.key for column in columns if column.sortable]
    query = ListQuery.from_query_params(
        request.query_params,
        default_sort_field=default_sort_field,
        default_sort_order=default_sort_order,
        sortable_fields=sortable,
        filter_keys=filter_keys,
        filter_defaults=filter_defaults,
    )
    collection = PagedCollection(fetch, columns, query)
    if collection.load() is ListState.ERROR:
        error = collection.error
        if isinstance(error, ApplicationError):
            return error.to_response()
        logger.error(
            "List view failed",
            items_key=items_key,
            exception=error.__class__.__name__ if error else None,
        )
        return error_response("INTERNAL_ERROR", "Something went wrong")
    return Response(collection.to_payload(items_key))
