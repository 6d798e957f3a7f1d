""" Field declarations: which query fields to expect, and how to read them from a record """

from __future__ import annotations

import dataclasses
from collections import abc
from operator import attrgetter
from typing import Any, Optional


# Tags that set pagination instead of adding a filter
LIMIT_TAG = 'limit'
OFFSET_TAG = 'offset'
PAGINATION_TAGS = frozenset((LIMIT_TAG, OFFSET_TAG))


@dataclasses.dataclass(frozen=True)
class QueryField:
    """ Declaration of a query field

    Example:
        QueryField('age')  # "age=gt:30" -> age > 30
        QueryField('active', exact=True)  # "active=true" -> active = 'true'
        QueryField('limit')  # pagination
    """
    # Query tag: the name of the column to filter on. Also, "limit" and "offset" for pagination.
    # An empty tag means the field is ignored.
    tag: str

    # Get the value from the record.
    # Default: record[tag] for mappings, record.<tag> for other objects
    accessor: Optional[abc.Callable[[Any], Any]] = None

    # Exact match: the value is compared for equality and does not use the "operator:value" syntax.
    # Use it for booleans.
    exact: bool = False

    @property
    def is_pagination(self) -> bool:
        return self.tag in PAGINATION_TAGS

    def get_value(self, record: Any) -> Any:
        """ Read this field's value from the record. Missing values are None """
        if self.accessor is not None:
            return self.accessor(record)
        elif isinstance(record, abc.Mapping):
            return record.get(self.tag)
        else:
            return getattr(record, self.tag, None)


def dataclass_query_fields(cls) -> tuple[QueryField, ...]:
    """ Get query field declarations from a dataclass

    Every field that has the 'query' tag in its metadata is used.

    Example:
        @dataclass
        class UserFilter:
            name: Optional[str] = field(default=None, metadata={'query': 'name'})
            active: Optional[bool] = field(default=None, metadata={'query': 'active', 'exact': True})
            limit: Optional[int] = field(default=None, metadata={'query': 'limit'})
    """
    return tuple(
        QueryField(
            tag=field.metadata['query'],
            accessor=attrgetter(field.name),
            exact=field.metadata.get('exact', False),
        )
        for field in dataclasses.fields(cls)
        if field.metadata.get('query')
    )
