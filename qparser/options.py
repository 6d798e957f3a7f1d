""" Options: filters and pagination that are applied to a query """

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, TypeVar, Union

import sqlalchemy as sa

from qparser import exc
from qparser.operators import Operator, OPERATOR_NAMES, SQL_OPERATORS, LIKE_WILDCARD, RANGE_SEPARATOR
from qparser.sainfo import resolve_column_by_name
from qparser.settings import ParserSettings, DEFAULT_SETTINGS


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterEntry:
    """ A filter for a field

    Example:
        FilterEntry(name='age', operator=Operator.GT, value='30')
    """
    name: str
    operator: Operator
    value: str

    # The two values of a range: (lower, upper). Only set for Operator.RANGE
    bounds: Optional[tuple[str, str]] = None

    def export(self) -> dict:
        return {'name': self.name, 'operator': self.operator.value, 'value': self.value}


# Any generative SqlAlchemy statement: sa.sql.Select, sa.orm.Query
StatementT = TypeVar('StatementT')


class Options:
    """ Filters and pagination, ready to be applied to a query

    Filters are added with add_field(), which validates and normalizes values.
    Call apply() to add them to a statement.
    """
    __slots__ = '_limit', '_offset', '_fields', 'settings'

    def __init__(self, limit: int = 0, offset: int = 0, *, settings: ParserSettings = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._fields: list[FilterEntry] = []
        self._limit = self._offset = 0
        self.set_limit(limit)
        self.set_offset(offset)

    @property
    def limit(self) -> int:
        """ The number of rows to limit the result set to. 0 means "no limit" """
        return self._limit

    @property
    def offset(self) -> int:
        """ The number of rows to skip """
        return self._offset

    @property
    def fields(self) -> tuple[FilterEntry, ...]:
        """ Filters, in the order they were added """
        return tuple(self._fields)

    def set_limit(self, limit: Any):
        self._limit = validate_pagination('limit', limit)

    def set_offset(self, offset: Any):
        self._offset = validate_pagination('offset', offset)

    def add_field(self, name: str, value: str, operator: Union[Operator, str]) -> FilterEntry:
        """ Add a filter for a field

        Args:
            name: Column name
            value: The value to compare with. Non-string values are converted with str()
            operator: Operator, or its SQL symbol: e.g. ">="

        Raises:
            exc.UnsupportedOperatorError: unknown operator
            exc.InvalidRangeFormatError: the value of a range is not "value1 to value2"
            exc.MalformedQueryError: empty field name
        """
        operator = ensure_operator(operator)
        value = str(value)

        if not name:
            raise exc.MalformedQueryError('field name must not be empty')

        bounds = None

        # LIKE: match anywhere, unless the user has put wildcards themselves
        if operator == Operator.LIKE and LIKE_WILDCARD not in value:
            value = f'{LIKE_WILDCARD}{value}{LIKE_WILDCARD}'

        # RANGE: "value1 to value2"
        if operator == Operator.RANGE:
            bounds = split_range(value)
            value = ' '.join(bounds)

        # Done
        entry = FilterEntry(name=name, operator=operator, value=value, bounds=bounds)
        self._fields.append(entry)
        return entry

    def apply(self, stmt: StatementT, Model: type = None) -> StatementT:
        """ Modify the statement: add WHERE conditions, OFFSET, LIMIT

        The statement is not modified in place: a new statement is returned.
        Options are not modified either, so they may be applied more than once.

        Args:
            stmt: A Select statement, or an ORM Query
            Model: The model to look the columns up on. If not given, columns are referenced by name.

        Raises:
            exc.InvalidColumnError: a column was not found on the `Model`
        """
        # Conditions: every one is ANDed with the previous ones
        for entry in self._fields:
            stmt = stmt.where(self._compile_condition(entry, Model))  # type: ignore[attr-defined]

        # OFFSET: always, even if it's 0
        stmt = stmt.offset(self._offset)  # type: ignore[attr-defined]

        # LIMIT: only when there is one
        limit = self.settings.get_final_limit(self._limit)
        if limit > 0:
            stmt = stmt.limit(limit)  # type: ignore[attr-defined]

        logger.debug('Applied %d filters, offset=%d, limit=%d', len(self._fields), self._offset, limit)
        return stmt

    def _compile_condition(self, entry: FilterEntry, Model: Optional[type]) -> sa.sql.ColumnElement:
        """ Generate an SQL condition for a filter entry: "column operator value"

        Values are always bound as parameters
        """
        if Model is not None:
            col = resolve_column_by_name(entry.name, Model)
        else:
            col = sa.column(entry.name)

        value = entry.bounds if entry.operator == Operator.RANGE else entry.value
        return SQL_OPERATORS[entry.operator](col, value)

    def export(self) -> dict:
        """ Export as a JSON-friendly dict """
        return {
            'limit': self._limit,
            'offset': self._offset,
            'fields': [entry.export() for entry in self._fields],
        }

    def __repr__(self):
        fields = ', '.join(
            f'{e.name} {OPERATOR_NAMES[e.operator]} {e.value!r}'
            for e in self._fields
        )
        return f'{type(self).__name__}(limit={self._limit}, offset={self._offset}, fields=[{fields}])'


def ensure_operator(operator: Union[Operator, str]) -> Operator:
    """ Get an Operator from an Operator or its SQL symbol, or fail """
    if isinstance(operator, Operator):
        return operator

    try:
        return Operator(operator)
    except ValueError as e:
        raise exc.UnsupportedOperatorError(operator) from e


def split_range(value: str) -> tuple[str, str]:
    """ Split "value1 to value2" into two values """
    parts = value.split(RANGE_SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise exc.InvalidRangeFormatError(value)

    lower, upper = parts
    return lower, upper


def validate_pagination(field: str, value: Any) -> int:
    """ Get a non-negative integer from `value`, or fail with InvalidPaginationError

    Accepts: integers, strings of ASCII digits with an optional minus sign
    """
    # bool is an int, but makes no sense here
    if isinstance(value, bool):
        raise exc.InvalidPaginationError(field, value, 'must be an integer')
    elif isinstance(value, int):
        n = value
    elif isinstance(value, str):
        if not INTEGER_REX.fullmatch(value):
            raise exc.InvalidPaginationError(field, value, 'must be an integer')
        n = int(value)
    else:
        raise exc.InvalidPaginationError(field, value, 'must be an integer')

    if n < 0:
        raise exc.InvalidPaginationError(field, value, 'must not be negative')

    return n


# An integer-shaped string: "10", "-1". No "+", spaces, underscores, or non-ASCII digits
INTEGER_REX = re.compile(r'-?[0-9]+')
