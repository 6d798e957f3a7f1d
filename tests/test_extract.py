from dataclasses import dataclass, field
from typing import Optional

import pytest
import sqlalchemy as sa

from qparser import exc
from qparser import extract_filter_set, dataclass_query_fields, QueryField, Operator, FilterEntry, ParserSettings

from .util.models import User
from .util.stmt_text import assert_statement_lines, DEFAULT_DIALECT


# Fields of a typical "list users" endpoint
USER_FIELDS = (
    QueryField('name'),
    QueryField('age'),
    QueryField('created'),
    QueryField('active', exact=True),
    QueryField('limit'),
    QueryField('offset'),
)


@pytest.mark.parametrize(('params', 'expected_fields', 'expected_limit', 'expected_offset'), [
    # Empty
    ({}, [], 0, 0),
    # Filters
    ({'age': 'gt:30'}, [FilterEntry('age', Operator.GT, '30')], 0, 0),
    ({'name': 'like:john'}, [FilterEntry('name', Operator.LIKE, '%john%')], 0, 0),
    ({'name': 'like:jo%'}, [FilterEntry('name', Operator.LIKE, 'jo%')], 0, 0),
    ({'created': 'rng:2020-01-01 to 2020-12-31'},
     [FilterEntry('created', Operator.RANGE, '2020-01-01 2020-12-31', bounds=('2020-01-01', '2020-12-31'))], 0, 0),
    # Exact fields: no "operator:value"
    ({'active': True}, [FilterEntry('active', Operator.EQ, 'true')], 0, 0),
    ({'active': False}, [FilterEntry('active', Operator.EQ, 'false')], 0, 0),
    ({'active': 'true'}, [FilterEntry('active', Operator.EQ, 'true')], 0, 0),
    ({'active': 'gt:1'}, [FilterEntry('active', Operator.EQ, 'gt:1')], 0, 0),
    # Pagination
    ({'limit': 10}, [], 10, 0),
    ({'limit': '10', 'offset': '20'}, [], 10, 20),
    ({'offset': 5}, [], 0, 5),
    # Empty values: skipped
    ({'age': '', 'name': None}, [], 0, 0),
    ({'active': ''}, [], 0, 0),
    # Unknown keys: ignored
    ({'password': 'eq:123'}, [], 0, 0),
    # Declaration order, not the order of parameters
    ({'age': 'lt:60', 'name': 'eq:bob', 'limit': 3}, [
        FilterEntry('name', Operator.EQ, 'bob'),
        FilterEntry('age', Operator.LT, '60'),
    ], 3, 0),
])
def test_extract_filter_set(params: dict, expected_fields: list[FilterEntry], expected_limit: int, expected_offset: int):
    """ Extract Options from a dict of query parameters """
    options = extract_filter_set(params, USER_FIELDS)
    assert list(options.fields) == expected_fields
    assert options.limit == expected_limit
    assert options.offset == expected_offset


@pytest.mark.parametrize(('params', 'expected_error'), [
    ({'age': '30'}, exc.MalformedQueryError),
    ({'age': 'greater than:30'}, exc.MalformedQueryError),
    ({'age': 'bigger:30'}, exc.UnknownOperatorError),
    ({'created': 'rng:2020-01-01'}, exc.InvalidRangeFormatError),
    ({'created': 'rng:2020-01-01 to '}, exc.InvalidRangeFormatError),
    ({'limit': -1}, exc.InvalidPaginationError),
    ({'limit': 'ten'}, exc.InvalidPaginationError),
    ({'offset': '-5'}, exc.InvalidPaginationError),
    ({'offset': True}, exc.InvalidPaginationError),
    # Fails even when other fields are fine
    ({'name': 'eq:bob', 'age': 'gt:30', 'limit': '-1'}, exc.InvalidPaginationError),
])
def test_extract_filter_set_errors(params: dict, expected_error: type):
    """ Any invalid field fails the whole thing """
    with pytest.raises(expected_error):
        extract_filter_set(params, USER_FIELDS)


def test_extract_ignored_fields():
    """ Fields with an empty tag are ignored """
    options = extract_filter_set({'': 'eq:1', 'age': 'eq:1'}, [QueryField(''), QueryField('age')])
    assert options.fields == (FilterEntry('age', Operator.EQ, '1'),)


def test_extract_accessor():
    """ Custom accessors read values from anywhere """
    record = {'filter': {'years': 'gte:18'}}
    fields = [QueryField('age', accessor=lambda r: r['filter'].get('years'))]

    options = extract_filter_set(record, fields)
    assert options.fields == (FilterEntry('age', Operator.GTE, '18'),)


def test_extract_from_object():
    """ Records can be objects: attributes are used """
    class Request:
        age = 'gt:30'
        active = True
        limit = 10

    options = extract_filter_set(Request(), USER_FIELDS)
    assert options.fields == (
        FilterEntry('age', Operator.GT, '30'),
        FilterEntry('active', Operator.EQ, 'true'),
    )
    assert options.limit == 10


def test_extract_from_dataclass():
    """ Declare once: a dataclass with 'query' metadata """
    @dataclass
    class UserFilter:
        name: Optional[str] = field(default=None, metadata={'query': 'name'})
        birth: Optional[str] = field(default=None, metadata={'query': 'created'})
        is_active: Optional[bool] = field(default=None, metadata={'query': 'active', 'exact': True})
        internal: Optional[str] = None
        limit: Optional[int] = field(default=None, metadata={'query': 'limit'})
        offset: Optional[int] = field(default=None, metadata={'query': 'offset'})

    fields = dataclass_query_fields(UserFilter)
    assert [f.tag for f in fields] == ['name', 'created', 'active', 'limit', 'offset']
    assert [f.exact for f in fields] == [False, False, True, False, False]

    record = UserFilter(birth='rng:2020-01-01 to 2020-12-31', is_active=False, internal='eq:1', offset=5)
    options = extract_filter_set(record, fields)
    assert list(options.fields) == [
        FilterEntry('created', Operator.RANGE, '2020-01-01 2020-12-31', bounds=('2020-01-01', '2020-12-31')),
        FilterEntry('active', Operator.EQ, 'false'),
    ]
    assert (options.limit, options.offset) == (0, 5)


def test_extract_settings():
    """ Settings are passed to Options """
    settings = ParserSettings(max_limit=100)
    options = extract_filter_set({'limit': '1000'}, USER_FIELDS, settings=settings)
    assert options.settings is settings
    assert options.limit == 1000  # settings apply when the query is built

    assert_statement_lines(options.apply(sa.select(User)), 'LIMIT 100 OFFSET 0')


def test_extract_and_apply_range():
    """ End-to-end: a range field becomes a BETWEEN condition with two bound values """
    options = extract_filter_set({'age': 'rng:2020-01-01 to 2020-12-31'}, [QueryField('age')])
    assert options.fields == (
        FilterEntry('age', Operator.RANGE, '2020-01-01 2020-12-31', bounds=('2020-01-01', '2020-12-31')),
    )

    compiled = options.apply(sa.select(User)).compile(dialect=DEFAULT_DIALECT)
    assert 'WHERE age BETWEEN %(age_1)s AND %(age_2)s' in compiled.string
    assert (compiled.params['age_1'], compiled.params['age_2']) == ('2020-01-01', '2020-12-31')


def test_extract_and_apply_exact():
    """ End-to-end: an exact field bypasses the "operator:value" syntax """
    options = extract_filter_set({'active': True}, [QueryField('active', exact=True)])
    assert options.fields == (FilterEntry('active', Operator.EQ, 'true'),)

    compiled = options.apply(sa.select(User)).compile(dialect=DEFAULT_DIALECT)
    assert 'WHERE active = %(active_1)s' in compiled.string
    assert compiled.params['active_1'] == 'true'
