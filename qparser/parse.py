""" Parse query parameters into Options

Query parameters use the "operator:value" syntax:

    ?age=gt:30&name=like:john&created=rng:2020-01-01 to 2020-12-31
"""

from __future__ import annotations

import logging
from collections import abc
from typing import Any, Union

from qparser import exc
from qparser.fields import QueryField, LIMIT_TAG
from qparser.operators import Operator, OPERATOR_CODES, OPERATOR_NAMES
from qparser.options import Options, FilterEntry
from qparser.settings import ParserSettings


logger = logging.getLogger(__name__)


def parse_token(name: str, query: str) -> FilterEntry:
    """ Parse an "operator:value" token into a filter entry for the field `name`

    The value is not normalized yet: Options.add_field() does that.

    Raises:
        exc.MalformedQueryError: not "operator:value"
        exc.UnknownOperatorError: unknown operator code
    """
    code, sep, value = query.partition(':')
    if not sep:
        raise exc.MalformedQueryError(f'{query!r}: use operator:value')

    # Someone has probably sent us a phrase with a colon in it
    if any(c.isspace() for c in code):
        raise exc.MalformedQueryError(f'{query!r}: use operator:value')

    try:
        operator = OPERATOR_CODES[code]
    except KeyError as e:
        raise exc.UnknownOperatorError(code) from e

    return FilterEntry(name=name, operator=operator, value=value)


def format_token(operator: Union[Operator, str], value: Any) -> str:
    """ Make an "operator:value" token: the opposite of parse_token()

    Example:
        format_token(Operator.GT, 30) -> 'gt:30'
        format_token('rng', '1 to 10') -> 'rng:1 to 10'
    """
    code = OPERATOR_NAMES[operator] if isinstance(operator, Operator) else operator
    if code not in OPERATOR_CODES:
        raise exc.UnknownOperatorError(code)
    return f'{code}:{value}'


def extract_filter_set(record: Any, fields: abc.Iterable[QueryField], *, settings: ParserSettings = None) -> Options:
    """ Read declared fields from the record and build Options

    Args:
        record: A mapping (e.g. query parameters) or an object with attributes
        fields: Field declarations, in order. The order of filters will be the same.
        settings: Settings for the Options

    Raises:
        exc.QueryError: any invalid input. No partial result is returned.
    """
    opt = Options(settings=settings)

    for field in fields:
        # Ignored field
        if not field.tag:
            continue

        # Missing values are skipped entirely
        value = field.get_value(record)
        if value is None:
            continue

        # Pagination
        if field.is_pagination:
            if field.tag == LIMIT_TAG:
                opt.set_limit(value)
            else:
                opt.set_offset(value)
            continue

        value_str = stringify_value(value)

        # Empty value: no filter for this field
        if not value_str:
            logger.debug('Field %r is empty, skipped', field.tag)
            continue

        # Exact match does not use the "operator:value" syntax
        if field.exact:
            entry = opt.add_field(field.tag, value_str, Operator.EQ)
        else:
            parsed = parse_token(field.tag, value_str)
            entry = opt.add_field(parsed.name, parsed.value, parsed.operator)

        logger.debug('Field %r: %s %r', entry.name, entry.operator.value, entry.value)

    return opt


def stringify_value(value: Any) -> str:
    """ Convert a record's value into a string. Booleans become 'true' and 'false' """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
