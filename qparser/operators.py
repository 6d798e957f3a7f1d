""" Operators: the closed set of comparisons a query can use """

from __future__ import annotations

from collections import abc
from enum import Enum
from typing import Any

import sqlalchemy as sa


class Operator(Enum):
    """ Filter operator. The value is the SQL symbol """
    EQ = '='
    NEQ = '<>'
    GT = '>'
    GTE = '>='
    LT = '<'
    LTE = '<='
    LIKE = 'ILIKE'
    RANGE = 'BETWEEN'


# Short operator codes, as used in query strings: "gt:30"
# Mapping: 'code': Operator
OPERATOR_CODES: dict[str, Operator] = {
    'eq': Operator.EQ,
    'neq': Operator.NEQ,
    'gt': Operator.GT,
    'gte': Operator.GTE,
    'lt': Operator.LT,
    'lte': Operator.LTE,
    'like': Operator.LIKE,
    'rng': Operator.RANGE,
}

# Reverse mapping: Operator -> 'code'
OPERATOR_NAMES: dict[Operator, str] = {
    operator: code
    for code, operator in OPERATOR_CODES.items()
}


# The wildcard character for LIKE patterns
LIKE_WILDCARD = '%'

# The separator between the two values of a "rng" operator: "rng:1 to 10"
RANGE_SEPARATOR = ' to '


# Condition builders
# Mapping:
#   Operator: lambda column, value
#   For Operator.RANGE, `value` is a tuple of two bounds
SQL_OPERATORS: dict[Operator, abc.Callable[[sa.sql.ColumnElement, Any], sa.sql.ColumnElement]] = {
    Operator.EQ: lambda col, val: col == val,
    Operator.NEQ: lambda col, val: col != val,  # rendered as "!=": same as "<>"
    Operator.GT: lambda col, val: col > val,
    Operator.GTE: lambda col, val: col >= val,
    Operator.LT: lambda col, val: col < val,
    Operator.LTE: lambda col, val: col <= val,
    Operator.LIKE: lambda col, val: col.ilike(val),
    Operator.RANGE: lambda col, val: col.between(*val),
}
