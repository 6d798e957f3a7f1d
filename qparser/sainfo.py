""" SqlAlchemy model info: resolve columns by name """

from __future__ import annotations

import sqlalchemy as sa
import sqlalchemy.orm

from qparser import exc


def resolve_column_by_name(field_name: str, Model: type) -> sa.sql.ColumnElement:
    """ Get a model's column by name, or fail with InvalidColumnError

    Works with models and aliased classes
    """
    # getattr() on sa.orm.AliasedClass adapts the expression to use the aliased name
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name) from e

    # Check that it actually is a column
    if not is_column_attribute(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name)

    # Done
    return attribute


def is_column_attribute(attribute) -> bool:
    """ Is it an instrumented attribute that refers to a column? """
    return (
        isinstance(attribute, sa.orm.QueryableAttribute) and
        isinstance(getattr(attribute, 'property', None), sa.orm.ColumnProperty)
    )


def model_name(Model: type) -> str:
    """ Get the name of the Model, even if it's an aliased class """
    return sa.inspect(Model).class_.__name__
