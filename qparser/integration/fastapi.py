from collections import abc

import fastapi

from qparser import exc
from qparser.fields import QueryField
from qparser.options import Options
from qparser.parse import extract_filter_set
from qparser.settings import ParserSettings


def query_options(*fields: QueryField, settings: ParserSettings = None) -> abc.Callable[[fastapi.Request], Options]:
    """ Make a FastAPI dependency that gets Options from the request parameters

    Example:
        user_options = query_options(QueryField('age'), QueryField('active', exact=True), QueryField('limit'))

        @app.get('/users')
        def list_users(options: Options = Depends(user_options)):
            stmt = options.apply(sa.select(User), User)
            ...

        GET /users?age=gt:30&active=true&limit=10

    Invalid parameters are reported with HTTP 400
    """
    def dependency(request: fastapi.Request) -> Options:
        try:
            return extract_filter_set(request.query_params, fields, settings=settings)
        except exc.QueryError as e:
            raise fastapi.HTTPException(status_code=400, detail=str(e)) from e

    return dependency
