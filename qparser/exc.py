class BaseQparserException(Exception):
    pass


class QueryError(BaseQparserException):
    """ Invalid input provided by the User

    Reported when a query parameter cannot be turned into a filter.
    Web integrations report it as a client error.
    """


class MalformedQueryError(QueryError):
    """ A query token does not follow the "operator:value" syntax """

    def __init__(self, err: str):
        super().__init__(f'Malformed query: {err}')


class UnknownOperatorError(QueryError):
    """ A query token mentions an operator code that we don't know: e.g. "bigger:10" """

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'Unknown operator: "{operator}"')


class UnsupportedOperatorError(QueryError):
    """ A filter was added with an operator symbol that is not supported """

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'Unsupported operator: {operator!r}')


class InvalidPaginationError(QueryError):
    """ "limit" or "offset" is not a non-negative integer """

    def __init__(self, field: str, value, err: str):
        self.field = field
        self.value = value
        super().__init__(f'Invalid "{field}": {err}')


class InvalidRangeFormatError(QueryError):
    """ The "rng" operator got something other than "value1 to value2" """

    def __init__(self, value: str):
        self.value = value
        super().__init__(f'Invalid usage of operator rng: {value!r}. Use: "rng:value1 to value2"')


class InvalidColumnError(BaseQparserException):
    """ A filter mentioned a column name that the model does not have

    Reported when a column mentioned by name is not found on the SqlAlchemy model
    """

    def __init__(self, model: str, column_name: str):
        self.model = model
        self.column_name = column_name

        super().__init__(f'Invalid column "{column_name}" for "{model}"')
