from importlib.metadata import version as _version

__version__ = _version('qparser')

from .operators import Operator
from .options import Options, FilterEntry
from .fields import QueryField, dataclass_query_fields
from .parse import parse_token, format_token, extract_filter_set
from .settings import ParserSettings

from . import exc
