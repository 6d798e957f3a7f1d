from __future__ import annotations

import dataclasses
from typing import Optional


@dataclasses.dataclass
class ParserSettings:
    """ Settings for Options

    This object defines additional behavior that may be used with filters:
    for instance, limit result rows when the client did not ask for a limit
    """
    # The `limit` you get by default, if not specified
    default_limit: Optional[int] = None

    # The max number of items you get, regardless of the limit
    max_limit: Optional[int] = None

    def __post_init__(self):
        for name in ('default_limit', 'max_limit'):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f'{name} must be non-negative, {value} given')

    def get_final_limit(self, limit: int) -> int:
        """ Callback that fine-tunes the `limit` of a query by applying default and max limits

        Used by: Options.apply() to decide how many rows to limit the result set to.
        Zero means "no limit".
        """
        # Apply default limit
        if not limit:
            limit = self.default_limit or 0

        # Apply max limit
        if self.max_limit:
            limit = min(limit, self.max_limit) if limit else self.max_limit

        # Done
        return limit


# Settings used when none are given
DEFAULT_SETTINGS = ParserSettings()
