"""
Common/base exceptions.

Feature-level failures that a caller is expected to handle are returned as
`ServiceError` values (see `vinped.commons.results`). Exceptions are kept for
infrastructure faults: storage, configuration and token verification, and are
subclassed in `<feature>/exceptions.py` or next to the component that raises them.
"""


class BaseCoreException(Exception):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)
