from urllib3.exceptions import TimeoutError as Timeout
from urllib3.exceptions import NewConnectionError as ConnectionError


class ElasticHttpError(Exception):
    """Exception raised when the server returns a non-OK (>=400) status code"""
    # The server hands back 500s for plenty of client mistakes (malformed
    # JSON, for one), so 4xx vs. 5xx is no basis for picking a subclass. We
    # look at the error text instead; see Client._raise_exception().

    # Keeping everything in args lets the exception survive pickling (by
    # celery, Sentry and friends) without custom serialization.
    @property
    def status_code(self):
        """The HTTP status code of the response that precipitated the error"""
        return self.args[0]

    @property
    def error(self):
        """A string error message"""
        return self.args[1]

    def __str__(self):
        return 'Non-OK response returned (%s): %r' % (self.status_code,
                                                      self.error)


class ElasticHttpNotFoundError(ElasticHttpError):
    """Exception raised when a request returns a 404"""


class IndexAlreadyExistsError(ElasticHttpError):
    """Exception raised on an attempt to create an index that already exists"""


class InvalidJsonResponseError(Exception):
    """
    Exception raised in the unlikely event that the server returns a non-JSON
    response
    """
    @property
    def input(self):
        """Return the data we attempted to convert to JSON."""
        return self.args[0]

    def __str__(self):
        return 'Invalid JSON returned from the server: %r' % (self.input,)
