"""Internal machinery: HTTP transport, results, polling."""

from .http import HttpClient
from .poller import RepeatingTask
from .result import Err, Ok, Result, attempt

__all__ = [
    "Err",
    "HttpClient",
    "Ok",
    "RepeatingTask",
    "Result",
    "attempt",
]
