"""
Input/output operations for vert.

This package provides the HTTP read boundary used by every discovery
strategy.

Modules
-------
http : module
    Session factory and GET helpers that raise NetworkError,
    HTTPStatusError or DecodeError.

Public API
----------
make_session : function
    Create a requests.Session with vert's default headers.
fetch : function
    GET a URL and require HTTP 200.
get_json : function
    GET a URL, require HTTP 200, and decode the body as JSON.
"""

from .http import DEFAULT_TIMEOUT, fetch, get_json, make_session

__all__ = ["DEFAULT_TIMEOUT", "fetch", "get_json", "make_session"]
