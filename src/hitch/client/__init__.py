"""Connectors, requests, and the send pipeline.

Classes:
    :class:`Connector` -- shared base URL, defaults, auth, and sender.
    :class:`Request` -- declarative description of one call.
    :class:`PendingRequest` -- merged, send-ready snapshot of one attempt.
    :class:`Response` -- a completed exchange that can classify itself.
    :class:`SendRequest` -- the retry state machine behind every send.
    :class:`Pool` -- concurrent fan-out with per-item callbacks.
    :class:`HttpxSender` -- the default :mod:`httpx` transport adapter.

Example::

    from hitch.client import Connector, Request

    class Api(Connector):
        def resolve_base_url(self) -> str:
            return "https://api.example.com"

    class ListUsers(Request):
        def resolve_endpoint(self) -> str:
            return "/users"

    users = Api().send(ListUsers()).json()
"""

from hitch.client.connector import Connector
from hitch.client.middleware import MiddlewarePipeline
from hitch.client.pending_request import PendingRequest
from hitch.client.pool import Pool
from hitch.client.request import Request
from hitch.client.response import Response
from hitch.client.send_request import SendRequest
from hitch.client.sender import HttpxSender, Sender
from hitch.client.stores import ArrayStore

__all__ = [
    "ArrayStore",
    "Connector",
    "HttpxSender",
    "MiddlewarePipeline",
    "PendingRequest",
    "Pool",
    "Request",
    "Response",
    "SendRequest",
    "Sender",
]
