"""Test doubles that replace the network with canned responses."""

from hitch.faking.mock_client import MockClient
from hitch.faking.mock_response import MockResponse

__all__ = ["MockClient", "MockResponse"]
