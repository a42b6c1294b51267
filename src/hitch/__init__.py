"""hitch -- a declarative HTTP client SDK built on httpx.

Describe an API once as a :class:`~hitch.client.Connector` (base URL,
default headers, authentication) and each endpoint as a
:class:`~hitch.client.Request`.  Sending a request merges the two into a
:class:`~hitch.client.PendingRequest`, dispatches it through
:mod:`httpx` (or a :class:`~hitch.faking.MockClient` in tests), retries
classified failures according to the request's retry policy, and returns
a :class:`~hitch.client.Response` or raises a typed exception.

Modules:
    client: connectors, requests, responses, the retry state machine, pools.
    auth: authenticator strategies.
    faking: mock client and canned responses.
    models: pydantic models shared across the package.
    config: environment-driven transport defaults and credential sources.
    exceptions: exception hierarchy and status-code classification.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"
