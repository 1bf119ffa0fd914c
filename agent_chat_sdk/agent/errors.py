"""Errors raised by the conversation driver and mapped to HTTP statuses by the API."""


class AgentChatError(Exception):
    """Base class for driver errors."""


class NotAuthenticatedError(AgentChatError):
    """The route's auth function rejected the request."""


class StorageNotConfiguredError(AgentChatError):
    """History was requested but no storage backend is configured."""
