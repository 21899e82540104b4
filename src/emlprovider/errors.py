"""Exceptions raised by the message provider and the local store."""


class ProviderError(RuntimeError):
    """Hard failure while serving a provider request."""


class UnknownUriError(ProviderError, ValueError):
    """URI does not match any collection served by the provider."""

    def __init__(self, uri: str):
        super().__init__(f"Unknown URI: {uri}")
        self.uri = uri


class UnknownAccountError(ProviderError, ValueError):
    """No account is registered under the requested UUID."""

    def __init__(self, account_uuid: str):
        super().__init__(f"Unknown account: {account_uuid}")
        self.account_uuid = account_uuid


class UnsupportedOperationError(ProviderError, NotImplementedError):
    """Operation is not available on this provider."""

    def __init__(self, operation: str):
        super().__init__(f"{operation}: not implemented yet")
        self.operation = operation


class CursorClosedError(ProviderError):
    """Cursor was used after close()."""


class StoreError(Exception):
    """Failure in the local message store."""


class UnavailableStorageError(StoreError):
    """Backing storage for a local store cannot be opened."""
