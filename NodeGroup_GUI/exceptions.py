"""Exception types for node group operations."""


class NodeGroupError(Exception):
    """Base error; ``status_code`` is the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NodeGroupError):
    """Client input violates a pre-write rule (empty name, duplicate name...)."""

    status_code = 400


class NotFoundError(NodeGroupError):
    """The referenced group id does not exist."""

    status_code = 404

    def __init__(self, group_id: str):
        super().__init__(f"group not found: {group_id}")
        self.group_id = group_id


class MethodNotSupportedError(NodeGroupError):
    status_code = 405

    def __init__(self, method: str):
        super().__init__(f"method not supported: {method}")
        self.method = method


class InfrastructureError(NodeGroupError):
    """Backend or transport failure; never retried by the server."""

    status_code = 500


class StorageError(InfrastructureError):
    """Key-value backend read/write failure."""


class ConfigurationError(NodeGroupError):
    """Invalid service configuration."""


class NodeGroupClientError(Exception):
    """Raised by the client cache when the server reports a failure."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
