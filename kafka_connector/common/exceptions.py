"""Custom exceptions for the kafka_connector package."""

from typing import Optional


class KafkaConnectorError(Exception):
    """Base class for every error raised by the connector."""

    pass


class InvalidAddressError(KafkaConnectorError):
    """Raised when a path does not match any known resource address shape."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"Invalid address path '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DeserializeError(KafkaConnectorError):
    """Raised when a resource payload violates the schema of its resource kind."""

    def __init__(
        self,
        kind: str,
        message: str,
        field: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.kind = kind
        self.field = field
        self.message = message
        self.line = line
        self.column = column
        if field:
            super().__init__(f"Failed to parse {kind}: field '{field}': {message}")
        else:
            super().__init__(f"Failed to parse {kind}: {message}")


class KindMismatchError(KafkaConnectorError):
    """Raised when a decoded resource is treated as the wrong resource kind."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a {expected} resource, got {actual}")


class PlanValidationError(KafkaConnectorError):
    """Raised when the desired state cannot be reached from the current state."""

    pass


class ImmutableFieldError(PlanValidationError):
    """Raised when a plan would change a field that is immutable once created."""

    def __init__(self, field: str, current, desired):
        self.field = field
        self.current = current
        self.desired = desired
        super().__init__(f"Cannot change {field} from {current} to {desired} (immutable)")


class UnsupportedTransitionError(PlanValidationError):
    """Raised when a plan would move a field in a direction Kafka cannot apply."""

    pass


class InvalidOperationError(KafkaConnectorError):
    """Raised when an operation cannot be parsed or does not apply to an address."""

    pass


class ClusterNotFoundError(KafkaConnectorError):
    """Raised when an address names a cluster missing from the configuration."""

    def __init__(self, cluster: str):
        self.cluster = cluster
        super().__init__(f"Cluster '{cluster}' not found in configuration")


class ClientCreationError(KafkaConnectorError):
    """Raised when an admin client cannot be built for a configured cluster."""

    pass


class RemoteOperationError(KafkaConnectorError):
    """Raised when the cluster rejects an admin request for one resource."""

    def __init__(self, resource_name: str, action: str, message: str):
        self.resource_name = resource_name
        self.action = action
        self.message = message
        super().__init__(f"Failed to {action} '{resource_name}': {message}")


class NoResultReturnedError(KafkaConnectorError):
    """Raised when an admin call reports success but returns no per-item result."""

    def __init__(self, call: str):
        self.call = call
        super().__init__(f"No result returned from {call}")


class ConfigLoadError(KafkaConnectorError):
    """Raised when the connector configuration file cannot be read or parsed."""

    pass
