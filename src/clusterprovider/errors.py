"""Exceptions raised by the cluster resource handler."""


class ValidationError(ValueError):
    """The requested configuration cannot be applied. Not retryable."""


class ClusterNotFoundError(LookupError):
    """EKS reported ResourceNotFoundException for a cluster."""

    def __init__(self, name: str):
        super().__init__(f"Cluster {name!r} not found")
        self.name = name
