"""Errors raised by the Kubernetes integration.

Every failed API call surfaces as a ``KubernetesError`` subclass. Whether a
missing object is a failure is the caller's decision: ``ignore_not_found`` is
where a 404 turns into a value.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class KubernetesError(Exception):
    """Base class for failed Kubernetes calls.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status of the API response; None for transport failures.
        resource_type: Kind of the object involved (e.g., "ReplicaSet").
        resource_name: Name of the object involved.
        namespace: Namespace of the object involved.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    @property
    def location(self) -> str | None:
        """``Kind/name`` plus namespace, when the object is known."""
        if not (self.resource_type and self.resource_name):
            return None
        where = f"{self.resource_type}/{self.resource_name}"
        return f"{where} in {self.namespace}" if self.namespace else where

    def __str__(self) -> str:
        text = self.message
        if self.status_code:
            text += f" (status: {self.status_code})"
        if self.location:
            text += f" [{self.location}]"
        return text


class KubernetesConnectionError(KubernetesError):
    """The API server could not be reached, or no kubeconfig could be loaded.

    The only error reads are retried on.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class KubernetesAuthError(KubernetesError):
    """401/403: bad credentials or an RBAC denial."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.reason = reason


class KubernetesNotFoundError(KubernetesError):
    """404 on a named object."""

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message,
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesError):
    """400/422. On reads this is almost always a malformed label selector."""

    def __init__(self, message: str = "Invalid request", status_code: int | None = 400) -> None:
        super().__init__(message, status_code=status_code)


class KubernetesTimeoutError(KubernetesError):
    """A request outlived its ``_request_timeout``."""

    def __init__(
        self,
        message: str = "Kubernetes operation timed out",
        timeout_seconds: int | None = None,
    ) -> None:
        if timeout_seconds:
            message = f"{message} (after {timeout_seconds}s)"
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


class NotFoundStatus(BaseModel):
    """Failure status returned in place of a not-found error."""

    model_config = ConfigDict(frozen=True)

    status: str = "Failure"
    reason: str = "NotFound"
    code: int = 404
    message: str = ""


def ignore_not_found(error: KubernetesError) -> NotFoundStatus:
    """Turn a not-found error into a status value, re-raising anything else.

    Example::

        try:
            accessor.get(PodSummary, "web-0", "prod")
        except KubernetesError as e:
            status = ignore_not_found(e)

    Raises:
        KubernetesError: ``error`` itself, when it is not a not-found error.
    """
    if isinstance(error, KubernetesNotFoundError):
        return NotFoundStatus(message=error.message)
    raise error
