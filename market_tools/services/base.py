"""
Service Contracts and Errors

Services take one validated request model and return one result model. Errors
are raised as ServiceError subclasses and turned into messages by the tool
layer, never by the services themselves.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Request -> result service.

    Subclasses declare:
    - the request model they accept (InputT)
    - the result model they return (OutputT)
    - whether they can currently serve requests
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used in log lines and error prefixes."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Serve one request.

        Args:
            input_data: Request model, already validated by pydantic

        Returns:
            Result model

        Raises:
            ServiceError: Bad parameters or a failed upstream call
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


class ServiceError(Exception):
    """Raised by a service; carries the service name and structured details."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class InvalidParameter(ServiceError):
    """Period, date or enum validation failure. Never retried."""
    pass


class AlignmentMismatch(ServiceError):
    """Indicator output length disagrees with its warm-up. This is a defect."""
    pass


class ProviderError(ServiceError):
    """External data source call failed (network, quota, unknown symbol)."""
    pass
