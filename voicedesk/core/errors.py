"""Exception taxonomy shared by services, integrations and routers."""
from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures raised by the service layer."""


class NotFoundError(ServiceError):
    """A referenced knowledge base, bot, room type or reservation does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class ValidationError(ServiceError):
    """The request shape is valid JSON but semantically unusable."""


class RemoteGatewayError(ServiceError):
    """The voice platform rejected a call or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RemoteNotFoundError(RemoteGatewayError):
    """The remote agent, LLM or knowledge base no longer exists."""
