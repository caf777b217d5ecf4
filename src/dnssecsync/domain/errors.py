"""Error taxonomy shared by the domain and its adapters."""

from __future__ import annotations


class DnssecSyncError(RuntimeError):
    """Base class for errors raised while reconciling DNSSEC keys."""


class ApiConnectionError(DnssecSyncError):
    """Raised when a collaborator session cannot be established or its transport fails."""

    def __init__(self, message: str, *, collaborator: str, code: int | str | None = None) -> None:
        super().__init__(message)
        self.collaborator = collaborator
        self.code = code


class MalformedExportError(DnssecSyncError):
    """Raised when the local export artifact is missing or cannot be decoded."""


class ProviderOperationError(DnssecSyncError):
    """Raised when a single registrar call answers with a non-success code."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ControlPlaneError(DnssecSyncError):
    """Raised when the control plane rejects a data request."""


class DnssecInfoParseError(DnssecSyncError):
    """Raised when the DNSSEC info block of a signed zone lacks usable records."""

    def __init__(self, message: str, *, origin: str) -> None:
        super().__init__(f"{origin}: {message}")
        self.origin = origin


class UnknownZoneError(DnssecSyncError):
    """Raised when an origin-scoped lookup names a zone the registry has never seen."""

    def __init__(self, origin: str) -> None:
        super().__init__(f"Unknown zone: {origin}")
        self.origin = origin


class RegistryNotVerifiedError(DnssecSyncError):
    """Raised when classification queries run before ``ZoneRegistry.verify``."""
