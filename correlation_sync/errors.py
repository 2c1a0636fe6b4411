from typing import Optional


class RuleSyncError(Exception):
    """Base class for every per-record failure the sync run reports."""


class InputDecodeError(RuleSyncError):
    """Input file is not valid JSON/YAML or its root is not an object."""


class TransformError(RuleSyncError):
    """Input document cannot be mapped onto a correlation payload."""


class TransportError(RuleSyncError):
    """Request never completed, or the service answered with a non-200 status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseDecodeError(RuleSyncError):
    """Response body is not a JSON object."""


class ContractError(RuleSyncError):
    """Response decoded fine but lacks a field the caller relies on."""


class RuleExistsError(RuleSyncError):
    """Lookup found a rule with the same name; the save is skipped."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Rule already exists: "{name}"')
        self.name = name
