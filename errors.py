from __future__ import annotations


class InventoryError(Exception):
    """
    Base error for the inventory collectors.

    Only errors that a caller is expected to handle are raised; probe
    failures are absorbed into default values and never reach this type.
    """

    def __init__(self, code: str, hint: str = '') -> None:
        super().__init__(f"{code}: {hint}" if hint else code)
        self.code = code
        self.hint = hint


class UnsupportedOperation(InventoryError):
    """Raised when an operation cannot exist on the running platform."""

    def __init__(self, operation: str, platform: str) -> None:
        super().__init__('not supported', f"{operation} is not available on {platform}")
        self.operation = operation
        self.platform = platform
