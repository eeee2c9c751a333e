"""Storage backend exceptions."""


class StoreError(Exception):
    """The key-value backend failed (network, serialization, type or lock error)."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store error during {operation}: {detail}")
