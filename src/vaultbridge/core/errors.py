class VaultBridgeError(Exception):
    """Base class for errors that abort a whole scan or sync operation."""


class StoreNotFoundError(VaultBridgeError):
    def __init__(self, what: str, path: str):
        super().__init__(f"{what} not found at {path}")
        self.path = path


class StoreParseError(VaultBridgeError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not parse {path}: {reason}")
        self.path = path


class ReadOnlyStoreError(VaultBridgeError):
    """Raised when something tries to write to a simulated vault."""
