"""Package-wide exceptions."""


class DisplaySyncError(Exception):
    """Base exception for all displaysync errors."""


class ConfigurationError(DisplaySyncError):
    """Exception raised when settings cannot be loaded or are invalid."""


class ScenarioError(DisplaySyncError):
    """Exception raised when a display scenario file cannot be used."""

    def __init__(self, message: str, path: str = "") -> None:
        """Initialize ScenarioError.

        Args:
            message: Error message
            path: Scenario file the error refers to
        """
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
