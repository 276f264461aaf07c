"""Custom exceptions for mapcov."""


class MapCovError(Exception):
    """Base exception for all mapcov errors."""

    pass


class ConfigurationError(MapCovError):
    """Raised when configuration is invalid or missing."""

    pass


class ExternalToolError(MapCovError):
    """Raised when an external tool cannot be executed."""

    def __init__(self, message="", command=None, returncode=None, stderr=None):
        """Initialize ExternalToolError with optional command details.

        Args:
            message: Error message
            command: Command that was executed (list of strings)
            returncode: Exit code from the command
            stderr: Standard error output from the command
        """
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class PipelineError(MapCovError):
    """Raised when a pipeline stage fails with no viable continuation."""

    pass


class ValidationError(MapCovError):
    """Raised when data validation fails."""

    pass


class FileFormatError(MapCovError):
    """Raised when an alignment or sequence file cannot be parsed."""

    pass


class DependencyError(MapCovError):
    """Raised when required external dependencies are missing or incompatible."""

    pass
