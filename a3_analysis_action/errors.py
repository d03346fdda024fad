"""Exception hierarchy for analysis runs."""


class AnalysisError(Exception):
    """Base class for errors that end an analysis run."""


class ProjectConfigError(AnalysisError):
    """Raised when the project configuration document cannot be read."""


class ToolInstallationError(AnalysisError):
    """Raised when no launcher can be resolved or a package cannot be unpacked."""


class ResultSchemaError(AnalysisError):
    """Raised when the result document does not have the expected shape."""

    def __init__(self, message: str, analysis_id: str | None = None) -> None:
        super().__init__(message)
        self.analysis_id = analysis_id


class ProcessLaunchError(AnalysisError):
    """Raised when the external tool could not be started."""


class InvalidAnalysisIdError(AnalysisError):
    """Raised when a requested analysis id does not follow the naming rules."""
