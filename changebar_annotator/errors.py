"""
Exceptions raised at the orchestration boundary.

The pure pipeline stages only raise ValueError on broken preconditions;
everything here is caught by main() and turned into a non-zero exit.
"""


class ChangeBarError(Exception):
    """Base class for all expected failures."""


class ConfigError(ChangeBarError):
    """Malformed bounding box, dpi or other run configuration."""


class MeasurementError(ChangeBarError):
    """Unparseable or out-of-range marginal-height data."""


class ToolError(ChangeBarError):
    """An external collaborator (renderer, PDF writer) failed."""


class RasterizeError(ToolError):
    """Rendering the change bar region failed."""


class MergeError(ToolError):
    """Writing the annotated PDF failed."""
