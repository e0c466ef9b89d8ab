"""Display update orchestration for remote display surfaces."""

from .capabilities import (
    CapabilityDescriptor,
    ImageFieldName,
    PermissiveCapabilities,
    TextFieldName,
    WindowCapability,
)
from .console_transport import ConsoleTransport, LocalArtworkStore
from .layout import assemble_text
from .manager import DisplayUpdateManager
from .models import (
    CurrentDisplayState,
    DesiredDisplayState,
    DisplayUpdate,
    GraphicReference,
    MetadataTags,
    MetadataType,
    TextAlignment,
    merge_display_update,
)
from .operation import DisplayUpdateOperation, OperationResult, OperationState
from .protocols import ArtworkUploader, DisplayTransport, TransportResponse
from .scenario import DisplayScenario, load_scenario
from .uploads import ArtworkUploadCoordinator, UploadOutcome

__all__ = [
    "ArtworkUploadCoordinator",
    "ArtworkUploader",
    "CapabilityDescriptor",
    "ConsoleTransport",
    "CurrentDisplayState",
    "DesiredDisplayState",
    "DisplayScenario",
    "DisplayTransport",
    "DisplayUpdate",
    "DisplayUpdateManager",
    "DisplayUpdateOperation",
    "GraphicReference",
    "ImageFieldName",
    "LocalArtworkStore",
    "MetadataTags",
    "MetadataType",
    "OperationResult",
    "OperationState",
    "PermissiveCapabilities",
    "TextAlignment",
    "TextFieldName",
    "TransportResponse",
    "UploadOutcome",
    "WindowCapability",
    "assemble_text",
    "load_scenario",
    "merge_display_update",
]
