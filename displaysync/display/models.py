"""Data models for display updates and the displayed screen state."""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TextAlignment(str, Enum):
    """Horizontal alignment of the main text fields."""

    LEFT_ALIGNED = "LEFT_ALIGNED"
    RIGHT_ALIGNED = "RIGHT_ALIGNED"
    CENTERED = "CENTERED"


class MetadataType(str, Enum):
    """Semantic type of the text shown in a slot."""

    MEDIA_TITLE = "mediaTitle"
    MEDIA_ARTIST = "mediaArtist"
    MEDIA_ALBUM = "mediaAlbum"
    MEDIA_YEAR = "mediaYear"
    MEDIA_GENRE = "mediaGenre"
    MEDIA_STATION = "mediaStation"
    RATING = "rating"
    CURRENT_TEMPERATURE = "currentTemperature"
    MAXIMUM_TEMPERATURE = "maximumTemperature"
    MINIMUM_TEMPERATURE = "minimumTemperature"
    WEATHER_TERM = "weatherTerm"
    HUMIDITY = "humidity"


class ImageType(str, Enum):
    """Whether an image is a built-in icon or uploaded artwork."""

    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"


class Image(BaseModel):
    """Image reference as carried inside a display update."""

    model_config = ConfigDict(frozen=True)

    value: str
    image_type: ImageType = ImageType.DYNAMIC


class GraphicReference(BaseModel):
    """Artwork the caller wants shown in a graphic slot.

    Static icons are resolvable by the surface without an upload. Everything
    else is dynamic artwork that has to be uploaded before it can be shown.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name the surface knows the artwork by")
    is_static_icon: bool = Field(default=False, description="Built-in icon, never uploaded")
    file_path: Optional[str] = Field(default=None, description="Local source file for uploads")

    def to_image(self) -> Image:
        """Build the image reference sent in a display update."""
        image_type = ImageType.STATIC if self.is_static_icon else ImageType.DYNAMIC
        return Image(value=self.name, image_type=image_type)


class DesiredDisplayState(BaseModel):
    """What the caller wants on screen.

    Four logical text fields, each with an optional metadata type, plus title,
    media track label, alignment and two graphic slots.
    """

    model_config = ConfigDict(frozen=True)

    # Logical text fields
    text_field_1: Optional[str] = None
    text_field_1_type: Optional[MetadataType] = None
    text_field_2: Optional[str] = None
    text_field_2_type: Optional[MetadataType] = None
    text_field_3: Optional[str] = None
    text_field_3_type: Optional[MetadataType] = None
    text_field_4: Optional[str] = None
    text_field_4_type: Optional[MetadataType] = None

    # Labels
    title: Optional[str] = None
    media_track: Optional[str] = None
    alignment: TextAlignment = TextAlignment.CENTERED

    # Graphics
    primary_graphic: Optional[GraphicReference] = None
    secondary_graphic: Optional[GraphicReference] = None

    def text_fields(self) -> List[Tuple[Optional[str], Optional[MetadataType]]]:
        """Return the four logical fields as (text, type) pairs in order."""
        return [
            (self.text_field_1, self.text_field_1_type),
            (self.text_field_2, self.text_field_2_type),
            (self.text_field_3, self.text_field_3_type),
            (self.text_field_4, self.text_field_4_type),
        ]

    def non_empty_text_fields(self) -> List[str]:
        """Text of every logical field holding a non-empty value, in order."""
        return [text for text, _ in self.text_fields() if text]

    def metadata_types(self) -> List[MetadataType]:
        """Every metadata type that is set, in field order."""
        return [field_type for _, field_type in self.text_fields() if field_type is not None]


class MetadataTags(BaseModel):
    """Metadata types per physical text slot."""

    model_config = ConfigDict(frozen=True)

    main_field_1: Optional[List[MetadataType]] = None
    main_field_2: Optional[List[MetadataType]] = None
    main_field_3: Optional[List[MetadataType]] = None
    main_field_4: Optional[List[MetadataType]] = None


TEXT_FIELD_NAMES: Tuple[str, ...] = (
    "main_field_1",
    "main_field_2",
    "main_field_3",
    "main_field_4",
    "template_title",
    "media_track",
    "alignment",
    "metadata_tags",
)
GRAPHIC_FIELD_NAMES: Tuple[str, ...] = ("graphic", "secondary_graphic")
DISPLAY_FIELD_NAMES: Tuple[str, ...] = TEXT_FIELD_NAMES + GRAPHIC_FIELD_NAMES


class _DisplayFields(BaseModel):
    """Fields shared by outgoing updates and the displayed state.

    ``None`` means "not part of this update", never "clear this field".
    """

    main_field_1: Optional[str] = None
    main_field_2: Optional[str] = None
    main_field_3: Optional[str] = None
    main_field_4: Optional[str] = None
    template_title: Optional[str] = None
    media_track: Optional[str] = None
    alignment: Optional[TextAlignment] = None
    metadata_tags: Optional[MetadataTags] = None
    graphic: Optional[Image] = None
    secondary_graphic: Optional[Image] = None

    def to_wire(self) -> Dict[str, Any]:
        """Serialize for the transport, omitting every unset field."""
        return self.model_dump(mode="json", exclude_none=True)


class DisplayUpdate(_DisplayFields):
    """Outgoing display update payload."""

    def extract_text(self) -> "DisplayUpdate":
        """Copy of this update without the graphic fields."""
        return DisplayUpdate(**{name: getattr(self, name) for name in TEXT_FIELD_NAMES})

    @property
    def has_graphics(self) -> bool:
        """True if either graphic slot is part of this update."""
        return self.graphic is not None or self.secondary_graphic is not None


class CurrentDisplayState(_DisplayFields):
    """What the surface has accepted so far.

    Frozen: a new record replaces the old one on every accepted update.
    """

    model_config = ConfigDict(frozen=True)

    @property
    def graphic_name(self) -> Optional[str]:
        """Name of the image in the primary slot, if any."""
        return self.graphic.value if self.graphic is not None else None

    @property
    def secondary_graphic_name(self) -> Optional[str]:
        """Name of the image in the secondary slot, if any."""
        return self.secondary_graphic.value if self.secondary_graphic is not None else None


def merge_display_update(
    current: CurrentDisplayState, update: Optional[DisplayUpdate]
) -> CurrentDisplayState:
    """Fold the present fields of an accepted update into the displayed state.

    Args:
        current: State before the update was accepted
        update: The update the surface accepted

    Returns:
        A new state record, or ``current`` itself when there is nothing to merge
    """
    if update is None:
        logger.error("Cannot update current display state from a missing update")
        return current

    present = {}
    for name in DISPLAY_FIELD_NAMES:
        value = getattr(update, name)
        if value is not None:
            present[name] = value

    return current.model_copy(update=present)
