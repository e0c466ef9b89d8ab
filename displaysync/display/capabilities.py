"""Display surface capabilities and the predicates that query them."""

from enum import Enum
from typing import Any, Iterable, Optional, Protocol

MAX_MAIN_FIELD_LINES = 4


class TextFieldName(str, Enum):
    """Text fields a surface may advertise."""

    MAIN_FIELD_1 = "mainField1"
    MAIN_FIELD_2 = "mainField2"
    MAIN_FIELD_3 = "mainField3"
    MAIN_FIELD_4 = "mainField4"
    MEDIA_TRACK = "mediaTrack"
    TEMPLATE_TITLE = "templateTitle"


class ImageFieldName(str, Enum):
    """Image slots a surface may advertise."""

    GRAPHIC = "graphic"
    SECONDARY_GRAPHIC = "secondaryGraphic"


_MAIN_FIELD_LINES = {
    TextFieldName.MAIN_FIELD_1: 1,
    TextFieldName.MAIN_FIELD_2: 2,
    TextFieldName.MAIN_FIELD_3: 3,
    TextFieldName.MAIN_FIELD_4: 4,
}


class CapabilityDescriptor(Protocol):
    """Protocol for anything that can describe what a surface supports."""

    def supports_text_field(self, name: TextFieldName) -> bool:
        """Check whether the surface shows the given text field.

        Args:
            name: Text field to check

        Returns:
            True if the field is supported
        """
        ...

    def supports_image_field(self, name: ImageFieldName) -> bool:
        """Check whether the surface shows the given image slot.

        Args:
            name: Image slot to check

        Returns:
            True if the slot is supported
        """
        ...

    def max_main_field_lines(self) -> int:
        """Number of main text lines available, between 1 and 4."""
        ...


class PermissiveCapabilities:
    """Capabilities used when a surface has not described itself.

    Every field and slot is assumed supported, with four text lines.
    """

    def supports_text_field(self, name: TextFieldName) -> bool:
        return True

    def supports_image_field(self, name: ImageFieldName) -> bool:
        return True

    def max_main_field_lines(self) -> int:
        return MAX_MAIN_FIELD_LINES

    def __repr__(self) -> str:
        return "PermissiveCapabilities()"


class WindowCapability:
    """Capabilities advertised by a display window."""

    def __init__(
        self,
        text_fields: Iterable[TextFieldName],
        image_fields: Iterable[ImageFieldName],
    ) -> None:
        """Initialize window capabilities.

        Args:
            text_fields: Text fields the window can show
            image_fields: Image slots the window can show
        """
        self.text_fields = frozenset(TextFieldName(name) for name in text_fields)
        self.image_fields = frozenset(ImageFieldName(name) for name in image_fields)

    def supports_text_field(self, name: TextFieldName) -> bool:
        return name in self.text_fields

    def supports_image_field(self, name: ImageFieldName) -> bool:
        return name in self.image_fields

    def max_main_field_lines(self) -> int:
        """Highest main field the window lists, never less than one line."""
        highest = 0
        for name in self.text_fields:
            highest = max(highest, _MAIN_FIELD_LINES.get(name, 0))
        return max(highest, 1)

    @classmethod
    def with_lines(
        cls,
        lines: int,
        extra_text_fields: Iterable[TextFieldName] = (),
        image_fields: Iterable[ImageFieldName] = (),
    ) -> "WindowCapability":
        """Build capabilities for a window with the given number of main lines.

        Args:
            lines: Number of main text lines (1-4)
            extra_text_fields: Text fields other than the main lines
            image_fields: Image slots the window can show

        Returns:
            WindowCapability instance

        Raises:
            ValueError: If lines is outside 1-4
        """
        if not 1 <= lines <= MAX_MAIN_FIELD_LINES:
            raise ValueError(f"Main field lines must be between 1 and 4, got {lines}")
        main_fields = [name for name, line in _MAIN_FIELD_LINES.items() if line <= lines]
        return cls(text_fields=[*main_fields, *extra_text_fields], image_fields=image_fields)

    def __repr__(self) -> str:
        """Return string representation of window capabilities.

        Returns:
            String representation
        """
        return (
            f"WindowCapability(lines={self.max_main_field_lines()}, "
            f"text_fields={sorted(f.value for f in self.text_fields)}, "
            f"image_fields={sorted(f.value for f in self.image_fields)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert capabilities to dictionary.

        Returns:
            Dictionary representation of capabilities
        """
        return {
            "text_fields": sorted(f.value for f in self.text_fields),
            "image_fields": sorted(f.value for f in self.image_fields),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindowCapability":
        """Create WindowCapability from dictionary.

        Either ``lines`` or ``text_fields`` must be present. With ``lines``,
        ``text_fields`` lists only the non-main fields (title, media track).

        Args:
            data: Dictionary containing capability data

        Returns:
            WindowCapability instance

        Raises:
            ValueError: If required fields are missing or unknown names are used
        """
        if "lines" not in data and "text_fields" not in data:
            raise ValueError("Missing required field: lines or text_fields")

        text_fields = [TextFieldName(name) for name in data.get("text_fields") or []]
        image_fields = [ImageFieldName(name) for name in data.get("image_fields") or []]

        if "lines" in data:
            return cls.with_lines(
                int(data["lines"]), extra_text_fields=text_fields, image_fields=image_fields
            )
        return cls(text_fields=text_fields, image_fields=image_fields)


def resolve_capabilities(capability: Optional[CapabilityDescriptor]) -> CapabilityDescriptor:
    """Return the given capabilities, or the permissive default if absent."""
    if capability is None:
        return PermissiveCapabilities()
    return capability


def supports_text_field(capability: Optional[CapabilityDescriptor], name: TextFieldName) -> bool:
    return resolve_capabilities(capability).supports_text_field(name)


def supports_image_field(capability: Optional[CapabilityDescriptor], name: ImageFieldName) -> bool:
    return resolve_capabilities(capability).supports_image_field(name)


def line_count(capability: Optional[CapabilityDescriptor]) -> int:
    """Number of main text lines, clamped to 1-4."""
    lines = resolve_capabilities(capability).max_main_field_lines()
    return min(max(lines, 1), MAX_MAIN_FIELD_LINES)
