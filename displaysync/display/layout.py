"""Assemble the text part of a display update from the desired state.

The caller supplies four logical text fields. A surface has between one and
four physical lines, so fields are merged onto fewer lines when needed:

- 1 line: every non-empty field joined on line 1
- 2 lines: fields 1+2 on line 1, fields 3+4 on line 2
- 3 lines: field 1, field 2, fields 3+4
- 4 lines: one field per line

Merging uses ``FIELD_SEPARATOR`` when the earlier field has text ("formatted").
When the earlier field is empty the later field takes the line alone
("unformatted") and only its metadata type is recorded.
"""

import logging
from typing import List, Optional, Tuple

from .capabilities import CapabilityDescriptor, TextFieldName, line_count, resolve_capabilities
from .models import DesiredDisplayState, DisplayUpdate, MetadataTags, MetadataType

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = " - "

_LineText = Tuple[str, Optional[List[MetadataType]]]


def blank_display_update(desired: DesiredDisplayState) -> DisplayUpdate:
    """Start an update that clears every text field on the surface."""
    return DisplayUpdate(
        main_field_1="",
        main_field_2="",
        main_field_3="",
        main_field_4="",
        media_track="",
        template_title="",
        alignment=desired.alignment,
    )


def assemble_text(
    desired: DesiredDisplayState, capabilities: Optional[CapabilityDescriptor] = None
) -> DisplayUpdate:
    """Build the text fields of a display update.

    Args:
        desired: State the caller wants shown
        capabilities: Surface capabilities, permissive defaults if absent

    Returns:
        DisplayUpdate with blanked text fields overwritten by the desired text
    """
    capabilities = resolve_capabilities(capabilities)
    update = blank_display_update(desired)

    if desired.media_track is not None and capabilities.supports_text_field(
        TextFieldName.MEDIA_TRACK
    ):
        update.media_track = desired.media_track

    if desired.title is not None and capabilities.supports_text_field(
        TextFieldName.TEMPLATE_TITLE
    ):
        update.template_title = desired.title

    if not desired.non_empty_text_fields():
        return update

    lines = line_count(capabilities)
    logger.debug(f"Assembling text for {lines} line(s)")

    if lines == 1:
        slots = _one_line(desired)
    elif lines == 2:
        slots = _two_lines(desired)
    elif lines == 3:
        slots = _three_lines(desired)
    else:
        slots = _four_lines(desired)

    tags = {}
    for index, (text, slot_tags) in enumerate(slots, start=1):
        if text:
            setattr(update, f"main_field_{index}", text)
        tags[f"main_field_{index}"] = slot_tags
    update.metadata_tags = MetadataTags(**tags)

    return update


def merge_fields(
    earlier: Optional[str],
    earlier_type: Optional[MetadataType],
    later: Optional[str],
    later_type: Optional[MetadataType],
    later_tag_first: bool = False,
) -> _LineText:
    """Merge two logical fields onto one line.

    Args:
        earlier: Text of the field that comes first on the line
        earlier_type: Metadata type of the earlier field
        later: Text of the field appended to the line
        later_type: Metadata type of the later field
        later_tag_first: List the later field's type first when both are merged

    Returns:
        Tuple of line text (possibly empty) and its metadata types
    """
    if not later:
        return earlier or "", _tags(earlier_type if earlier else None)

    if not earlier:
        return later, _tags(later_type)

    ordered = (later_type, earlier_type) if later_tag_first else (earlier_type, later_type)
    return f"{earlier}{FIELD_SEPARATOR}{later}", _tags(*ordered)


def _tags(*types: Optional[MetadataType]) -> Optional[List[MetadataType]]:
    present = [field_type for field_type in types if field_type is not None]
    return present or None


def _single(text: Optional[str], field_type: Optional[MetadataType]) -> _LineText:
    if not text:
        return "", None
    return text, _tags(field_type)


def _one_line(desired: DesiredDisplayState) -> List[_LineText]:
    text = FIELD_SEPARATOR.join(desired.non_empty_text_fields())
    return [(text, _tags(*desired.metadata_types()))]


def _two_lines(desired: DesiredDisplayState) -> List[_LineText]:
    (text1, type1), (text2, type2), (text3, type3), (text4, type4) = desired.text_fields()
    return [
        merge_fields(text1, type1, text2, type2, later_tag_first=True),
        merge_fields(text3, type3, text4, type4, later_tag_first=True),
    ]


def _three_lines(desired: DesiredDisplayState) -> List[_LineText]:
    (text1, type1), (text2, type2), (text3, type3), (text4, type4) = desired.text_fields()
    return [
        _single(text1, type1),
        _single(text2, type2),
        merge_fields(text3, type3, text4, type4),
    ]


def _four_lines(desired: DesiredDisplayState) -> List[_LineText]:
    return [_single(text, field_type) for text, field_type in desired.text_fields()]
