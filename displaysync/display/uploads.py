"""Decide which graphics need uploading and build the image-only update."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .capabilities import CapabilityDescriptor, ImageFieldName, resolve_capabilities
from .models import CurrentDisplayState, DesiredDisplayState, DisplayUpdate, GraphicReference
from .protocols import ArtworkUploader

logger = logging.getLogger(__name__)

# Surfaces below this protocol major version cannot report a secondary image slot
SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION = 5


@dataclass
class UploadOutcome:
    """Result of uploading the graphics of one display update.

    ``update`` is None when no graphic is left to send, which is distinct
    from ``success`` being False.
    """

    success: bool = True
    update: Optional[DisplayUpdate] = None
    failed_artworks: List[GraphicReference] = field(default_factory=list)

    @property
    def has_graphics(self) -> bool:
        return self.update is not None


class ArtworkUploadCoordinator:
    """Uploads changed artwork and reports which graphic slots can be shown."""

    def __init__(
        self,
        uploader: Optional[ArtworkUploader],
        capabilities: Optional[CapabilityDescriptor] = None,
        protocol_major_version: int = SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION,
    ) -> None:
        """Initialize the coordinator.

        Args:
            uploader: Artwork uploader; without one nothing is ever uploaded
            capabilities: Surface capabilities, permissive defaults if absent
            protocol_major_version: Major protocol version spoken by the surface
        """
        self.uploader = uploader
        self.capabilities = resolve_capabilities(capabilities)
        self.protocol_major_version = protocol_major_version

    def should_update_primary(
        self, desired: DesiredDisplayState, current: CurrentDisplayState
    ) -> bool:
        """Check whether the primary graphic has to change on the surface."""
        if desired.primary_graphic is None:
            return False
        supported = self.capabilities.supports_image_field(ImageFieldName.GRAPHIC)
        return supported and desired.primary_graphic.name != current.graphic_name

    def should_update_secondary(
        self, desired: DesiredDisplayState, current: CurrentDisplayState
    ) -> bool:
        """Check whether the secondary graphic has to change on the surface.

        Older surfaces cannot report the secondary slot, so the primary slot's
        support stands in for it there.
        """
        if desired.secondary_graphic is None:
            return False
        if self.protocol_major_version >= SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION:
            supported = self.capabilities.supports_image_field(ImageFieldName.SECONDARY_GRAPHIC)
        else:
            supported = self.capabilities.supports_image_field(ImageFieldName.GRAPHIC)
        return supported and desired.secondary_graphic.name != current.secondary_graphic_name

    def artwork_needs_upload(self, artwork: Optional[GraphicReference]) -> bool:
        """Check whether an artwork must be uploaded before it can be shown."""
        if self.uploader is None or artwork is None or artwork.is_static_icon:
            return False
        return not self.uploader.has_uploaded(artwork)

    def graphics_to_update(
        self, desired: DesiredDisplayState, current: CurrentDisplayState
    ) -> List[GraphicReference]:
        """Desired graphics whose slot has to change, primary first."""
        graphics = []
        if self.should_update_primary(desired, current) and desired.primary_graphic is not None:
            graphics.append(desired.primary_graphic)
        if self.should_update_secondary(desired, current) and desired.secondary_graphic is not None:
            graphics.append(desired.secondary_graphic)
        return graphics

    def needs_upload(self, desired: DesiredDisplayState, current: CurrentDisplayState) -> bool:
        """True if any graphic that has to change still needs an upload."""
        return any(
            self.artwork_needs_upload(artwork)
            for artwork in self.graphics_to_update(desired, current)
        )

    async def upload(
        self, desired: DesiredDisplayState, current: CurrentDisplayState
    ) -> UploadOutcome:
        """Upload changed artwork and build the image-only update.

        Args:
            desired: State the caller wants shown
            current: State the surface has accepted so far

        Returns:
            UploadOutcome with the image-only update for slots that can be shown
        """
        primary = desired.primary_graphic if self.should_update_primary(desired, current) else None
        secondary = (
            desired.secondary_graphic if self.should_update_secondary(desired, current) else None
        )
        slots = {ImageFieldName.GRAPHIC: primary, ImageFieldName.SECONDARY_GRAPHIC: secondary}
        batch = [
            (slot, artwork)
            for slot, artwork in slots.items()
            if artwork is not None and self.artwork_needs_upload(artwork)
        ]

        outcome = UploadOutcome()
        failed_slots = set()
        if not batch:
            logger.info("No artworks need an upload, sending them without upload instead")
        else:
            results = await self._upload_batch([artwork for _, artwork in batch])
            for (slot, artwork), uploaded in zip(batch, results):
                if not uploaded:
                    failed_slots.add(slot)
                    outcome.failed_artworks.append(artwork)
            if outcome.failed_artworks:
                outcome.success = False
                logger.error(
                    "Artwork upload failed for: "
                    f"{', '.join(artwork.name for artwork in outcome.failed_artworks)}"
                )

        # Failed slots stay unset so a stale reference is never sent
        image_update = DisplayUpdate()
        if primary is not None and ImageFieldName.GRAPHIC not in failed_slots:
            image_update.graphic = primary.to_image()
        if secondary is not None and ImageFieldName.SECONDARY_GRAPHIC not in failed_slots:
            image_update.secondary_graphic = secondary.to_image()

        if image_update.has_graphics:
            outcome.update = image_update
        else:
            logger.info("No graphics to send")
        return outcome

    async def _upload_batch(self, batch: List[GraphicReference]) -> List[bool]:
        """Run the uploader once, padding short or failed results with False."""
        assert self.uploader is not None
        try:
            results = list(await self.uploader.upload_artworks(batch))
        except Exception as e:
            logger.error(f"Artwork upload raised: {e}")
            return [False] * len(batch)

        if len(results) != len(batch):
            logger.warning(
                f"Uploader returned {len(results)} results for {len(batch)} artworks"
            )
        results.extend([False] * (len(batch) - len(results)))
        return [bool(uploaded) for uploaded in results[: len(batch)]]
