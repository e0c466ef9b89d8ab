"""Cancelable operation that brings a display surface to a desired state.

One operation takes the desired state, the surface capabilities and the state
the surface currently shows, then:

1. assembles the text (and changed graphics) into a display update,
2. sends text only, the full update, or text followed by an image-only update
   once artwork uploads finish,
3. folds every accepted update into its copy of the current state.

Cancellation is cooperative: the flag is checked before the first send and
after every await, so an update already in flight completes but nothing new is
sent afterwards.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .capabilities import CapabilityDescriptor, resolve_capabilities
from .layout import assemble_text
from .models import (
    CurrentDisplayState,
    DesiredDisplayState,
    DisplayUpdate,
    merge_display_update,
)
from .protocols import (
    ArtworkUploader,
    CompletionListener,
    DisplayTransport,
    StateChangeListener,
)
from .uploads import SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION, ArtworkUploadCoordinator

logger = logging.getLogger(__name__)


class OperationState(str, Enum):
    """Lifecycle of a display update operation."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    CANCELED = "canceled"
    FINISHED = "finished"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one operation and the state the surface ended up showing."""

    success: bool
    current_state: CurrentDisplayState


class DisplayUpdateOperation:
    """Reconciles one desired display state with a surface."""

    def __init__(
        self,
        transport: DisplayTransport,
        uploader: Optional[ArtworkUploader],
        capabilities: Optional[CapabilityDescriptor],
        current_state: Optional[CurrentDisplayState],
        desired_state: DesiredDisplayState,
        protocol_major_version: int = SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION,
        on_complete: Optional[CompletionListener] = None,
        on_state_change: Optional[StateChangeListener] = None,
    ) -> None:
        """Initialize the operation.

        Args:
            transport: Sends display updates to the surface
            uploader: Uploads artwork; None when the surface takes no uploads
            capabilities: Surface capabilities, permissive defaults if absent
            current_state: What the surface shows now, empty if unknown
            desired_state: What the caller wants shown
            protocol_major_version: Major protocol version spoken by the surface
            on_complete: Called once with the overall success flag
            on_state_change: Called with the new state after each accepted update
        """
        self.transport = transport
        self.capabilities = resolve_capabilities(capabilities)
        self.desired_state = desired_state
        self.on_complete = on_complete
        self.on_state_change = on_state_change
        self.coordinator = ArtworkUploadCoordinator(
            uploader, self.capabilities, protocol_major_version
        )

        self._current_state = current_state if current_state is not None else CurrentDisplayState()
        self._state = OperationState.PENDING
        self._result: Optional[OperationResult] = None

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def current_state(self) -> CurrentDisplayState:
        """State record including every update accepted so far."""
        return self._current_state

    @property
    def is_canceled(self) -> bool:
        return self._state == OperationState.CANCELED

    @property
    def result(self) -> Optional[OperationResult]:
        """Result once the operation has finished, otherwise None."""
        return self._result

    def cancel(self) -> None:
        """Request cancellation; no further updates are sent after the next check."""
        if self._state in (OperationState.PENDING, OperationState.IN_PROGRESS):
            logger.debug("Display update operation canceled")
            self._state = OperationState.CANCELED

    async def execute(self) -> OperationResult:
        """Run the operation to completion.

        Returns:
            OperationResult with the overall success flag and resulting state
        """
        if self._result is not None:
            return self._result

        if self._state == OperationState.PENDING:
            self._state = OperationState.IN_PROGRESS

        if self.is_canceled:
            return self._finish(False)

        desired = self.desired_state
        current = self._current_state
        full_update = assemble_text(desired, self.capabilities)
        self._assemble_images(full_update)

        update_primary = self.coordinator.should_update_primary(desired, current)
        update_secondary = self.coordinator.should_update_secondary(desired, current)

        if not update_primary and not update_secondary:
            logger.info("No images to send, sending text")
            success = await self._send(full_update.extract_text())
            return self._finish(success and not self.is_canceled)

        if not self.coordinator.needs_upload(desired, current):
            logger.info("Images already uploaded, sending full update")
            success = await self._send(full_update)
            return self._finish(success and not self.is_canceled)

        logger.info("Images need to be uploaded, sending text and uploading images")
        return self._finish(await self._send_text_then_images(full_update))

    async def _send_text_then_images(self, full_update: DisplayUpdate) -> bool:
        if not await self._send(full_update.extract_text()):
            return False
        if self.is_canceled:
            return False

        # A text-only update never touches the graphic slots, so the slot decisions hold
        outcome = await self.coordinator.upload(self.desired_state, self._current_state)
        if self.is_canceled:
            return False

        if outcome.update is None:
            logger.warning("All images failed to upload. No graphics to show, skipping update.")
            return False

        logger.info("Sending update with the successfully uploaded images")
        sent = await self._send(outcome.update)
        return outcome.success and sent and not self.is_canceled

    def _assemble_images(self, update: DisplayUpdate) -> None:
        desired = self.desired_state
        if (
            self.coordinator.should_update_primary(desired, self._current_state)
            and desired.primary_graphic is not None
        ):
            update.graphic = desired.primary_graphic.to_image()
        if (
            self.coordinator.should_update_secondary(desired, self._current_state)
            and desired.secondary_graphic is not None
        ):
            update.secondary_graphic = desired.secondary_graphic.to_image()

    async def _send(self, update: DisplayUpdate) -> bool:
        """Send one update and record it if the surface accepted it."""
        if self.is_canceled:
            return False

        try:
            response = await self.transport.send(update)
        except Exception as e:
            logger.error(f"Display update failed to send: {e}")
            return False

        if not response.success:
            logger.warning(f"Display update rejected: {response.info or 'no details'}")
            return False

        logger.debug("Display update accepted")
        self._update_current_state(update)
        return True

    def _update_current_state(self, update: Optional[DisplayUpdate]) -> None:
        new_state = merge_display_update(self._current_state, update)
        if new_state is self._current_state:
            return
        self._current_state = new_state
        if self.on_state_change is not None:
            self.on_state_change(new_state)

    def _finish(self, success: bool) -> OperationResult:
        logger.info("Finishing text and graphic update operation")
        self._state = OperationState.FINISHED
        self._result = OperationResult(success=success, current_state=self._current_state)
        if self.on_complete is not None:
            try:
                self.on_complete(success)
            except Exception as e:
                logger.error(f"Display update completion callback failed: {e}")
        return self._result
