"""Display update manager owning the displayed state of one surface."""

import asyncio
import logging
from typing import Any, List, Optional

from .capabilities import CapabilityDescriptor
from .models import CurrentDisplayState, DesiredDisplayState
from .operation import DisplayUpdateOperation
from .protocols import ArtworkUploader, CompletionListener, DisplayTransport, StateChangeListener
from .uploads import SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION

logger = logging.getLogger(__name__)


class DisplayUpdateManager:
    """Runs display update operations for one surface, one at a time.

    The manager keeps the state the surface has accepted and hands it to each
    new operation. Updates are serialized; when a newer update arrives, older
    ones still waiting for their turn are canceled.
    """

    def __init__(
        self,
        transport: DisplayTransport,
        uploader: Optional[ArtworkUploader] = None,
        capabilities: Optional[CapabilityDescriptor] = None,
        settings: Any = None,
        protocol_major_version: Optional[int] = None,
        current_state: Optional[CurrentDisplayState] = None,
    ) -> None:
        """Initialize display update manager.

        Args:
            transport: Sends display updates to the surface
            uploader: Uploads artwork to the surface
            capabilities: Surface capabilities, permissive defaults if absent
            settings: Application settings
            protocol_major_version: Explicit protocol version override
            current_state: State the surface already shows, empty if absent
        """
        self.transport = transport
        self.uploader = uploader
        self.settings = settings
        self._capabilities = capabilities

        if protocol_major_version is None:
            protocol_major_version = getattr(
                settings, "protocol_major_version", SECONDARY_GRAPHIC_MIN_PROTOCOL_VERSION
            )
        self.protocol_major_version: int = protocol_major_version
        self.supersede_pending_updates: bool = getattr(settings, "supersede_pending_updates", True)

        self._current_state = (
            current_state if current_state is not None else CurrentDisplayState()
        )
        self._state_listeners: List[StateChangeListener] = []
        self._lock = asyncio.Lock()
        self._generation = 0
        self._canceled_through = 0
        self._active: Optional[DisplayUpdateOperation] = None

        logger.debug(
            f"Display update manager initialized (protocol v{self.protocol_major_version}, "
            f"capabilities: {capabilities!r})"
        )

    @property
    def current_state(self) -> CurrentDisplayState:
        """State the surface has accepted so far."""
        return self._current_state

    @property
    def capabilities(self) -> Optional[CapabilityDescriptor]:
        return self._capabilities

    @capabilities.setter
    def capabilities(self, capabilities: Optional[CapabilityDescriptor]) -> None:
        logger.info(f"Display capabilities changed: {capabilities!r}")
        self._capabilities = capabilities

    @property
    def is_busy(self) -> bool:
        """True while an operation is running."""
        return self._active is not None

    def add_state_listener(self, listener: Optional[StateChangeListener]) -> None:
        """Register a callback for accepted state changes; None is ignored."""
        if listener is None or listener in self._state_listeners:
            return
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: Optional[StateChangeListener]) -> None:
        """Unregister a state listener; unknown or None listeners are ignored."""
        if listener is None or listener not in self._state_listeners:
            return
        self._state_listeners.remove(listener)

    async def update(
        self, desired: DesiredDisplayState, on_complete: Optional[CompletionListener] = None
    ) -> bool:
        """Bring the surface to the desired state.

        Args:
            desired: State the caller wants shown
            on_complete: Called once with the overall success flag

        Returns:
            True if every part of the update was accepted
        """
        if desired is None:
            logger.warning("Ignoring display update without a desired state")
            return False

        self._generation += 1
        generation = self._generation

        async with self._lock:
            operation = DisplayUpdateOperation(
                transport=self.transport,
                uploader=self.uploader,
                capabilities=self._capabilities,
                current_state=self._current_state,
                desired_state=desired,
                protocol_major_version=self.protocol_major_version,
                on_complete=on_complete,
                on_state_change=self._notify_state_listeners,
            )
            if generation <= self._canceled_through:
                logger.info("Display update canceled before it started")
                operation.cancel()
            elif self.supersede_pending_updates and generation != self._generation:
                logger.info("Display update superseded by a newer one")
                operation.cancel()

            self._active = operation
            try:
                result = await operation.execute()
            finally:
                self._active = None
                # Keep whatever the surface accepted, even if execute raised
                self._current_state = operation.current_state

            return result.success

    def cancel_all(self) -> None:
        """Cancel the running operation and every update still waiting."""
        self._canceled_through = self._generation
        if self._active is not None:
            self._active.cancel()

    def reset(self) -> None:
        """Forget what the surface shows, e.g. after it reconnects."""
        logger.debug("Resetting current display state")
        self._current_state = CurrentDisplayState()

    def _notify_state_listeners(self, state: CurrentDisplayState) -> None:
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Display state listener failed: {e}")
