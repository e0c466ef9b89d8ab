"""Collaborator protocols used by display update operations."""

from typing import Callable, List, Optional, Protocol

from pydantic import BaseModel

from .models import CurrentDisplayState, DisplayUpdate, GraphicReference

CompletionListener = Callable[[bool], None]
StateChangeListener = Callable[[CurrentDisplayState], None]


class TransportResponse(BaseModel):
    """Acknowledgement for a display update."""

    success: bool
    info: Optional[str] = None


class DisplayTransport(Protocol):
    """Protocol for sending display updates to a surface."""

    async def send(self, update: DisplayUpdate) -> TransportResponse:
        """Send a display update.

        Args:
            update: Update to send; unset fields must not be transmitted

        Returns:
            Response reporting whether the surface accepted the update
        """
        ...


class ArtworkUploader(Protocol):
    """Protocol for getting artwork onto a surface before it is displayed."""

    async def upload_artworks(self, artworks: List[GraphicReference]) -> List[bool]:
        """Upload a batch of artworks.

        Args:
            artworks: Artworks to upload

        Returns:
            One success flag per artwork, in the same order
        """
        ...

    def has_uploaded(self, artwork: GraphicReference) -> bool:
        """Check whether an artwork is already on the surface.

        Args:
            artwork: Artwork to check

        Returns:
            True if the artwork was uploaded before
        """
        ...
