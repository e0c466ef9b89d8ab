"""Console transport and local artwork store for running updates without a surface."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Set, TextIO

from .models import DisplayUpdate, GraphicReference
from .protocols import TransportResponse

logger = logging.getLogger(__name__)


class ConsoleTransport:
    """Writes every display update as a JSON line and acknowledges it."""

    def __init__(self, stream: Optional[TextIO] = None, fail_after: Optional[int] = None) -> None:
        """Initialize console transport.

        Args:
            stream: Output stream, stdout by default
            fail_after: Reject every update after this many have been accepted
        """
        self.stream = stream if stream is not None else sys.stdout
        self.fail_after = fail_after
        self.sent: List[DisplayUpdate] = []

    async def send(self, update: DisplayUpdate) -> TransportResponse:
        if self.fail_after is not None and len(self.sent) >= self.fail_after:
            logger.debug("Console transport rejecting update")
            return TransportResponse(success=False, info="Rejected by console transport")

        self.stream.write(json.dumps(update.to_wire(), sort_keys=True) + "\n")
        self.stream.flush()
        self.sent.append(update)
        return TransportResponse(success=True)


class LocalArtworkStore:
    """Artwork uploader backed by local files.

    An upload succeeds when the artwork names no file or its file exists.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        """Initialize the store.

        Args:
            base_dir: Directory relative artwork paths are resolved against
        """
        self.base_dir = base_dir
        self.uploaded: Set[str] = set()

    def _resolve(self, file_path: str) -> Path:
        path = Path(file_path).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path

    async def upload_artworks(self, artworks: List[GraphicReference]) -> List[bool]:
        results = []
        for artwork in artworks:
            ok = artwork.file_path is None or self._resolve(artwork.file_path).is_file()
            if ok:
                self.uploaded.add(artwork.name)
                logger.debug(f"Uploaded artwork {artwork.name}")
            else:
                logger.warning(f"Artwork file missing for {artwork.name}: {artwork.file_path}")
            results.append(ok)
        return results

    def has_uploaded(self, artwork: GraphicReference) -> bool:
        return artwork.name in self.uploaded
