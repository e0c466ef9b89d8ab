"""Shared test configuration with lightweight fixtures."""

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from displaysync.config.settings import reset_settings
from displaysync.display.capabilities import ImageFieldName, TextFieldName, WindowCapability
from displaysync.display.models import (
    DesiredDisplayState,
    GraphicReference,
    MetadataType,
)
from displaysync.display.protocols import TransportResponse


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Any:
    """Keep tests away from the user's config files and DISPLAYSYNC_ variables."""
    for key in list(os.environ):
        if key.startswith("DISPLAYSYNC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def test_settings() -> Any:
    """Create lightweight test settings without file I/O."""

    class MockSettings:
        def __init__(self) -> None:
            self.app_name = "DisplaySync-Test"
            self.protocol_major_version = 5
            self.supersede_pending_updates = True

    return MockSettings()


@pytest.fixture
def mock_transport() -> Mock:
    """Transport that accepts every update and records it."""
    transport = Mock()
    transport.send = AsyncMock(return_value=TransportResponse(success=True))
    return transport


@pytest.fixture
def mock_uploader() -> Mock:
    """Uploader with nothing uploaded yet that succeeds for every artwork."""
    uploader = Mock()
    uploader.has_uploaded.return_value = False
    uploader.upload_artworks = AsyncMock(side_effect=lambda artworks: [True] * len(artworks))
    return uploader


@pytest.fixture
def full_capabilities() -> WindowCapability:
    """Four lines, title, media track and both graphic slots."""
    return WindowCapability.with_lines(
        4,
        extra_text_fields=[TextFieldName.TEMPLATE_TITLE, TextFieldName.MEDIA_TRACK],
        image_fields=[ImageFieldName.GRAPHIC, ImageFieldName.SECONDARY_GRAPHIC],
    )


@pytest.fixture
def make_graphic() -> Callable[..., GraphicReference]:
    """Factory for graphic references."""

    def _make(name: str, static: bool = False, file_path: Optional[str] = None) -> GraphicReference:
        return GraphicReference(name=name, is_static_icon=static, file_path=file_path)

    return _make


@pytest.fixture
def make_desired() -> Callable[..., DesiredDisplayState]:
    """Factory for desired states from up to four texts typed title/artist/album/year."""
    types = [
        MetadataType.MEDIA_TITLE,
        MetadataType.MEDIA_ARTIST,
        MetadataType.MEDIA_ALBUM,
        MetadataType.MEDIA_YEAR,
    ]

    def _make(texts: List[Optional[str]], **kwargs: Any) -> DesiredDisplayState:
        fields: Dict[str, Any] = {}
        for index, text in enumerate(texts, start=1):
            fields[f"text_field_{index}"] = text
            fields[f"text_field_{index}_type"] = types[index - 1]
        fields.update(kwargs)
        return DesiredDisplayState(**fields)

    return _make
