"""Tests for displaysync.display.operation."""

from unittest.mock import AsyncMock, Mock

import pytest

from displaysync.display.models import CurrentDisplayState
from displaysync.display.operation import DisplayUpdateOperation, OperationState
from displaysync.display.protocols import TransportResponse


def make_operation(transport, uploader, desired, current=None, **kwargs) -> DisplayUpdateOperation:
    return DisplayUpdateOperation(
        transport=transport,
        uploader=uploader,
        capabilities=kwargs.pop("capabilities", None),
        current_state=current,
        desired_state=desired,
        **kwargs,
    )


def sent_updates(transport) -> list:
    return [call.args[0] for call in transport.send.await_args_list]


class TestTextOnly:
    """Test operations that only change text."""

    @pytest.mark.asyncio
    async def test_sends_text_only(self, mock_transport, mock_uploader, make_desired) -> None:
        """Test one text update is sent and merged into the state."""
        on_complete = Mock()
        operation = make_operation(
            mock_transport, mock_uploader, make_desired(["A", "B"]), on_complete=on_complete
        )

        result = await operation.execute()

        assert result.success
        assert len(sent_updates(mock_transport)) == 1
        assert result.current_state.main_field_1 == "A"
        assert result.current_state.main_field_2 == "B"
        assert operation.state == OperationState.FINISHED
        on_complete.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_same_graphic_not_resent(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test a graphic already shown is neither uploaded nor sent."""
        current = CurrentDisplayState(graphic=make_graphic("art").to_image())
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired, current)

        result = await operation.execute()

        assert result.success
        mock_uploader.upload_artworks.assert_not_called()
        for update in sent_updates(mock_transport):
            assert update.graphic is None
            assert update.secondary_graphic is None
        assert result.current_state.graphic_name == "art"

    @pytest.mark.asyncio
    async def test_state_change_listener(self, mock_transport, make_desired) -> None:
        """Test the state listener receives the merged state."""
        on_state_change = Mock()
        operation = make_operation(
            mock_transport, None, make_desired(["A"]), on_state_change=on_state_change
        )

        await operation.execute()

        on_state_change.assert_called_once()
        assert on_state_change.call_args.args[0].main_field_1 == "A"


class TestFullUpdate:
    """Test operations whose graphics need no upload."""

    @pytest.mark.asyncio
    async def test_uploaded_artwork_sent_with_text(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test one combined update when the artwork is already uploaded."""
        mock_uploader.has_uploaded.return_value = True
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        result = await operation.execute()

        updates = sent_updates(mock_transport)
        assert result.success
        assert len(updates) == 1
        assert updates[0].main_field_1 == "A"
        assert updates[0].graphic.value == "art"
        mock_uploader.upload_artworks.assert_not_called()
        assert result.current_state.graphic_name == "art"

    @pytest.mark.asyncio
    async def test_no_uploader_sends_full_update(
        self, mock_transport, make_desired, make_graphic
    ) -> None:
        """Test graphics go out with the text when there is no uploader."""
        desired = make_desired(["A"], secondary_graphic=make_graphic("two"))
        operation = make_operation(mock_transport, None, desired)

        result = await operation.execute()

        updates = sent_updates(mock_transport)
        assert result.success
        assert len(updates) == 1
        assert updates[0].secondary_graphic.value == "two"


class TestTextThenImages:
    """Test operations that upload artwork between text and images."""

    @pytest.mark.asyncio
    async def test_text_then_images(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test text goes out first, then an image-only update after the upload."""
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        result = await operation.execute()

        updates = sent_updates(mock_transport)
        assert result.success
        assert len(updates) == 2
        assert updates[0].main_field_1 == "A"
        assert updates[0].graphic is None
        assert updates[1].graphic.value == "art"
        assert updates[1].main_field_1 is None
        assert result.current_state.main_field_1 == "A"
        assert result.current_state.graphic_name == "art"

    @pytest.mark.asyncio
    async def test_partial_upload_failure(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test the successful graphic is shown and the operation still fails."""
        mock_uploader.upload_artworks = AsyncMock(return_value=[True, False])
        desired = make_desired(
            ["A"], primary_graphic=make_graphic("one"), secondary_graphic=make_graphic("two")
        )
        on_complete = Mock()
        operation = make_operation(mock_transport, mock_uploader, desired, on_complete=on_complete)

        result = await operation.execute()

        updates = sent_updates(mock_transport)
        assert not result.success
        assert updates[1].graphic.value == "one"
        assert updates[1].secondary_graphic is None
        assert result.current_state.graphic_name == "one"
        assert result.current_state.secondary_graphic_name is None
        on_complete.assert_called_once_with(False)

    @pytest.mark.asyncio
    async def test_all_uploads_failed(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test no image update is sent when every upload fails."""
        mock_uploader.upload_artworks = AsyncMock(return_value=[False])
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        result = await operation.execute()

        assert not result.success
        assert len(sent_updates(mock_transport)) == 1
        assert result.current_state.main_field_1 == "A"
        assert result.current_state.graphic is None

    @pytest.mark.asyncio
    async def test_text_rejected_skips_upload(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test a rejected text update stops the operation before uploading."""
        mock_transport.send = AsyncMock(return_value=TransportResponse(success=False))
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        result = await operation.execute()

        assert not result.success
        mock_uploader.upload_artworks.assert_not_called()
        assert result.current_state == CurrentDisplayState()


class TestFailures:
    """Test transport failures."""

    @pytest.mark.asyncio
    async def test_rejection_keeps_state(self, mock_transport, make_desired) -> None:
        """Test a rejected update leaves the state unchanged."""
        mock_transport.send = AsyncMock(
            return_value=TransportResponse(success=False, info="busy")
        )
        current = CurrentDisplayState(main_field_1="old")
        operation = make_operation(mock_transport, None, make_desired(["new"]), current)

        result = await operation.execute()

        assert not result.success
        assert result.current_state.main_field_1 == "old"

    @pytest.mark.asyncio
    async def test_transport_exception(self, mock_transport, make_desired) -> None:
        """Test a transport exception is reported as failure."""
        mock_transport.send = AsyncMock(side_effect=ConnectionError("gone"))
        on_complete = Mock()
        operation = make_operation(
            mock_transport, None, make_desired(["A"]), on_complete=on_complete
        )

        result = await operation.execute()

        assert not result.success
        on_complete.assert_called_once_with(False)


class TestCancellation:
    """Test cooperative cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_before_execute(self, mock_transport, make_desired) -> None:
        """Test a canceled operation sends nothing and reports failure."""
        on_complete = Mock()
        current = CurrentDisplayState(main_field_1="old")
        operation = make_operation(
            mock_transport, None, make_desired(["A"]), current, on_complete=on_complete
        )

        operation.cancel()
        result = await operation.execute()

        assert not result.success
        mock_transport.send.assert_not_called()
        assert result.current_state is current
        on_complete.assert_called_once_with(False)
        assert operation.state == OperationState.FINISHED

    @pytest.mark.asyncio
    async def test_cancel_during_upload(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test cancellation during the upload stops the image update."""
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        async def upload_and_cancel(artworks):
            operation.cancel()
            return [True] * len(artworks)

        mock_uploader.upload_artworks = AsyncMock(side_effect=upload_and_cancel)

        result = await operation.execute()

        assert not result.success
        assert len(sent_updates(mock_transport)) == 1
        assert result.current_state.main_field_1 == "A"
        assert result.current_state.graphic is None

    @pytest.mark.asyncio
    async def test_cancel_during_final_send(self, mock_transport, make_desired) -> None:
        """Test a cancel while the last update is in flight still fails the result."""
        operation = make_operation(mock_transport, None, make_desired(["A"]))

        async def send_and_cancel(update):
            operation.cancel()
            return TransportResponse(success=True)

        mock_transport.send = AsyncMock(side_effect=send_and_cancel)

        result = await operation.execute()

        assert not result.success
        assert result.current_state.main_field_1 == "A"

    @pytest.mark.asyncio
    async def test_cancel_after_finish_is_ignored(self, mock_transport, make_desired) -> None:
        """Test canceling a finished operation changes nothing."""
        on_complete = Mock()
        operation = make_operation(
            mock_transport, None, make_desired(["A"]), on_complete=on_complete
        )

        first = await operation.execute()
        operation.cancel()
        second = await operation.execute()

        assert second is first
        assert operation.state == OperationState.FINISHED
        on_complete.assert_called_once_with(True)
        assert mock_transport.send.await_count == 1

    @pytest.mark.asyncio
    async def test_cancel_during_text_send_skips_upload(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test a cancel during the text send stops before any upload."""
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        operation = make_operation(mock_transport, mock_uploader, desired)

        async def send_and_cancel(update):
            operation.cancel()
            return TransportResponse(success=True)

        mock_transport.send = AsyncMock(side_effect=send_and_cancel)

        result = await operation.execute()

        assert not result.success
        mock_uploader.upload_artworks.assert_not_awaited()
        assert mock_transport.send.await_count == 1
        assert result.current_state.main_field_1 == "A"
        assert result.current_state.graphic is None

    @pytest.mark.asyncio
    async def test_cancel_during_full_update_send(
        self, mock_transport, mock_uploader, make_desired, make_graphic
    ) -> None:
        """Test a cancel while the combined update is in flight fails the result."""
        mock_uploader.has_uploaded.return_value = True
        desired = make_desired(["A"], primary_graphic=make_graphic("art"))
        on_complete = Mock()
        operation = make_operation(mock_transport, mock_uploader, desired, on_complete=on_complete)

        async def send_and_cancel(update):
            operation.cancel()
            return TransportResponse(success=True)

        mock_transport.send = AsyncMock(side_effect=send_and_cancel)

        result = await operation.execute()

        assert not result.success
        assert mock_transport.send.await_count == 1
        mock_uploader.upload_artworks.assert_not_awaited()
        assert result.current_state.graphic_name == "art"
        on_complete.assert_called_once_with(False)


class TestCompletionCallback:
    """Test the completion callback contract."""

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_escape(self, mock_transport, make_desired) -> None:
        """Test a raising completion callback is logged and the result still returned."""
        on_complete = Mock(side_effect=RuntimeError("callback bug"))
        operation = make_operation(
            mock_transport, None, make_desired(["A"]), on_complete=on_complete
        )

        result = await operation.execute()

        assert result.success
        assert result.current_state.main_field_1 == "A"
        assert operation.state == OperationState.FINISHED
        on_complete.assert_called_once_with(True)
