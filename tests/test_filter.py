"""Tests for the message pipeline hooks and dictionary-load deferral."""

import asyncio

import pytest
from unittest.mock import MagicMock

from emoticons.config import EmoticonSettings
from emoticons.dataset import DatasetError, dictionary_future
from emoticons.filter import RENDER_EVENT, SEND_EVENT, EmoticonsFilter
from emoticons.message import ChatMessage


@pytest.fixture
def emoticons_filter(dictionary, settings):
    return EmoticonsFilter(dictionary, settings)


class TestAttach:
    def test_binds_both_events(self, emoticons_filter):
        """The filter only binds handlers; it never fires events."""
        pipeline = MagicMock()
        assert emoticons_filter.attach(pipeline) is emoticons_filter
        pipeline.bind.assert_any_call(RENDER_EVENT, emoticons_filter.process_message)
        pipeline.bind.assert_any_call(SEND_EVENT, emoticons_filter.process_outgoing_message)
        assert pipeline.bind.call_count == 2
        pipeline.trigger.assert_not_called()


class TestProcessMessage:
    """Test the onBeforeRenderMessage hook."""

    def test_sets_html_and_marker(self, emoticons_filter, img):
        message = ChatMessage(text_contents="hi :smile:")
        emoticons_filter.process_message(message)
        assert message.message_html == "hi " + img("😄", "1f604")
        assert message.processed_by == {"emojiFltr": True}
        assert message.text_contents == "hi :smile:"

    def test_idempotent(self, emoticons_filter):
        message = ChatMessage(text_contents=":smile:")
        emoticons_filter.process_message(message)
        first = message.message_html
        emoticons_filter.process_message(message)
        assert message.message_html == first
        assert first.count("<img") == 1

    def test_marker_skips_processing(self, emoticons_filter):
        message = ChatMessage(text_contents=":smile:", processed_by={"emojiFltr": True})
        emoticons_filter.process_message(message)
        assert message.message_html is None

    def test_prefers_existing_html(self, emoticons_filter, img):
        message = ChatMessage(text_contents="*hi* :smile:", message_html="<b>hi</b> :smile:")
        emoticons_filter.process_message(message)
        assert message.message_html == "<b>hi</b> " + img("😄", "1f604")

    def test_encrypted_message_skipped(self, emoticons_filter):
        message = ChatMessage(text_contents=":smile:", decrypted=False)
        emoticons_filter.process_message(message)
        assert message.message_html is None
        assert message.processed_by == {}

    def test_empty_contents_skipped(self, emoticons_filter):
        message = ChatMessage(text_contents="")
        emoticons_filter.process_message(message)
        assert message.message_html is None
        assert "emojiFltr" not in message.processed_by

    def test_custom_marker_per_instance(self, dictionary):
        """Two filters with different markers each process the message once."""
        first = EmoticonsFilter(dictionary, EmoticonSettings(processed_marker="a"))
        second = EmoticonsFilter(dictionary, EmoticonSettings(processed_marker="b"))
        message = ChatMessage(text_contents="x")
        first.process_message(message)
        second.process_message(message)
        assert message.processed_by == {"a": True, "b": True}


class TestProcessOutgoingMessage:
    """Test the onBeforeSendMessage hook."""

    def test_substitutes_in_place(self, emoticons_filter):
        message = ChatMessage(text_contents="hi :smile: :tm: :nope:")
        emoticons_filter.process_outgoing_message(message)
        assert message.text_contents == "hi 😄 :tm: :nope:"

    def test_empty_is_noop(self, emoticons_filter):
        message = ChatMessage(text_contents=None)
        emoticons_filter.process_outgoing_message(message)
        assert message.text_contents is None


class TestStringTransforms:
    def test_delegates_to_engine(self, emoticons_filter):
        assert emoticons_filter.process_outgoing_text(":smile:") == "😄"
        assert emoticons_filter.from_utf_to_short("😄") == ":smile:"
        assert 'class="emoji big"' in emoticons_filter.process_html(":smile:")


class TestDeferral:
    """Test behaviour while the dictionary is still loading."""

    def test_ready_with_loaded_dictionary(self, emoticons_filter):
        assert emoticons_filter.ready()

    @pytest.mark.asyncio
    async def test_render_replayed_when_loaded(self, dictionary, settings, img):
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)
        message = ChatMessage(text_contents="hi :smile:")

        emoticons_filter.process_message(message)
        assert not emoticons_filter.ready()
        assert message.message_html is None
        assert message.processed_by == {}

        future.set_result(dictionary)
        await asyncio.sleep(0)

        assert emoticons_filter.ready()
        assert message.message_html == "hi " + img("😄", "1f604")
        assert message.processed_by == {"emojiFltr": True}

    @pytest.mark.asyncio
    async def test_outgoing_replayed_when_loaded(self, dictionary, settings):
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)
        message = ChatMessage(text_contents=":thumbsup: ok")

        emoticons_filter.process_outgoing_message(message)
        assert message.text_contents == ":thumbsup: ok"

        future.set_result(dictionary)
        await asyncio.sleep(0)
        assert message.text_contents == "👍 ok"

    @pytest.mark.asyncio
    async def test_queued_twice_processed_once(self, dictionary, settings):
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)
        message = ChatMessage(text_contents=":smile:")

        emoticons_filter.process_message(message)
        emoticons_filter.process_message(message)
        future.set_result(dictionary)
        await asyncio.sleep(0)

        assert message.message_html.count("<img") == 1

    @pytest.mark.asyncio
    async def test_failed_load_leaves_message(self, settings, caplog):
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)
        message = ChatMessage(text_contents=":smile:")

        emoticons_filter.process_message(message)
        future.set_exception(DatasetError("broken dataset"))
        await asyncio.sleep(0)

        assert message.message_html is None
        assert not emoticons_filter.ready()
        assert "broken dataset" in caplog.text

        # later requests are dropped too, without raising
        emoticons_filter.process_outgoing_message(message)
        assert message.text_contents == ":smile:"

    @pytest.mark.asyncio
    async def test_when_ready_with_dictionary_future(self, settings):
        async def source():
            return [{"n": "smile", "u": "😄"}]

        emoticons_filter = EmoticonsFilter(dictionary_future(source()), settings)
        assert not emoticons_filter.ready()

        dictionary = await emoticons_filter.when_ready()
        assert dictionary.resolve("smile") == "😄"
        assert emoticons_filter.ready()
        assert emoticons_filter.process_outgoing_text(":smile:") == "😄"

    @pytest.mark.asyncio
    async def test_string_transforms_pass_through_while_loading(self, settings, caplog):
        """String transforms cannot be queued; they return their input as is."""
        caplog.set_level("DEBUG", logger="emoticons.filter")
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)

        assert emoticons_filter.process_html(":smile:") == ":smile:"
        assert emoticons_filter.process_outgoing_text(":smile:") == ":smile:"
        assert emoticons_filter.from_utf_to_short("😄") == "😄"
        assert "not ready" in caplog.text
        future.cancel()

    @pytest.mark.asyncio
    async def test_string_transforms_after_failed_load(self, settings):
        future = asyncio.get_running_loop().create_future()
        emoticons_filter = EmoticonsFilter(future, settings)
        future.set_exception(DatasetError("broken dataset"))
        await asyncio.sleep(0)

        assert emoticons_filter.process_html("hi :smile:") == "hi :smile:"

    @pytest.mark.asyncio
    async def test_when_ready_with_loaded_dictionary(self, emoticons_filter, dictionary):
        assert await emoticons_filter.when_ready() is dictionary
