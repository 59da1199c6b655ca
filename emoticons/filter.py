"""Emoticons filter — message pipeline hooks around the transform engine.

Binds to two pipeline events:
  onBeforeRenderMessage  — message_html gets emoji images
  onBeforeSendMessage    — text_contents gets short codes as literal Unicode

The emoji dictionary loads asynchronously. Until it is available, requests
are queued on the dictionary future and replayed once it resolves, so a
message is never processed with a partial dictionary.
"""

import asyncio
import logging
from typing import Callable, Optional, Union

from .config import EmoticonSettings, load_settings
from .dictionary import EmojiDictionary
from .engine import EmoticonEngine
from .message import ChatMessage
from .render import UnicodeRenderer

logger = logging.getLogger("emoticons.filter")

RENDER_EVENT = "onBeforeRenderMessage"
SEND_EVENT = "onBeforeSendMessage"


class EmoticonsFilter:
    """Converts emoticons in chat messages on their way in and out."""

    def __init__(
        self,
        dictionary: Union[EmojiDictionary, "asyncio.Future[EmojiDictionary]"],
        settings: Optional[EmoticonSettings] = None,
        renderer: Optional[UnicodeRenderer] = None,
    ):
        """Initialize the filter.

        Args:
            dictionary: A loaded dictionary, or a future resolving to one
            settings: Filter settings (default: from environment)
            renderer: Unicode-to-image converter (default: twemoji markup)
        """
        self.settings = settings or load_settings()
        self.processed_marker = self.settings.processed_marker
        self._renderer = renderer
        self._engine: Optional[EmoticonEngine] = None
        self._loading: Optional[asyncio.Future] = None

        if isinstance(dictionary, EmojiDictionary):
            self._engine = EmoticonEngine(dictionary, self.settings, renderer)
        else:
            self._loading = dictionary
            self._loading.add_done_callback(self._on_loaded)

    def attach(self, pipeline) -> "EmoticonsFilter":
        """Bind to a message pipeline exposing bind(event_name, handler)."""
        pipeline.bind(RENDER_EVENT, self.process_message)
        pipeline.bind(SEND_EVENT, self.process_outgoing_message)
        return self

    # ============================================================
    # DICTIONARY READINESS
    # ============================================================

    def _on_loaded(self, future: asyncio.Future):
        if future.cancelled():
            logger.error("Emoji dictionary load was cancelled; emoticons stay unconverted.")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Emoji dictionary failed to load: {error}")
            return
        logger.info(f"Emoji dictionary ready ({len(future.result())} names).")

    def ready(self) -> bool:
        """True once the dictionary is available."""
        if self._engine is not None:
            return True
        future = self._loading
        return future.done() and not future.cancelled() and future.exception() is None

    def _failed(self) -> bool:
        future = self._loading
        return (
            future is not None
            and future.done()
            and (future.cancelled() or future.exception() is not None)
        )

    async def when_ready(self) -> EmojiDictionary:
        """Wait for the dictionary and return it."""
        if self._engine is not None:
            return self._engine.dictionary
        return await self._loading

    @property
    def engine(self) -> EmoticonEngine:
        """The transform engine. Only valid once ready() is True."""
        if self._engine is None:
            self._engine = EmoticonEngine(self._loading.result(), self.settings, self._renderer)
        return self._engine

    def _deferred(self, handler: Callable[[ChatMessage], None], message: ChatMessage) -> bool:
        """Queue handler(message) behind the dictionary load if needed.

        Returns:
            True if the caller must stop (queued or load failed)
        """
        if self.ready():
            return False
        if self._failed():
            logger.debug("Emoji dictionary unavailable; message left unconverted.")
            return True
        logger.debug(f"Emoji dictionary pending; deferring {handler.__name__}.")
        self._loading.add_done_callback(lambda _future: handler(message))
        return True

    # ============================================================
    # PIPELINE HOOKS
    # ============================================================

    def process_message(self, message: ChatMessage):
        """Render emoji into message_html (onBeforeRenderMessage)."""
        if message.decrypted is False:
            return

        if self._deferred(self.process_message, message):
            return

        # ignore if emoticons are already processed
        if message.processed_by is None:
            message.processed_by = {}
        if message.processed_by.get(self.processed_marker) is True:
            return

        text_contents = message.text_contents
        if not text_contents:
            return  # not yet decrypted

        # prefer the HTML produced by earlier filters
        contents = message.message_html or text_contents
        contents = self.engine.process_html(contents)

        if contents:
            message.message_html = contents
        message.processed_by[self.processed_marker] = True

    def process_outgoing_message(self, message: ChatMessage):
        """Substitute known short codes in text_contents (onBeforeSendMessage)."""
        if self._deferred(self.process_outgoing_message, message):
            return

        contents = message.text_contents
        if not contents:
            return  # system message or composing notification

        message.text_contents = self.engine.process_outgoing_text(contents)

    # ============================================================
    # STRING TRANSFORMS
    # ============================================================

    # Unlike the hooks these cannot be queued: before ready() they return the
    # input unchanged.

    def _not_ready(self, name: str) -> bool:
        if self.ready():
            return False
        logger.debug(f"Emoji dictionary not ready; {name} returns its input unchanged.")
        return True

    def process_html(self, contents: Optional[str]) -> Optional[str]:
        """See EmoticonEngine.process_html."""
        if self._not_ready("process_html"):
            return contents
        return self.engine.process_html(contents)

    def process_outgoing_text(self, contents: Optional[str]) -> Optional[str]:
        if self._not_ready("process_outgoing_text"):
            return contents
        return self.engine.process_outgoing_text(contents)

    def from_utf_to_short(self, text: Optional[str]) -> Optional[str]:
        if self._not_ready("from_utf_to_short"):
            return text
        return self.engine.from_utf_to_short(text)
