"""Chat message as handed to the filter by the message pipeline."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ChatMessage:
    text_contents: Optional[str] = None     # plain text (after decryption)
    message_html: Optional[str] = None      # rendered variant, set by filters
    decrypted: Optional[bool] = None        # False while still encrypted
    processed_by: dict = field(default_factory=dict)  # filter marker → True
