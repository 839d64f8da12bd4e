"""Free-form assistant chat alongside the analysis view."""

from __future__ import annotations

import logging

from google.genai import types

from newslens.config import Settings
from newslens.errors import AnalysisError
from newslens.gemini import GeminiClient
from newslens.models import ChatMessage

logger = logging.getLogger(__name__)

CHAT_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant integrated into a news analysis app. Be concise and helpful."
)
GREETING = "Hello! How can I help you with your news analysis today?"
ERROR_REPLY = "Sorry, I encountered an error. Please try again."


class AssistantChat:
    def __init__(self, client: GeminiClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self._messages: list[ChatMessage] = [ChatMessage(sender="ai", text=GREETING)]
        self._pending = False

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def is_loading(self) -> bool:
        return self._pending

    async def send(self, text: str) -> ChatMessage | None:
        """Send one user message and append the assistant's reply.

        Returns None without calling the model for blank input or while a reply
        is still pending.
        """
        if not text.strip() or self._pending:
            return None

        self._messages.append(ChatMessage(sender="user", text=text))
        self._pending = True
        try:
            reply_text = await self._client.generate(
                self._contents(),
                system_instruction=CHAT_SYSTEM_INSTRUCTION,
            )
            reply = ChatMessage(sender="ai", text=str(reply_text).strip() or ERROR_REPLY)
        except AnalysisError:
            logger.exception("Chat reply failed")
            reply = ChatMessage(sender="ai", text=ERROR_REPLY)
        finally:
            self._pending = False

        self._messages.append(reply)
        return reply

    def _contents(self) -> list[types.Content]:
        # The greeting is local only; the model sees the conversation from the first user turn.
        turns = self._messages[1:]
        return [
            types.Content(
                role="user" if m.sender == "user" else "model",
                parts=[types.Part.from_text(text=m.text)],
            )
            for m in turns
        ]
