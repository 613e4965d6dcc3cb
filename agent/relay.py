"""
Message Relay

Routes one normalized inbound message to the right capability and
relays the result back to the sender.

Update Flow:
  image   -> remember URL -> acknowledge
  text    -> mark_seen -> parse_command -> capability -> reply

Failures never propagate: the webhook has already answered 200.
"""

import logging
from typing import Optional

from agent.commands import ParsedCommand, parse_command
from agent.session.base import SessionStore
from services.capabilities.base import CapabilityAdapter, CapabilityRequest
from transport.messenger.chunking import MAX_MESSAGE_CHARS, chunk_text
from transport.messenger.delivery import DeliverySequencer
from transport.messenger.schemas import NormalizedMessage
from transport.messenger.sender import MessengerSender, MessengerSenderError

logger = logging.getLogger(__name__)


# User-facing replies
IMAGE_RECEIVED = (
    'Image received! Now, you can use the "/gemini" command with any prompt '
    "to analyze the image."
)
NO_IMAGE = "No image found. Please send an image first."
GEMINI_USAGE = (
    "Please provide a prompt after the /gemini command. "
    "Example: /gemini Describe this image"
)
GEMINI_EMPTY = (
    "Sorry, I couldn't retrieve information for this image. Please try again later."
)
GEMINI_ERROR = (
    "⛔ There was an error processing your image analysis request. "
    "Please try again later."
)
PLAY_USAGE = (
    "Please provide a song name or query to search for on Spotify.\n\n"
    "Example: Pantropiko"
)
PLAY_NOT_FOUND = "Sorry, no Spotify link found for that query."
PLAY_ERROR = "⛔ Sorry, there was an error processing your request."
IMAGINE_USAGE = "Please provide a prompt for the image generation."
IMAGINE_ERROR = (
    "⛔ There was an error processing your image generation request. "
    "Please try again later."
)
ASK_ERROR = "Sorry, I couldn't process your request. Please try again later."


class MessageRelay:
    """
    Command router and reply relay.

    All collaborators are injected; nothing here reads configuration.
    """

    def __init__(
        self,
        sender: MessengerSender,
        sequencer: DeliverySequencer,
        sessions: SessionStore,
        text_adapter: CapabilityAdapter,
        vision_adapter: CapabilityAdapter,
        song_adapter: CapabilityAdapter,
        image_adapter: CapabilityAdapter,
        max_message_chars: int = MAX_MESSAGE_CHARS,
        timeout_s: Optional[float] = 30.0,
    ):
        self.sender = sender
        self.sequencer = sequencer
        self.sessions = sessions
        self.text_adapter = text_adapter
        self.vision_adapter = vision_adapter
        self.song_adapter = song_adapter
        self.image_adapter = image_adapter
        self.max_message_chars = max_message_chars
        self.timeout_s = timeout_s

    async def handle_message(self, message: NormalizedMessage) -> None:
        """
        Process one inbound message end to end.

        Never raises: errors are logged so other events are unaffected.
        """
        try:
            if message.input_type == "image":
                await self._handle_image(message)
            else:
                await self._handle_text(message)
        except Exception as e:
            logger.error(
                f"Error processing message from {message.sender_id}: {e}",
                exc_info=True,
                extra={"sender_id": message.sender_id, "message_id": message.message_id},
            )

    # ------------------------------------------------------------------
    # Inbound handlers
    # ------------------------------------------------------------------

    async def _handle_image(self, message: NormalizedMessage) -> None:
        self.sessions.set(message.sender_id, message.media_url)
        logger.info(
            f"Stored image for {message.sender_id}",
            extra={"sender_id": message.sender_id, "sessions": len(self.sessions)},
        )
        await self.reply_text(message.sender_id, IMAGE_RECEIVED)

    async def _handle_text(self, message: NormalizedMessage) -> None:
        sender_id = message.sender_id
        await self._mark_seen(sender_id)

        command = parse_command(message.input_text)
        logger.info(
            f"Command '{command.name}' from {sender_id}",
            extra={"sender_id": sender_id, "command": command.name},
        )

        if command.name == "gemini":
            await self._gemini(sender_id, command)
        elif command.name == "play":
            await self._play(sender_id, command)
        elif command.name == "imagine":
            await self._imagine(sender_id, command)
        else:
            await self._ask(sender_id, command)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def _gemini(self, sender_id: str, command: ParsedCommand) -> None:
        image_url = self.sessions.get(sender_id)
        if not image_url:
            await self.reply_text(sender_id, NO_IMAGE)
            return

        if not command.argument:
            await self.reply_text(sender_id, GEMINI_USAGE)
            return

        result = await self.vision_adapter.invoke(
            self._request(command.argument, sender_id, media_url=image_url)
        )
        if not result.ok:
            logger.error(f"Vision analysis failed for {sender_id}: {result.error_type}")
            await self.reply_text(sender_id, GEMINI_ERROR)
        elif result.output:
            await self.reply_text(sender_id, result.output)
        else:
            await self.reply_text(sender_id, GEMINI_EMPTY)

    async def _play(self, sender_id: str, command: ParsedCommand) -> None:
        if not command.args:
            await self.reply_text(sender_id, PLAY_USAGE)
            return

        result = await self.song_adapter.invoke(self._request(command.argument, sender_id))
        if result.ok and result.media_url:
            await self.reply_attachment(sender_id, "audio", result.media_url)
        elif result.error_type == "not_found":
            await self.reply_text(sender_id, PLAY_NOT_FOUND)
        else:
            logger.error(f"Song search failed for {sender_id}: {result.error_type}")
            await self.reply_text(sender_id, PLAY_ERROR)

    async def _imagine(self, sender_id: str, command: ParsedCommand) -> None:
        if not command.argument:
            await self.reply_text(sender_id, IMAGINE_USAGE)
            return

        result = await self.image_adapter.invoke(self._request(command.argument, sender_id))
        if result.ok and result.media_url:
            await self.reply_attachment(sender_id, "image", result.media_url)
        else:
            logger.error(f"Image generation failed for {sender_id}: {result.error_type}")
            await self.reply_text(sender_id, IMAGINE_ERROR)

    async def _ask(self, sender_id: str, command: ParsedCommand) -> None:
        result = await self.text_adapter.invoke(self._request(command.argument, sender_id))
        if result.ok and result.output:
            await self.reply_text(sender_id, result.output)
        else:
            logger.error(f"Q&A failed for {sender_id}: {result.error_type}")
            await self.reply_text(sender_id, ASK_ERROR)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def reply_text(self, sender_id: str, text: str) -> None:
        """Chunk a reply to the platform limit and hand it to the sequencer."""
        segments = chunk_text(text, self.max_message_chars)
        await self.sequencer.deliver(segments, sender_id, self.sender.send_text)

    async def reply_attachment(self, sender_id: str, attachment_type: str, url: str) -> None:
        try:
            await self.sender.send_attachment(sender_id, attachment_type, url)
        except MessengerSenderError as e:
            logger.error(f"Failed to send {attachment_type} to {sender_id}: {e}")

    async def _mark_seen(self, sender_id: str) -> None:
        try:
            await self.sender.mark_seen(sender_id)
        except MessengerSenderError as e:
            logger.warning(f"Unable to mark as seen for {sender_id}: {e}")

    def _request(
        self,
        query: str,
        sender_id: str,
        media_url: Optional[str] = None,
    ) -> CapabilityRequest:
        return CapabilityRequest(
            query=query,
            sender_id=sender_id,
            media_url=media_url,
            timeout_s=self.timeout_s,
        )
