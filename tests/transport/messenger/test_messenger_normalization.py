"""
Messenger Input Normalization Tests

Test conversion of Messenger webhook events to NormalizedMessage.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from transport.messenger.normalize import (
    NormalizationError,
    iter_messaging_events,
    normalize_event,
    normalize_payload,
)
from transport.messenger.schemas import MessengerWebhookPayload, NormalizedMessage


def _text_event(sender_id="1234567890", text="Hello", mid="m_1"):
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "PAGE_ID"},
        "timestamp": 1707500000000,
        "message": {"mid": mid, "text": text},
    }


def _image_event(sender_id="1234567890", url="https://cdn.example.com/cat.jpg"):
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "PAGE_ID"},
        "timestamp": 1707500000000,
        "message": {
            "mid": "m_img",
            "attachments": [{"type": "image", "payload": {"url": url}}],
        },
    }


class TestNormalizationText:
    """Test text message normalization."""

    def test_normalize_text_message(self):
        result = normalize_event(_text_event(text="Hello relay"))

        assert isinstance(result, NormalizedMessage)
        assert result.input_type == "text"
        assert result.input_text == "Hello relay"
        assert result.sender_id == "1234567890"
        assert result.message_id == "m_1"
        assert result.media_url is None
        assert result.timestamp == datetime.fromtimestamp(1707500000, tz=timezone.utc)

    def test_text_is_kept_verbatim(self):
        """Command prefixes depend on the raw text."""
        result = normalize_event(_text_event(text="  /play song  "))

        assert result.input_text == "  /play song  "

    def test_numeric_sender_id_becomes_string(self):
        event = _text_event()
        event["sender"]["id"] = 42

        assert normalize_event(event).sender_id == "42"


class TestNormalizationImage:
    """Test image message normalization."""

    def test_normalize_image_message(self):
        result = normalize_event(_image_event(url="https://cdn.example.com/dog.png"))

        assert result.input_type == "image"
        assert result.input_text == ""
        assert result.media_url == "https://cdn.example.com/dog.png"

    def test_image_without_url_is_error(self):
        event = _image_event()
        event["message"]["attachments"][0]["payload"] = {}

        with pytest.raises(NormalizationError):
            normalize_event(event)

    def test_non_image_attachment_skipped(self):
        event = _image_event()
        event["message"]["attachments"][0]["type"] = "audio"

        assert normalize_event(event) is None


class TestSkippedEvents:
    """Events the relay ignores."""

    def test_delivery_event_skipped(self):
        event = {"sender": {"id": "1"}, "delivery": {"mids": ["m_1"]}}

        assert normalize_event(event) is None

    def test_echo_skipped(self):
        event = _text_event()
        event["message"]["is_echo"] = True

        assert normalize_event(event) is None

    def test_message_without_text_skipped(self):
        event = _text_event()
        del event["message"]["text"]

        assert normalize_event(event) is None

    def test_string_message_is_error(self):
        event = _text_event()
        event["message"] = "hi"

        with pytest.raises(NormalizationError):
            normalize_event(event)

    def test_non_string_text_is_error(self):
        event = _text_event()
        event["message"]["text"] = 42

        with pytest.raises(NormalizationError):
            normalize_event(event)

    def test_dict_attachments_is_error(self):
        event = _image_event()
        event["message"]["attachments"] = {"type": "image", "payload": {"url": "u"}}

        with pytest.raises(NormalizationError):
            normalize_event(event)

    def test_missing_sender_is_error(self):
        event = _text_event()
        del event["sender"]

        with pytest.raises(NormalizationError):
            normalize_event(event)


class TestPayloadNormalization:
    """Whole-payload normalization."""

    def test_every_messaging_event_is_processed(self):
        """Entries with several events are not truncated to the first one."""
        payload = {
            "object": "page",
            "entry": [
                {"id": "PAGE_ID", "messaging": [_text_event(text="one"), _text_event(text="two")]},
                {"id": "PAGE_ID", "messaging": [_image_event()]},
            ],
        }

        messages = normalize_payload(payload)

        assert [m.input_type for m in messages] == ["text", "text", "image"]
        assert [m.input_text for m in messages[:2]] == ["one", "two"]

    def test_malformed_event_skipped_others_kept(self):
        payload = {
            "object": "page",
            "entry": [{"messaging": [{"message": {"text": "no sender"}}, _text_event()]}],
        }

        messages = normalize_payload(payload)

        assert len(messages) == 1
        assert messages[0].input_text == "Hello"

    def test_entry_without_messaging(self):
        assert normalize_payload({"object": "page", "entry": [{"id": "PAGE_ID"}]}) == []

    def test_accepts_pydantic_payload(self):
        payload = MessengerWebhookPayload(
            object="page",
            entry=[{"messaging": [_text_event()]}],
        )

        assert len(list(iter_messaging_events(payload))) == 1

    def test_non_list_messaging_skips_only_that_entry(self):
        payload = {
            "object": "page",
            "entry": [{"messaging": 5}, {"messaging": [_text_event(text="kept")]}],
        }

        messages = normalize_payload(payload)

        assert [m.input_text for m in messages] == ["kept"]

    def test_non_object_entry_skipped(self):
        payload = {"object": "page", "entry": ["junk", {"messaging": [_text_event()]}]}

        assert len(normalize_payload(payload)) == 1

    @pytest.mark.parametrize(
        "message",
        [
            "hi",
            {"mid": "m_1", "text": 42},
            {"mid": "m_1", "attachments": {"type": "image", "payload": {"url": "u"}}},
            {"mid": "m_1", "attachments": ["image"]},
            {"mid": 7, "text": "hello"},
            {"mid": "m_1", "attachments": [{"type": "image", "payload": {"url": 3}}]},
        ],
    )
    def test_wrongly_typed_message_skipped_others_kept(self, message):
        bad = _text_event()
        bad["message"] = message
        payload = {"object": "page", "entry": [{"messaging": [bad, _text_event(text="ok")]}]}

        messages = normalize_payload(payload)

        assert [m.input_text for m in messages] == ["ok"]

    def test_non_object_event_skipped(self):
        payload = {"object": "page", "entry": [{"messaging": [None, 3, _text_event()]}]}

        assert len(normalize_payload(payload)) == 1

    def test_invalid_entry_type(self):
        with pytest.raises(NormalizationError):
            list(iter_messaging_events({"object": "page", "entry": "nope"}))


class TestNormalizedMessageContract:

    def test_normalized_message_immutable(self):
        normalized = normalize_event(_text_event())

        with pytest.raises(ValidationError):
            normalized.input_text = "Modified"  # type: ignore
