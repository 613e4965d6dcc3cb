"""
Command parsing tests.
"""

import pytest

from agent.commands import ParsedCommand, parse_command


class TestParseCommand:

    def test_gemini_prompt_is_stripped(self):
        command = parse_command("/gemini   what is this  ")

        assert command == ParsedCommand("gemini", "what is this")

    def test_gemini_without_prompt(self):
        assert parse_command("/gemini").argument == ""

    def test_play_args(self):
        command = parse_command("/play never  gonna give")

        assert command.name == "play"
        assert command.args == ["never", "gonna", "give"]
        assert command.argument == "never gonna give"

    @pytest.mark.parametrize("text", ["/play", "/play   "])
    def test_play_without_args(self, text):
        command = parse_command(text)

        assert command.name == "play"
        assert command.args == []

    def test_imagine_prompt(self):
        command = parse_command("/imagine a red fox")

        assert command == ParsedCommand("imagine", "a red fox")

    def test_free_text_is_ask(self):
        command = parse_command("hello there")

        assert command == ParsedCommand("ask", "hello there")

    def test_prefix_match_is_case_sensitive(self):
        assert parse_command("/Gemini hi").name == "ask"
        assert parse_command("/PLAY song").name == "ask"

    def test_command_must_be_a_prefix(self):
        assert parse_command("please /play song").name == "ask"
