"""Unit tests for the console shell helpers."""

import unittest

from cli.console import ConsoleUI
from core.interfaces import SpeechOutput


class FakeSpeech(SpeechOutput):

    def get_voices(self) -> list:
        return []

    def cancel(self) -> None:
        pass

    def say(self, text, voice=None, lang=None, rate=1.0, pitch=1.0) -> None:
        pass


class TestConsoleCommands(unittest.TestCase):

    def test_say_hidden_without_speech(self):
        ui = ConsoleUI(store=None, provider=None)
        self.assertFalse(ui.can_speak)
        self.assertEqual(ui._commands('"hint"', '"back"'), 'Commands: "hint", "back"')
        self.assertFalse(ui._wants_speech('say'))

    def test_say_listed_with_speech(self):
        ui = ConsoleUI(store=None, provider=None, speech=FakeSpeech())
        self.assertEqual(ui._commands('"hint"', '"back"'),
                         'Commands: "hint", "say" to listen, "back"')
        self.assertTrue(ui._wants_speech('SAY'))
        self.assertFalse(ui._wants_speech('hint'))


if __name__ == '__main__':
    unittest.main()
