import os
import sys
from datetime import date


def pytest_sessionstart(session):
    # Ensure project root is on sys.path so `ocr`, `cards` and `services` resolve
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


import pytest

from ocr.card_text_parser import CardTextParser, ParserOptions
from services.ocr_service import RecognizedText


# Fixed reference date so expiry checks do not drift with the calendar
TODAY = date(2031, 6, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def parser(today):
    return CardTextParser(ParserOptions(today=today))


@pytest.fixture
def lenient_parser(today):
    return CardTextParser(ParserOptions(today=today, reject_expired=False))


@pytest.fixture
def strict_parser(today):
    return CardTextParser(ParserOptions(today=today, strict_validation=True))


# --- Test utilities: fake recognizers ---
class FakeRecognizer:
    def __init__(self, text: str = "", block_confidences=None) -> None:
        self.text = text
        self.block_confidences = list(block_confidences or [])
        self.calls = 0

    async def recognize(self, image: bytes) -> RecognizedText:
        self.calls += 1
        return RecognizedText(self.text, self.block_confidences)


class FailingRecognizer:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def recognize(self, image: bytes) -> RecognizedText:
        self.calls += 1
        raise self.exc


@pytest.fixture
def fake_recognizer():
    return FakeRecognizer


@pytest.fixture
def failing_recognizer():
    return FailingRecognizer
