import sys
from pathlib import Path

import pytest

API_ROOT = Path(__file__).resolve().parents[1]
if str(API_ROOT) not in sys.path:
    sys.path.insert(0, str(API_ROOT))

from models import Record

FIXTURES_DIR = API_ROOT / "fixtures"

# (start, end, text); position 3 is the only one-word line, "pickle" recurs at 5 and 8
PICKLE_ROWS = [
    (0, 1, "Okay."),
    (1, 3, "Have you seen my lunch?"),
    (3, 6, "It was right here on the table."),
    (6, 8, "Pickle!"),
    (8, 10, "Whatever you say."),
    (10, 13, "I love a good pickle with my sandwich."),
    (13, 15, "Who doesn't?"),
    (15, 17, "Everyone does."),
    (17, 20, "Then give me the pickle jar."),
    (20, 22, "Fine, take it."),
    (22, 25, "Thank you so much, friend."),
]


def make_records(rows):
    return [Record(index=i + 1, start=start, end=end, text=text) for i, (start, end, text) in enumerate(rows)]


@pytest.fixture
def pickle_records():
    return make_records(PICKLE_ROWS)


@pytest.fixture
def sample_srt() -> str:
    return (FIXTURES_DIR / "sample.srt").read_text(encoding="utf-8")
