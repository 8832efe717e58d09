import pytest

from aima.errors import ValidationError
from aima.models import Sender, Turn


def test_turn_requires_text():
    with pytest.raises(ValidationError):
        Turn(sender=Sender.USER, text="   ")


def test_turn_is_immutable():
    turn = Turn(sender=Sender.USER, text="Hello")
    assert turn.is_user
    with pytest.raises(Exception):
        turn.text = "changed"
