import pytest

from chipemu.keypad import Keypad


def test_key_down_up_is_idempotent() -> None:
    keys = Keypad()
    keys.set_key_down(3)
    keys.set_key_down(3)
    assert keys.mask == 0b1000
    keys.set_key_up(3)
    keys.set_key_up(3)
    assert keys.mask == 0
    assert not keys.is_down(3)


def test_first_down_returns_lowest_index() -> None:
    keys = Keypad()
    assert keys.first_down() is None
    keys.set_key_down(0xF)
    keys.set_key_down(0x7)
    assert keys.first_down() == 0x7
    keys.release_all()
    assert keys.first_down() is None


@pytest.mark.parametrize("index", [-1, 16])
def test_invalid_index_rejected(index) -> None:
    keys = Keypad()
    with pytest.raises(ValueError):
        keys.set_key_down(index)
    assert not keys.is_down(index)
