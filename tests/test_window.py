import arcade
import pytest

from tesourim import play
from tesourim.controller import Action
from tesourim.window import AssetError, KEY_ACTIONS, load_font, load_sprite


def test_missing_sprite_falls_back(tmp_path):
    assert load_sprite(str(tmp_path / "enemy.png")) is None


def test_missing_font_is_fatal(tmp_path):
    with pytest.raises(AssetError):
        load_font(str(tmp_path / "missing.ttf"))


def test_broken_font_is_fatal(tmp_path):
    font = tmp_path / "broken.ttf"
    font.write_bytes(b"this is not a font")
    with pytest.raises(AssetError):
        load_font(str(font))


def test_play_exits_with_error_on_bad_font(tmp_path, monkeypatch):
    font = tmp_path / "broken.ttf"
    font.write_bytes(b"this is not a font")

    def fake_window(game, font_path=None, **kwargs):
        if font_path:
            load_font(font_path)
        return object()

    def no_run():
        raise AssertionError("the game loop must not start")

    monkeypatch.setattr(play, "TesourimWindow", fake_window)
    monkeypatch.setattr(play.arcade, "run", no_run)

    assert play.main(["--seed", "1", "--font", str(font)]) == 1


def test_play_starts_without_assets(monkeypatch):
    started = []
    monkeypatch.setattr(play, "TesourimWindow", lambda game, **kwargs: object())
    monkeypatch.setattr(play.arcade, "run", lambda: started.append(True))

    assert play.main(["--seed", "1", "--grid-size", "7"]) == 0
    assert started == [True]


def test_space_starts_and_throws():
    assert set(KEY_ACTIONS[arcade.key.SPACE]) == {Action.ADVANCE, Action.THROW}
    assert KEY_ACTIONS[arcade.key.ESCAPE] == (Action.EXIT,)
