from __future__ import annotations

from pathlib import Path

import pytest

from nano_banana.imaging.interpreter import ResponseInterpreter, build_image_filename, extension_from_mime_type
from nano_banana.providers.base import ModelResponse, ResponsePart
from nano_banana.session.artifacts import ArtifactTracker


def test_two_images_and_one_text_part(tmp_path: Path) -> None:
    tracker = ArtifactTracker()
    response = ModelResponse(
        parts=(
            ResponsePart.image_part(b"first", "image/png"),
            ResponsePart.text_part("A red boat."),
            ResponsePart.image_part(b"second", "image/png"),
        )
    )

    result = ResponseInterpreter(tracker).interpret(response, tmp_path / "out")

    assert len(result.saved_paths) == 2
    assert [path.read_bytes() for path in result.saved_paths] == [b"first", b"second"]
    assert tracker.current() == result.saved_paths[1]
    assert result.summary_text == "A red boat."
    assert [payload.data for payload in result.image_payloads] == [b"first", b"second"]
    assert result.write_errors == []


def test_text_parts_concatenate_in_order(tmp_path: Path) -> None:
    response = ModelResponse(parts=(ResponsePart.text_part("Hello, "), ResponsePart.text_part("world")))
    result = ResponseInterpreter(ArtifactTracker()).interpret(response, tmp_path)
    assert result.summary_text == "Hello, world"


def test_text_only_response_is_not_an_error(tmp_path: Path) -> None:
    tracker = ArtifactTracker()
    out_dir = tmp_path / "out"
    response = ModelResponse(parts=(ResponsePart.text_part("I cannot draw that."),))

    result = ResponseInterpreter(tracker).interpret(response, out_dir)

    assert result.text_only
    assert result.saved_paths == []
    assert tracker.current() is None
    assert not out_dir.exists()


def test_filenames_are_unique_and_prefixed(tmp_path: Path) -> None:
    response = ModelResponse(parts=tuple(ResponsePart.image_part(b"x", "image/png") for _ in range(5)))
    result = ResponseInterpreter(ArtifactTracker()).interpret(response, tmp_path, prefix="edited")
    names = [path.name for path in result.saved_paths]
    assert len(set(names)) == 5
    assert all(name.startswith("edited-") and name.endswith(".png") for name in names)


def test_write_failure_does_not_block_later_images(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    tracker = ArtifactTracker()
    original_write = Path.write_bytes
    calls = {"count": 0}

    def flaky_write(self: Path, data: bytes) -> int:
        calls["count"] += 1
        if calls["count"] == 2:
            raise OSError("disk full")
        return original_write(self, data)

    monkeypatch.setattr(Path, "write_bytes", flaky_write)
    response = ModelResponse(
        parts=(
            ResponsePart.image_part(b"one", "image/png"),
            ResponsePart.image_part(b"two", "image/png"),
            ResponsePart.image_part(b"three", "image/png"),
        )
    )

    result = ResponseInterpreter(tracker).interpret(response, tmp_path)

    assert len(result.saved_paths) == 2
    assert len(result.write_errors) == 1
    assert "disk full" in result.write_errors[0].message
    assert tracker.current() == result.saved_paths[-1]
    assert len(result.image_payloads) == 3


def test_missing_mime_type_defaults_to_png(tmp_path: Path) -> None:
    response = ModelResponse(parts=(ResponsePart.image_part(b"x"),))
    result = ResponseInterpreter(ArtifactTracker()).interpret(response, tmp_path)
    assert result.image_payloads[0].mime_type == "image/png"
    assert result.saved_paths[0].suffix == ".png"


def test_extension_from_mime_type() -> None:
    assert extension_from_mime_type("image/jpeg") == "jpg"
    assert extension_from_mime_type("image/webp") == "webp"
    assert extension_from_mime_type(None) == "png"
    assert build_image_filename("generated", "image/jpeg").endswith(".jpg")
    assert ":" not in build_image_filename("generated", None)
