from decimal import Decimal

import pytest

from cli import build_parser, main, run
from settings import SubtitleSyncSettings
from video_metadata import VideoMetadataService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SUBTITLE_SYNC_FALLBACK_ENCODING",
        "SUBTITLE_SYNC_STRICT",
        "SUBTITLE_SYNC_FFPROBE",
        "SUBTITLE_SYNC_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_offset_writes_shifted_file(write_srt_file, capsys) -> None:
    source = write_srt_file()
    assert main(["--input", str(source), "--offset", "2.5"]) == 0

    output = source.parent / "movie_shifted.srt"
    assert capsys.readouterr().out.strip() == str(output)
    assert "00:00:03,500 --> 00:00:05,500" in output.read_text(encoding="utf-8")


def test_frame_rate_conversion(write_srt_file, capsys) -> None:
    source = write_srt_file()
    assert main(["-i", str(source), "--from-fps", "25", "--to-fps", "30 fps"]) == 0

    output = source.parent / "movie_25_fps_to_30_fps.srt"
    assert output.exists()
    # 1000 ms * 25/30 = 833.33 ms
    assert output.read_text(encoding="utf-8").startswith("1\n00:00:00,833 --> 00:00:02,500\n")


def test_identical_rates_fail(write_srt_file, capsys) -> None:
    source = write_srt_file()
    assert main(["-i", str(source), "--from-fps", "25", "--to-fps", "25"]) == 1
    assert capsys.readouterr().err.startswith("Parameter error:")


def test_missing_input_file(tmp_path, capsys) -> None:
    assert main(["-i", str(tmp_path / "nope.srt"), "--offset", "1"]) == 1
    assert capsys.readouterr().err.startswith("Failed to process file:")


def test_clean_only(write_srt_file) -> None:
    source = write_srt_file()
    assert main(["-i", str(source), "--remove-spam"]) == 0

    text = (source.parent / "movie_cleaned.srt").read_text(encoding="utf-8")
    assert "www.example.com" not in text
    assert "(door slams)" in text


def test_nothing_to_do(write_srt_file, capsys) -> None:
    assert main(["-i", str(write_srt_file())]) == 1
    assert "Nothing to do" in capsys.readouterr().err


def test_to_fps_requires_from_fps() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--to-fps", "25"])
    assert excinfo.value.code == 2


def test_unknown_frame_rate_is_rejected() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--from-fps", "17"])


def test_detected_rate_is_used_as_target(write_srt_file, tmp_path, capsys) -> None:
    source = write_srt_file()
    video = tmp_path / "movie.mkv"
    video.write_bytes(b"")
    args = build_parser().parse_args(
        ["-i", str(source), "--from-fps", "25", "--detect-fps", str(video)]
    )
    service = VideoMetadataService(lambda path: Decimal("24000") / Decimal("1001"))

    assert run(args, SubtitleSyncSettings(), video_service=service) == 0
    out = capsys.readouterr().out
    assert "Frame rate detected: 23.976 (film movies)" in out
    assert (source.parent / "movie_25_fps_to_23_976_fps.srt").exists()


def test_detection_only(tmp_path, capsys) -> None:
    video = tmp_path / "movie.mkv"
    video.write_bytes(b"")
    args = build_parser().parse_args(["--detect-fps", str(video)])

    failing = VideoMetadataService(lambda path: None)
    assert run(args, SubtitleSyncSettings(), video_service=failing) == 1

    working = VideoMetadataService(lambda path: Decimal("25"))
    assert run(args, SubtitleSyncSettings(), video_service=working) == 0
    assert "Frame rate detected: 25 (European TV)" in capsys.readouterr().out
