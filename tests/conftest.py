from pathlib import Path

import pytest

SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:03,000\n"
    "Hello\n"
    "\n"
    "2\n"
    "00:00:10,000 --> 00:00:12,500\n"
    "JOHN: How are you?\n"
    "\n"
    "3\n"
    "00:00:13,000 --> 00:00:14,000\n"
    "(door slams)\n"
    "\n"
    "4\n"
    "00:00:20,000 --> 00:00:22,000\n"
    "Subtitles downloaded from www.example.com\n"
    "\n"
)


@pytest.fixture
def write_srt_file(tmp_path):
    def _write(content: str = SAMPLE_SRT, name: str = "movie.srt", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_bytes(content.encode(encoding))
        return path

    return _write


@pytest.fixture(scope="session")
def qt_app():
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
