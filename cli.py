from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from frame_rate import FrameRate
from logger import setup_logging
from presenter import error_message
from settings import SubtitleSyncSettings
from subtitle_service import ParameterError, SubtitleService
from video_metadata import FFprobeFrameRateProbe, VideoMetadataService

logger = logging.getLogger("subtitle_sync")


def _frame_rate(value: str) -> FrameRate:
    try:
        return FrameRate.from_value(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    rates = ", ".join(rate.label for rate in FrameRate)
    parser = argparse.ArgumentParser(
        prog="subtitle-sync",
        description="Shift, re-time and clean SubRip (.srt) subtitles.",
    )
    parser.add_argument("--input", "-i", type=Path, help="Subtitle file to process")
    timing = parser.add_mutually_exclusive_group()
    timing.add_argument("--offset", type=float, help="Shift every timestamp by SECONDS (may be negative)")
    timing.add_argument("--from-fps", type=_frame_rate, help=f"Source frame rate ({rates})")
    parser.add_argument("--to-fps", type=_frame_rate, help=f"Target frame rate ({rates})")
    parser.add_argument(
        "--detect-fps",
        type=Path,
        metavar="VIDEO",
        help="Detect the frame rate of VIDEO with ffprobe (used as --to-fps when omitted)",
    )
    parser.add_argument("--remove-sdh", action="store_true", help="Strip hearing-impaired annotations")
    parser.add_argument("--remove-spam", action="store_true", help="Drop entries containing URLs")
    parser.add_argument("--strict", action="store_true", help="Fail on malformed subtitle blocks")
    parser.add_argument("--fallback-encoding", help="Encoding used when detection is not confident")
    parser.add_argument("--log-file", type=Path, help="Also write a debug log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    return parser


def _settings_from_args(args: argparse.Namespace) -> SubtitleSyncSettings:
    settings = SubtitleSyncSettings.from_env()
    return SubtitleSyncSettings(
        fallback_encoding=args.fallback_encoding or settings.fallback_encoding,
        output_encoding=settings.output_encoding,
        strict_parsing=args.strict or settings.strict_parsing,
        ffprobe_path=settings.ffprobe_path,
        max_offset_seconds=settings.max_offset_seconds,
        log_file=args.log_file or settings.log_file,
    )


def run(
    args: argparse.Namespace,
    settings: SubtitleSyncSettings,
    video_service: Optional[VideoMetadataService] = None,
) -> int:
    detected: Optional[FrameRate] = None
    if args.detect_fps is not None:
        video_service = video_service or VideoMetadataService(
            FFprobeFrameRateProbe(settings.ffprobe_path)
        )
        detected = video_service.detect_frame_rate(args.detect_fps)
        if detected is None:
            print(f"Frame rate of {args.detect_fps.name} could not be detected", file=sys.stderr)
            return 1
        print(f"Frame rate detected: {detected.name_with_description}")

    to_rate = args.to_fps or detected
    cleaning = args.remove_sdh or args.remove_spam
    has_operation = args.offset is not None or args.from_fps is not None or cleaning

    if args.input is None:
        if has_operation:
            raise ParameterError("--input is required")
        return 0 if detected is not None else 1
    if not has_operation:
        raise ParameterError("Nothing to do: give --offset, --from-fps or a cleaning flag")

    service = SubtitleService(settings)
    if args.offset is not None:
        output = service.create_shifted_subtitles(
            args.input, args.offset, remove_sdh=args.remove_sdh, remove_spam=args.remove_spam
        )
    elif args.from_fps is not None:
        if to_rate is None:
            raise ParameterError("--from-fps needs --to-fps or --detect-fps")
        output = service.create_frame_rate_converted_subtitles(
            args.input, args.from_fps, to_rate, remove_sdh=args.remove_sdh, remove_spam=args.remove_spam
        )
    else:
        output = service.create_cleaned_subtitles(
            args.input, remove_sdh=args.remove_sdh, remove_spam=args.remove_spam
        )
    print(output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.to_fps is not None and args.from_fps is None:
        parser.error("--to-fps requires --from-fps")

    settings = _settings_from_args(args)
    setup_logging(
        settings.log_file,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        with_signals=False,
    )

    try:
        return run(args, settings)
    except Exception as exc:
        logger.debug("[CLI] Operation failed", exc_info=exc)
        print(error_message(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
