# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tool runner invoking the downloader and transcoder as subprocesses."""

import logging
import subprocess
from pathlib import Path

from suimu.identity import format_seconds
from suimu.model import DomainRecord
from suimu.platforms import PlatformInfo
from suimu.runner import ToolLaunchError, ToolOutcome

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOADER = "youtube-dl"
DEFAULT_TRANSCODER = "ffmpeg"


def build_download_command(
    executable: str, platform_info: PlatformInfo, external_id: str, source_path: Path
) -> list[str]:
    """Build the downloader argument vector.

    Args:
        executable: Downloader executable name or path.
        platform_info: Settings of the video's platform.
        external_id: Platform-scoped video identifier.
        source_path: Target path of the downloaded file.

    Returns:
        Argument vector including the executable.
    """
    return [
        executable,
        "-f",
        platform_info.format_selector,
        "-o",
        str(source_path),
        platform_info.source_url(external_id),
    ]


def build_convert_command(
    executable: str, record: DomainRecord, source_path: Path, output_path: Path
) -> list[str]:
    """Build the transcoder argument vector.

    The audio stream is copied without re-encoding and the video stream is
    dropped. Trims are only added for clip bounds that are present.

    Args:
        executable: Transcoder executable name or path.
        record: Record providing tags and clip bounds.
        source_path: Downloaded source file.
        output_path: File the transcoder writes.

    Returns:
        Argument vector including the executable.
    """
    command = [
        executable,
        "-i",
        str(source_path),
        "-acodec",
        "copy",
        "-movflags",
        "faststart",
        "-metadata",
        f"title={record.title} / {record.artist}",
        "-metadata",
        f"artist={record.performer}",
        "-vn",
    ]
    if record.clip_start is not None:
        command.extend(["-ss", format_seconds(record.clip_start)])
    if record.clip_end is not None:
        command.extend(["-to", format_seconds(record.clip_end)])
    command.append(str(output_path))
    return command


def partial_path(output_path: Path) -> Path:
    """Return the temporary path a conversion writes before it is published."""
    return output_path.with_name(f".{output_path.stem}.partial{output_path.suffix}")


class SubprocessToolRunner:
    """Run external tools as blocking child processes."""

    def __init__(
        self,
        downloader: str = DEFAULT_DOWNLOADER,
        transcoder: str = DEFAULT_TRANSCODER,
        timeout: float | None = None,
    ) -> None:
        """Initialize runner configuration.

        Args:
            downloader: Downloader executable name or path.
            transcoder: Transcoder executable name or path.
            timeout: Optional per-process timeout in seconds; ``None`` waits forever.
        """
        self._downloader = downloader
        self._transcoder = transcoder
        self._timeout = timeout

    def run_download(
        self, record: DomainRecord, platform_info: PlatformInfo, source_path: Path
    ) -> ToolOutcome:
        """Download the source video of a record.

        Args:
            record: Record whose source is downloaded.
            platform_info: Settings of the record's platform.
            source_path: Target path of the downloaded file.

        Returns:
            Outcome of the downloader process.

        Raises:
            ToolLaunchError: If the downloader cannot be started.
        """
        command = build_download_command(
            self._downloader, platform_info, record.external_id, source_path
        )
        return self._execute(command, tool="downloader")

    def run_convert(
        self, record: DomainRecord, source_path: Path, output_path: Path
    ) -> ToolOutcome:
        """Convert a record into its audio file, publishing it atomically.

        The transcoder writes to a hidden partial file beside ``output_path``
        which is renamed into place only after a successful exit.

        Args:
            record: Record to convert.
            source_path: Downloaded source file.
            output_path: Final audio file path.

        Returns:
            Outcome of the transcoder process.

        Raises:
            ToolLaunchError: If the transcoder cannot be started.
        """
        temp_path = partial_path(output_path)
        temp_path.unlink(missing_ok=True)
        command = build_convert_command(self._transcoder, record, source_path, temp_path)
        outcome = self._execute(command, tool="transcoder")
        if not outcome.succeeded:
            temp_path.unlink(missing_ok=True)
            return outcome
        try:
            temp_path.replace(output_path)
        except FileNotFoundError:
            logger.warning(
                f"Transcoder exited successfully but wrote no file (path={temp_path})"
            )
            return ToolOutcome(
                status="failed",
                exit_status=outcome.exit_status,
                stdout=outcome.stdout,
                stderr=outcome.stderr or "Output file was not created",
            )
        return outcome

    def _execute(self, command: list[str], tool: str) -> ToolOutcome:
        """Run one command to completion and classify its exit status.

        Args:
            command: Argument vector including the executable.
            tool: Tool role used in log messages.

        Returns:
            ``success`` outcome on exit status zero, ``failed`` otherwise.

        Raises:
            ToolLaunchError: If the process cannot be started.
        """
        logger.debug(f"Executing {tool} (command={command})")
        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning(
                f"{tool.capitalize()} timed out (executable={command[0]} timeout={self._timeout})"
            )
            return ToolOutcome(
                status="failed",
                exit_status=None,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr),
            )
        except OSError as exc:
            raise ToolLaunchError(
                f"Failed to execute {tool} (executable={command[0]} error={exc})"
            ) from exc

        stdout = _decode(completed.stdout)
        stderr = _decode(completed.stderr)
        logger.debug(
            f"{tool.capitalize()} finished (status={completed.returncode})\n"
            f"STDOUT:\n{stdout}\nSTDERR:\n{stderr}"
        )
        if completed.returncode != 0:
            logger.warning(
                f"{tool.capitalize()} failed (status={completed.returncode})\n{stderr}"
            )
            return ToolOutcome(
                status="failed",
                exit_status=completed.returncode,
                stdout=stdout,
                stderr=stderr,
            )
        return ToolOutcome(
            status="success",
            exit_status=completed.returncode,
            stdout=stdout,
            stderr=stderr,
        )


def _decode(stream: bytes | str | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, str):
        return stream
    return stream.decode("utf-8", errors="replace")
