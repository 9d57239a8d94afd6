"""Cleaning of label text and download filenames sent by field devices."""

import re

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_UNSAFE_PATH_CHARS_RE = re.compile(r'[<>:"|?*]')
_JOB_FILENAME_RE = re.compile(r"^[A-Za-z0-9_-]+\.(html|pdf)$")


def strip_control_chars(value: str) -> str:
    """Drop non-printable control characters; newline and tab survive."""
    if not value:
        return value
    return _CONTROL_CHARS_RE.sub("", value)


def sanitize_filename(filename: str) -> str:
    """Reduce ``filename`` to a bare name that is safe inside a ZIP or on disk."""
    if not filename:
        return "unnamed"
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_PATH_CHARS_RE.sub("_", strip_control_chars(name))
    # No hidden files, no "..".
    name = name.lstrip(".")
    return name or "unnamed"


def is_job_filename(filename: str) -> bool:
    """True for ``<job id>.html`` / ``<job id>.pdf`` names and nothing else."""
    return bool(_JOB_FILENAME_RE.match(filename or ""))
