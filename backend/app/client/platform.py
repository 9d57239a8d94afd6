"""Device capabilities used to deliver a print job.

The dispatcher never touches windows, files, or share sheets directly; it
asks a ``Platform``. ``DesktopPlatform`` is the implementation used by the
command line client.
"""

import logging
import webbrowser
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharedFile:
    name: str
    data: bytes
    content_type: str


class ShareError(Exception):
    """Sharing was unsupported, refused, or cancelled by the user."""


class Platform(Protocol):
    @property
    def is_online(self) -> bool: ...

    @property
    def supports_share(self) -> bool: ...

    def open_print_window(self, url: str, width: int, height: int) -> bool:
        """Open ``url`` in a new window. False if the window was blocked."""
        ...

    async def trigger_download(self, url: str, filename: str) -> None: ...

    def prompt(self, message: str) -> str | None: ...

    def alert(self, message: str) -> None: ...

    async def share(self, title: str, text: str, files: Sequence[SharedFile]) -> None: ...


class DesktopPlatform:
    """Delivers through the system web browser and the local Downloads folder."""

    def __init__(
        self,
        download_dir: str | Path | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.download_dir = Path(download_dir or settings.DOWNLOAD_DIR).expanduser()
        self.timeout = timeout or settings.CLIENT_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def is_online(self) -> bool:
        return True

    @property
    def supports_share(self) -> bool:
        return False

    def open_print_window(self, url: str, width: int, height: int) -> bool:
        # Browsers pick their own window size when launched externally.
        return webbrowser.open_new(url)

    async def trigger_download(self, url: str, filename: str) -> None:
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / filename
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self._transport
        ) as client:
            async with client.stream("GET", url) as resp:
                resp.raise_for_status()
                with open(target, "wb") as f:
                    async for chunk in resp.aiter_bytes():
                        f.write(chunk)
        logger.info("Saved %s", target)
        print(f"Saved {target}")

    def prompt(self, message: str) -> str | None:
        try:
            return input(f"{message} ").strip() or None
        except EOFError:
            return None

    def alert(self, message: str) -> None:
        print(message)

    async def share(self, title: str, text: str, files: Sequence[SharedFile]) -> None:
        raise ShareError("Native sharing is not supported on this platform")
