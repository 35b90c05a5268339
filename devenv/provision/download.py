"""Installer artifact downloads.

Downloads are streamed to disk with ``aiohttp`` and driven synchronously
through :func:`asyncio.run`, so callers see a plain blocking function.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import aiohttp

from devenv.config import DEFAULT_DOWNLOAD_TIMEOUT, DOWNLOAD_CHUNK_SIZE
from devenv.exceptions import DownloadError

logger = logging.getLogger(__name__)


async def fetch_to_file(
    url: str, dest: Path, *, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
) -> int:
    """Stream ``url`` into ``dest`` and return the number of bytes written.

    Raises
    ------
    DownloadError
        On a non-200 response.
    """
    written = 0
    async with aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout)
    ) as session:
        async with session.get(url, allow_redirects=True) as resp:
            if resp.status != 200:
                raise DownloadError(
                    f"HTTP {resp.status} while downloading {url}",
                    context={"url": url, "status": resp.status},
                    transient=resp.status >= 500,
                )
            with dest.open("wb") as fh:
                async for chunk in resp.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
                    fh.write(chunk)
                    written += len(chunk)
    return written


def download_file(
    url: str, dest: Path, *, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
) -> Path:
    """Download ``url`` to ``dest``, replacing any previous file.

    Parameters
    ----------
    url : str
        Source URL. Redirects are followed.
    dest : Path
        Target file. The parent directory is created if needed.
    timeout : float, optional
        Total timeout in seconds for the transfer.

    Returns
    -------
    Path
        ``dest``.

    Raises
    ------
    DownloadError
        On HTTP errors, connection failures, timeouts or local write errors.
        A partially written file is removed.
    """
    dest = Path(dest)
    logger.info("Downloading %s -> %s", url, dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        size = asyncio.run(fetch_to_file(url, dest, timeout=timeout))
    except DownloadError:
        dest.unlink(missing_ok=True)
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError) as err:
        dest.unlink(missing_ok=True)
        raise DownloadError(
            f"Download of {url} failed: {type(err).__name__}: {err}",
            context={"url": url},
        ) from err
    except OSError as err:
        dest.unlink(missing_ok=True)
        raise DownloadError(
            f"Could not write {dest}: {err}",
            context={"url": url, "dest": str(dest)},
            transient=False,
        ) from err
    if size == 0:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"Downloaded file from {url} is empty", context={"url": url})
    logger.info("Downloaded %d bytes to %s", size, dest)
    return dest


__all__ = ["download_file", "fetch_to_file"]
