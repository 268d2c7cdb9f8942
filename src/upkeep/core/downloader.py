"""Download functionality with progress reporting."""

from pathlib import Path
import httpx
from rich.progress import (
    Progress,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
)


class DownloadError(Exception):
    """Error during download."""

    pass


def download_file(
    url: str,
    dest: Path,
    filename: str | None = None,
    show_progress: bool = True,
) -> Path:
    """Download a file from URL into ``dest``.

    Args:
        url: URL to download from
        dest: Destination directory
        filename: Filename to save as (defaults to URL filename)
        show_progress: Whether to show progress bar

    Returns:
        Path to downloaded file
    """
    dest.mkdir(parents=True, exist_ok=True)

    if filename is None:
        filename = url.split("/")[-1]

    file_path = dest / filename

    try:
        with httpx.stream("GET", url, follow_redirects=True, timeout=60.0) as response:
            if response.status_code != 200:
                raise DownloadError(
                    f"Failed to download {url}: HTTP {response.status_code}"
                )

            total = int(response.headers.get("content-length", 0))

            if show_progress and total > 0:
                with Progress(
                    "[progress.description]{task.description}",
                    BarColumn(),
                    DownloadColumn(),
                    TransferSpeedColumn(),
                    TimeRemainingColumn(),
                ) as progress:
                    task = progress.add_task(f"Downloading {filename}", total=total)

                    with open(file_path, "wb") as f:
                        for chunk in response.iter_bytes(chunk_size=8192):
                            f.write(chunk)
                            progress.update(task, advance=len(chunk))
            else:
                with open(file_path, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
    except httpx.HTTPError as e:
        raise DownloadError(f"Failed to download {url}: {e}")

    return file_path


def fetch_text(url: str, timeout: float = 30.0) -> str:
    """Fetch a small text document such as a package index."""
    try:
        response = httpx.get(url, follow_redirects=True, timeout=timeout)
    except httpx.HTTPError as e:
        raise DownloadError(f"Failed to fetch {url}: {e}")

    if response.status_code != 200:
        raise DownloadError(f"Failed to fetch {url}: HTTP {response.status_code}")
    return response.text
