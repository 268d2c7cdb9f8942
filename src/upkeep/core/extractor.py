"""Archive extraction into package directories."""

from pathlib import Path
import tarfile
import zipfile
import gzip
import shutil


class ExtractionError(Exception):
    """Error during extraction."""

    pass


def extract_archive(archive_path: Path, dest_dir: Path) -> Path:
    """Extract an archive into ``dest_dir``.

    Returns the directory containing extracted files.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    name = archive_path.name.lower()

    try:
        if name.endswith(".tar.gz") or name.endswith(".tgz"):
            with tarfile.open(archive_path, "r:gz") as tar:
                tar.extractall(dest_dir, filter="data")

        elif name.endswith(".tar.xz"):
            with tarfile.open(archive_path, "r:xz") as tar:
                tar.extractall(dest_dir, filter="data")

        elif name.endswith(".tar"):
            with tarfile.open(archive_path, "r:") as tar:
                tar.extractall(dest_dir, filter="data")

        elif name.endswith(".zip"):
            with zipfile.ZipFile(archive_path, "r") as zf:
                zf.extractall(dest_dir)

        elif name.endswith(".gz"):
            # Single gzipped file
            output_path = dest_dir / archive_path.stem
            with gzip.open(archive_path, "rb") as gz:
                with open(output_path, "wb") as out:
                    shutil.copyfileobj(gz, out)

        else:
            # Single-file package
            shutil.copy2(archive_path, dest_dir / archive_path.name)

    except (tarfile.TarError, zipfile.BadZipFile, gzip.BadGzipFile, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}")

    return dest_dir


def remove_tree(path: Path) -> None:
    """Remove a package directory."""
    if path.exists():
        shutil.rmtree(path)
