"""In-memory module archive creation"""

import asyncio
import tarfile
from io import BytesIO
from pathlib import Path
from typing import Union

from ..api.exceptions import ArchiveError


def create_archive(source_dir: Union[str, Path]) -> bytes:
    """Pack a directory into a gzip-compressed tar archive

    Every file under ``source_dir`` is included, stored relative to it.

    Args:
        source_dir: Module root directory

    Returns:
        Archive bytes

    Raises:
        ArchiveError: If the directory is missing or cannot be read
    """
    root = Path(source_dir)
    if not root.is_dir():
        raise ArchiveError(f"Module directory not found: {root}")

    output = BytesIO()
    try:
        with tarfile.open(fileobj=output, mode="w:gz") as tar:
            for path in sorted(root.rglob("*")):
                if path.is_file():
                    tar.add(str(path), arcname=path.relative_to(root).as_posix())
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Failed to create archive of {root}: {e}")

    return output.getvalue()


async def create_archive_async(source_dir: Union[str, Path]) -> bytes:
    """Run create_archive in the default executor"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, create_archive, source_dir)
