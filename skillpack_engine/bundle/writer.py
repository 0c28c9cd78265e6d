import hashlib
import zipfile
from pathlib import Path
from typing import Optional

from skillpack_engine.base import Archiver
from skillpack_engine.errors import ArchiveError


class ZipArchiver(Archiver):
    """Writes a skill directory into a deflated zip, paths relative to the skill root."""

    def archive(self, source_dir: Path, target: Path) -> Path:
        source_dir = Path(source_dir)
        target = Path(target)
        if not source_dir.is_dir():
            raise ArchiveError(f"Skill directory missing: {source_dir}")

        target.parent.mkdir(parents=True, exist_ok=True)
        files = sorted(p for p in source_dir.rglob("*") if p.is_file() and p.resolve() != target.resolve())

        try:
            with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zipf:
                for file_path in files:
                    zipf.write(file_path, file_path.relative_to(source_dir).as_posix())
        except (OSError, zipfile.BadZipFile) as e:
            target.unlink(missing_ok=True)
            raise ArchiveError(f"Failed to create zip for {source_dir}: {e}") from e

        return target


def archive_filename(name: str, version: Optional[str] = None) -> str:
    """Archive file name for a skill, e.g. my-skill-v1.2.0.zip."""
    version_suffix = f"-v{version}" if version else ""
    return f"{name}{version_suffix}.zip"


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()
