from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


class Archiver(ABC):
    """
    Interface for turning a skill directory into a single archive file.
    """

    @abstractmethod
    def archive(self, source_dir: Path, target: Path) -> Path:
        """
        Archive the contents of source_dir into target.

        Args:
            source_dir: Skill directory to archive
            target: Path of the archive to create

        Returns:
            Path of the written archive

        Raises:
            ArchiveError: If the archive could not be written
        """
        pass


class RevisionControl(ABC):
    """
    Interface for the version-control queries used by change detection.
    """

    # Working tree root; changed paths are reported relative to it
    root: Optional[Path]

    @abstractmethod
    def latest_tag(self) -> Optional[str]:
        """Most recent tag reachable from HEAD, or None when there is none."""
        pass

    @abstractmethod
    def has_ref(self, ref: str) -> bool:
        """Whether ref resolves locally."""
        pass

    @abstractmethod
    def fetch_ref(self, ref: str) -> None:
        """
        Fetch ref from the remote with depth 1.

        Raises:
            ChangeDetectionError: If the fetch fails
        """
        pass

    @abstractmethod
    def changed_files(self, since: str, until: str = "HEAD") -> List[str]:
        """
        Files that differ between the merge base of since/until and until.

        Raises:
            ChangeDetectionError: If the diff cannot be computed
        """
        pass


class ReleasePublisher(ABC):
    """
    Interface for creating a tagged release with attached assets.
    """

    @abstractmethod
    def publish(self, tag: str, assets: List[str], draft: bool = False) -> str:
        """
        Create a release for tag and upload assets.

        Returns:
            Public URL of the created release

        Raises:
            ReleaseError: If the release could not be created
        """
        pass
