from .schema import Manifest, PackageResult, PluginMeta, SkillGroup
from .writer import ZipArchiver, archive_filename, sha256_file
from .manifest import assemble_manifest, load_manifest, write_manifest

__all__ = [
    "Manifest",
    "PackageResult",
    "PluginMeta",
    "SkillGroup",
    "ZipArchiver",
    "archive_filename",
    "sha256_file",
    "assemble_manifest",
    "load_manifest",
    "write_manifest",
]
