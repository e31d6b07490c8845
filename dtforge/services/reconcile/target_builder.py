"""Builds Targets from local directory trees. Pure filesystem reads, no network."""

from pathlib import Path

from dtforge.services.reconcile.types import FileEntry, Target

# Directories never uploaded. Symlinks are skipped too.
SKIPPED_DIRECTORIES: frozenset[str] = frozenset({".git"})


def collect_files(root: Path) -> list[FileEntry]:
    """
    Walk a directory and return every file as a FileEntry.

    Entries are ordered by sorted relative path so repeated runs report in
    the same order. Paths use forward slashes regardless of platform.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")

    entries: list[FileEntry] = []
    _walk(root, root, entries)
    entries.sort(key=lambda e: e.path)
    return entries


def _walk(root: Path, directory: Path, entries: list[FileEntry]) -> None:
    for item in sorted(directory.iterdir(), key=lambda p: p.name):
        if item.is_symlink():
            continue
        if item.is_dir():
            if item.name in SKIPPED_DIRECTORIES:
                continue
            _walk(root, item, entries)
        elif item.is_file():
            entries.append(
                FileEntry(path=item.relative_to(root).as_posix(), content=item.read_bytes())
            )


def build_target(
    repository_name: str,
    local_dir: Path | None,
    branch: str | None,
    description: str = "",
    visibility: str = "public",
) -> Target:
    """Build a Target whose file set mirrors `local_dir` (empty if None)."""
    files = collect_files(local_dir) if local_dir is not None else []
    return Target(
        repository_name=repository_name,
        branch=branch,
        files=tuple(files),
        description=description,
        visibility=visibility,
    )
