from __future__ import annotations

from dataclasses import dataclass
import mimetypes
from pathlib import Path

SUPPORTED_EXTENSIONS = {".txt", ".md"}


@dataclass(frozen=True)
class LoadedFile:
    title: str
    filename: str
    filepath: str
    text: str
    size: int
    mime_type: str


def _guess_mime_type(path: Path) -> str:
    if path.suffix.lower() == ".md":
        return "text/markdown"
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "text/plain"


def load_files(
    source_dir: Path,
    supported_extensions: set[str] | None = None,
) -> list[LoadedFile]:
    if not source_dir.exists():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")
    if not source_dir.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {source_dir}")

    extensions = supported_extensions or SUPPORTED_EXTENSIONS
    files = sorted(
        path
        for path in source_dir.rglob("*")
        if path.is_file()
        and path.suffix.lower() in extensions
        and not any(part.startswith(".") for part in path.relative_to(source_dir).parts)
    )

    loaded: list[LoadedFile] = []
    for path in files:
        raw = path.read_bytes()
        loaded.append(
            LoadedFile(
                title=path.stem,
                filename=path.relative_to(source_dir).as_posix(),
                filepath=str(path.resolve()),
                text=raw.decode("utf-8"),
                size=len(raw),
                mime_type=_guess_mime_type(path),
            )
        )

    if not loaded:
        raise ValueError(
            f"No supported documents found in {source_dir} "
            f"(supported: {sorted(extensions)})"
        )

    return loaded
