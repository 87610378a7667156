"""Directory tree moves for installed plugin and theme packages."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

log = structlog.get_logger()


def move_tree(source: str | Path, destination: str | Path) -> bool:
    """Move ``source`` to ``destination``, merging into an existing directory.

    A missing destination is a plain move (copy-then-delete across volumes),
    unless it lies inside the source, in which case it is created and merged
    into like an existing one.

    An existing destination directory receives the source's contents, after
    which the source is removed. A destination nested inside the source is
    never copied into itself. Returns False on filesystem errors.
    """
    source = Path(source)
    destination = Path(destination)

    try:
        nested = destination.resolve()
        if not destination.exists():
            if not (source.is_dir() and nested.is_relative_to(source.resolve())):
                shutil.move(source, destination)
                return True
            # A directory cannot be moved into itself; merge into a fresh one.
            destination.mkdir(parents=True)

        elif source.is_file():
            shutil.copy2(source, destination)
            source.unlink()
            return True

        def _skip_destination(directory: str, names: list[str]) -> set[str]:
            return {name for name in names if (Path(directory) / name).resolve() == nested}

        shutil.copytree(source, destination, ignore=_skip_destination, dirs_exist_ok=True)
        if nested.is_relative_to(source.resolve()):
            for child in source.iterdir():
                if nested.is_relative_to(child.resolve()):
                    continue
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        else:
            shutil.rmtree(source)
        return True
    except OSError:
        log.warning("move_failed", source=str(source), destination=str(destination), exc_info=True)
        return False
