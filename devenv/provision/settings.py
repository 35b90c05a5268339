"""Editor settings patcher.

Merges forced top-level keys into the editor's ``settings.json`` while
keeping every other key. The editor writes JSON with comments and trailing
commas, so those are tolerated when reading; they are not preserved when
the document is written back. A file that still cannot be parsed is copied
to a timestamped backup before it is replaced.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from devenv.config import SETTINGS_BACKUP_SUFFIX, SETTINGS_INDENT
from devenv.exceptions import SettingsError

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "{}"
# The editor may save settings.json with a byte-order mark.
SETTINGS_ENCODING = "utf-8-sig"


@dataclass
class PatchOutcome:
    """Result of :func:`patch_settings`."""

    changed: bool
    document: dict[str, Any] = field(default_factory=dict)
    backed_up: Path | None = None
    recovered: bool = False


def strip_jsonc(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas.

    String literals are left untouched, including any comment markers
    inside them.

    Examples
    --------
    >>> strip_jsonc('{"a": 1, // note\\n "b": "http://x",}')
    '{"a": 1, \\n "b": "http://x"}'
    """
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return _drop_trailing_commas("".join(out))


def _drop_trailing_commas(text: str) -> str:
    out: list[str] = []
    in_string = False
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_settings(text: str) -> dict[str, Any]:
    """Parse settings text into a top-level mapping.

    Blank text is an empty document.

    Raises
    ------
    ValueError
        If the text is not JSON(C) or its top level is not an object.
    """
    if not text.strip():
        return {}
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        document = json.loads(strip_jsonc(text))
    if not isinstance(document, dict):
        raise ValueError(
            f"settings top level is {type(document).__name__}, expected object"
        )
    return document


def _backup(path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    target = path.with_name(f"{path.name}.{stamp}{SETTINGS_BACKUP_SUFFIX}")
    counter = 1
    while target.exists():
        target = path.with_name(
            f"{path.name}.{stamp}-{counter}{SETTINGS_BACKUP_SUFFIX}"
        )
        counter += 1
    shutil.copy2(path, target)
    return target


def settings_satisfied(path: Path, updates: Mapping[str, Any]) -> bool:
    """Return True if ``path`` parses and already holds every update value.

    Pure check: never creates, writes or raises.
    """
    try:
        document = parse_settings(Path(path).read_text(encoding=SETTINGS_ENCODING))
    except (OSError, ValueError):
        return False
    return all(key in document and document[key] == value for key, value in updates.items())


def patch_settings(
    path: Path,
    updates: Mapping[str, Any],
    *,
    backup: bool = True,
    dry_run: bool = False,
) -> PatchOutcome:
    r"""Force ``updates`` into the settings document stored at ``path``.

    Parameters
    ----------
    path : Path
        Settings file, e.g. ``%APPDATA%\Code\User\settings.json``.
    updates : Mapping[str, Any]
        Top-level keys to add or overwrite.
    backup : bool, optional
        Copy an unparsable file aside before replacing it (default True).
    dry_run : bool, optional
        Compute the outcome without touching the filesystem.

    Returns
    -------
    PatchOutcome
        ``changed`` is False when the file parsed and already held every
        update value; nothing is written in that case.

    Raises
    ------
    SettingsError
        When the directory, file or backup cannot be created, read or
        written.

    Examples
    --------
    >>> import tempfile, pathlib
    >>> p = pathlib.Path(tempfile.mkdtemp()) / "User" / "settings.json"
    >>> patch_settings(p, {"x": True}).document
    {'x': True}
    """
    path = Path(path)
    try:
        if not dry_run:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not path.exists():
                path.write_text(EMPTY_DOCUMENT, encoding="utf-8")
                logger.info("Created %s", path)
        raw = path.read_bytes() if path.exists() else b""
    except OSError as err:
        raise SettingsError(
            f"Cannot prepare settings file {path}: {err}", context={"path": str(path)}
        ) from err

    backed_up: Path | None = None
    recovered = False
    try:
        document = parse_settings(raw.decode(SETTINGS_ENCODING))
    except ValueError as err:  # includes UnicodeDecodeError
        logger.warning("Settings file %s is not valid JSON (%s); starting fresh", path, err)
        recovered = True
        document = {}
        if backup and not dry_run:
            try:
                backed_up = _backup(path)
            except OSError as copy_err:
                raise SettingsError(
                    f"Cannot back up unparsable settings {path}: {copy_err}",
                    context={"path": str(path)},
                ) from copy_err
            logger.warning("Previous settings saved to %s", backed_up)

    if not recovered and all(
        key in document and document[key] == value for key, value in updates.items()
    ):
        return PatchOutcome(changed=False, document=document)

    for key, value in updates.items():
        document[key] = value

    if not dry_run:
        try:
            path.write_text(
                json.dumps(document, indent=SETTINGS_INDENT, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as err:
            raise SettingsError(
                f"Cannot write settings file {path}: {err}", context={"path": str(path)}
            ) from err
        logger.info("Updated %s (%s)", path, ", ".join(updates))
    return PatchOutcome(
        changed=True, document=document, backed_up=backed_up, recovered=recovered
    )


__all__ = [
    "PatchOutcome",
    "parse_settings",
    "patch_settings",
    "settings_satisfied",
    "strip_jsonc",
]
