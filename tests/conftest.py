"""Shared fixtures for building addon archives on the fly."""

import json
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from addon_extractor.core.locale import set_translations

ArchiveEntries = list[tuple[str, str | bytes]]


def write_zip(path: Path, entries: ArchiveEntries) -> Path:
    """Write a zip archive with entries in the given order."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries:
            zf.writestr(name, content)
    return path


def manifest(**fields) -> str:
    """Serialize an addon.json manifest."""
    return json.dumps(fields)


def info_array(variable: str, key: str, **fields: str) -> str:
    """Render a legacy PHP info array declaration."""
    items = ",\n".join(f"    '{name}' => '{value}'" for name, value in fields.items())
    return f"<?php\n${variable}['{key}'] = array(\n{items}\n);\n"


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[[str, ArchiveEntries], Path]:
    """Factory fixture: make_zip('name.zip', [(entry, content), ...])."""

    def _make(name: str, entries: ArchiveEntries) -> Path:
        return write_zip(tmp_path / name, entries)

    return _make


@pytest.fixture
def plugin_zip(make_zip) -> Path:
    """A valid plugin declared with an addon.json manifest."""
    return make_zip(
        "myplugin.zip",
        [
            ("myplugin/", b""),
            ("myplugin/class.myplugin.plugin.php", "<?php\nclass MyPlugin {}\n"),
            (
                "myplugin/addon.json",
                manifest(
                    key="myplugin",
                    type="plugin",
                    name="My Plugin",
                    description="Does plugin things.",
                    version="1.2.0",
                    license="GPL-2.0-only",
                    requiredPlugins=["foo", "bar"],
                    requiredApplications="not-a-list",
                ),
            ),
        ],
    )


@pytest.fixture(autouse=True)
def reset_translations():
    """Make sure no test leaks a custom translation table."""
    yield
    set_translations({})
