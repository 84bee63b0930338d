"""Tests for the Info.plist descriptor."""

from __future__ import annotations

import plistlib

import pytest

from chmdocset.bundle.descriptor import BundleDescriptor, sanitize_identifier
from chmdocset.errors import BundleWriteError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Foo Bar", "FooBar"),
        ("win32_api-ref", "win32_api-ref"),
        ("a.b/c^d (e)!", "abc^de"),
        ("Ünïcode", "ncode"),
        ("", ""),
    ],
)
def test_sanitize_identifier(name, expected):
    assert sanitize_identifier(name) == expected


def _descriptor(**kw) -> BundleDescriptor:
    defaults = dict(identifier="io.ngs.documentation.FooBar", display_name="Foo Bar")
    defaults.update(kw)
    return BundleDescriptor(**defaults)


def test_render_contents():
    data = plistlib.loads(_descriptor(platform_family="win32").render())
    assert data == {
        "dashIndexFilePath": "Welcome.htm",
        "CFBundleIdentifier": "io.ngs.documentation.FooBar",
        "CFBundleName": "Foo Bar",
        "DocSetPlatformFamily": "win32",
        "isDashDocset": True,
    }


def test_platform_defaults_to_unknown():
    data = plistlib.loads(_descriptor().render())
    assert data["DocSetPlatformFamily"] == "unknown"


def test_render_is_xml_plist():
    rendered = _descriptor().render()
    assert rendered.startswith(b'<?xml version="1.0" encoding="UTF-8"?>')
    assert b"<key>dashIndexFilePath</key>" in rendered


def test_render_escapes_markup():
    data = plistlib.loads(_descriptor(display_name="C & <C++>").render())
    assert data["CFBundleName"] == "C & <C++>"


def test_descriptor_is_immutable():
    d = _descriptor()
    with pytest.raises(AttributeError):
        d.identifier = "other"


def test_write_creates_file(tmp_path):
    target = tmp_path / "Info.plist"
    _descriptor().write(target)
    assert plistlib.loads(target.read_bytes())["CFBundleName"] == "Foo Bar"
    assert list(tmp_path.iterdir()) == [target]


def test_write_replaces_existing(tmp_path):
    target = tmp_path / "Info.plist"
    target.write_text("old")
    _descriptor().write(target)
    assert target.read_bytes().startswith(b"<?xml")


def test_write_unwritable_destination(tmp_path):
    with pytest.raises(BundleWriteError):
        _descriptor().write(tmp_path / "missing" / "Info.plist")
