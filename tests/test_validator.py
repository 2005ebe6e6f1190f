"""Tests for addon checks and record schema validation."""

import pytest
from jsonschema import ValidationError

from addon_extractor.core.locale import set_translations, translate
from addon_extractor.core.types import AddonType, ScanEntry
from addon_extractor.core.validator import (
    check_addon,
    check_required_fields,
    validate_addon_record,
    validate_addon_record_with_error_details,
)


def _entry(base: str = "myplugin", name: str = "/addon.json") -> ScanEntry:
    return ScanEntry(Name=name, Pattern=name, Path="/tmp/x", Base=base, ArchivePath=f"{base}{name}")


def _info(key: str = "myplugin", variable: str = "PluginInfo", **overrides) -> dict:
    fields = {"Description": "Does things.", "Version": "1.0", "License": "MIT", "Variable": variable}
    fields.update(overrides)
    return {key: fields}


class TestCheckRequiredFields:
    """Test required field checks."""

    def test_all_present(self) -> None:
        """Test that a complete declaration has no problems."""
        assert check_required_fields({"Description": "d", "Version": "1", "License": "MIT"}) == []

    def test_reports_each_missing_field(self) -> None:
        """Test one message per missing or blank field, in field order."""
        assert check_required_fields({"Description": "  ", "Version": None}) == [
            "Description is required.",
            "Version is required.",
            "License is required.",
        ]

    def test_uses_translations(self) -> None:
        """Test that messages go through the translation table."""
        set_translations({"ValidateRequired": "%s fehlt.", "Version": "Versionsnummer"})

        assert check_required_fields({"Description": "d", "License": "MIT"}) == ["Versionsnummer fehlt."]
        assert translate("License") == "License"


class TestCheckAddon:
    """Test candidate checks."""

    def test_valid_candidate(self) -> None:
        """Test that a complete candidate in a matching folder passes."""
        assert check_addon(_info(), _entry()) == []

    @pytest.mark.parametrize("info", [None, {}, {"myplugin": "not a mapping"}])
    def test_unparsable_candidate(self, info) -> None:
        """Test that missing parser output is reported."""
        assert check_addon(info, _entry()) == ["Could not parse addon info array."]

    def test_folder_match_is_case_insensitive(self) -> None:
        """Test that folder and key are compared case-insensitively."""
        assert check_addon(_info("MyPlugin"), _entry("myplugin")) == []

    def test_key_mismatch(self) -> None:
        """Test that a plugin in a differently named folder fails."""
        messages = check_addon(_info("myplugin"), _entry("other", "/class.myplugin.plugin.php"))
        assert messages == ["/class.myplugin.plugin.php: The addon's key is not the same as its folder name."]

    def test_theme_exempt_from_key_match(self) -> None:
        """Test that themes may live in a differently named folder."""
        assert check_addon(_info("mytheme", "ThemeInfo"), _entry("mytheme-v2", "/about.php")) == []

    def test_collects_every_problem(self) -> None:
        """Test that field and folder problems are reported together."""
        messages = check_addon(_info("myplugin", Version=""), _entry(""))
        assert messages == [
            "Version is required.",
            "/addon.json: The addon's key is not the same as its folder name.",
        ]


class TestValidateAddonRecord:
    """Test record schema validation."""

    @pytest.fixture
    def record(self) -> dict:
        return {
            "AddonKey": "myplugin",
            "AddonTypeID": AddonType.PLUGIN,
            "Name": "My Plugin",
            "Version": "1.0",
            "License": "MIT",
            "Requirements": "{}",
            "Path": "/uploads/myplugin.zip",
            "MD5": "0" * 32,
            "FileSize": 10,
            "Checked": True,
        }

    def test_valid_record(self, record: dict) -> None:
        """Test that a complete record passes."""
        validate_addon_record(record)
        assert validate_addon_record_with_error_details(record) == (True, None)

    def test_missing_checked(self, record: dict) -> None:
        """Test that a record must be marked as checked."""
        del record["Checked"]

        with pytest.raises(ValidationError):
            validate_addon_record(record)

    def test_unknown_type(self, record: dict) -> None:
        """Test that the type must be a known addon type."""
        record["AddonTypeID"] = 3

        is_valid, error_msg = validate_addon_record_with_error_details(record)

        assert not is_valid
        assert "AddonTypeID" in error_msg
