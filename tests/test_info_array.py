"""Tests for legacy info array and core version parsing."""

from pathlib import Path

import pytest

from addon_extractor.core.info_array import parse_core_version, parse_info_array


@pytest.fixture
def php_file(tmp_path: Path):
    """Write PHP source to a file and return its path."""

    def _write(source: str) -> Path:
        path = tmp_path / "source.php"
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestParseInfoArray:
    """Test parsing of $XInfo declarations."""

    def test_plugin_declaration(self, php_file) -> None:
        """Test a typical plugin declaration with nested arrays and comments."""
        path = php_file(
            """<?php if (!defined('APPLICATION')) exit();
// An example plugin
$PluginInfo['Example'] = array(
    'Name' => 'Example Plugin',
    'Description' => "It's an example.",   # inline comment
    'Version' => '1.0.3',
    'RequiredApplications' => array('Vanilla' => '2.1'),
    'MobileFriendly' => true,
    'SettingsPermission' => null,
    'Priority' => 5,
    /* trailing comma below */
    'Authors' => array('Jane', 'Joe'),
);

class ExamplePlugin extends Gdn_Plugin {}
"""
        )

        info = parse_info_array(path)

        assert info == {
            "Example": {
                "Name": "Example Plugin",
                "Description": "It's an example.",
                "Version": "1.0.3",
                "RequiredApplications": {"Vanilla": "2.1"},
                "MobileFriendly": True,
                "SettingsPermission": None,
                "Priority": 5,
                "Authors": ["Jane", "Joe"],
                "Variable": "PluginInfo",
            }
        }

    def test_short_array_syntax(self, php_file) -> None:
        """Test the [...] array syntax and other info variables."""
        path = php_file("<?php\n$LocaleInfo['de-DE'] = ['Locale' => 'de', 'Name' => 'Deutsch', 'Version' => 2.5];\n")

        info = parse_info_array(path)

        assert info == {"de-DE": {"Locale": "de", "Name": "Deutsch", "Version": 2.5, "Variable": "LocaleInfo"}}

    def test_concatenation_and_translation_calls(self, php_file) -> None:
        """Test string concatenation and t() wrappers."""
        path = php_file(
            "<?php\n$ThemeInfo['dark'] = array(\n"
            "    'Name' => 'Dark ' . 'Theme',\n"
            "    'Description' => t('A dark theme.'),\n"
            "    'Url' => \"https://example.com/\\$dark\",\n"
            ");\n"
        )

        info = parse_info_array(path)

        assert info["dark"]["Name"] == "Dark Theme"
        assert info["dark"]["Description"] == "A dark theme."
        assert info["dark"]["Url"] == "https://example.com/$dark"
        assert info["dark"]["Variable"] == "ThemeInfo"

    def test_skips_unparsable_declaration(self, php_file) -> None:
        """Test that a declaration using constants is skipped for a later one."""
        path = php_file(
            "<?php\n"
            "$ApplicationInfo['Broken'] = array('Version' => APPLICATION_VERSION);\n"
            "$ApplicationInfo['Dashboard'] = array('Name' => 'Dashboard', 'Version' => '2.0');\n"
        )

        info = parse_info_array(path)

        assert list(info) == ["Dashboard"]
        assert info["Dashboard"]["Variable"] == "ApplicationInfo"

    @pytest.mark.parametrize(
        "source",
        [
            "<?php\nclass Foo {}\n",
            "<?php\n$PluginInfo['x'] = 'not an array';\n",
            "<?php\n$PluginInfo['x'] = array('Name' => 'unterminated'\n",
            "<?php\n$PluginInfo['x'] = array('Name' => eval('1'));\n",
        ],
    )
    def test_returns_none_without_usable_declaration(self, php_file, source: str) -> None:
        """Test that files without a literal info array yield None."""
        assert parse_info_array(php_file(source)) is None

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that an unreadable file yields None."""
        assert parse_info_array(tmp_path / "missing.php") is None


class TestParseCoreVersion:
    """Test core version detection."""

    @pytest.mark.parametrize(
        "source",
        [
            "<?php\ndefine('APPLICATION', 'Vanilla');\ndefine('APPLICATION_VERSION', '2.8.1');\n",
            '<?php\ndefine( "APPLICATION_VERSION" , "2.8.1" );\n',
            "<?php\nclass Version { const APPLICATION_VERSION = '2.8.1'; }\n",
        ],
    )
    def test_finds_version(self, php_file, source: str) -> None:
        """Test the supported declaration styles."""
        assert parse_core_version(php_file(source)) == "2.8.1"

    def test_no_version(self, php_file) -> None:
        """Test that files without the constant yield None."""
        assert parse_core_version(php_file("<?php\ndefine('APPLICATION', 'Vanilla');\n")) is None
