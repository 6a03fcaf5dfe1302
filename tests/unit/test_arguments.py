"""
Unit tests for rdesktop argument construction.
"""

import pytest

from rdesktop_plugin.arguments import build_arguments, redact_arguments, REDACTED
from rdesktop_plugin.profile import ConnectionProfile


def _pairs(argv, flag):
    """Return every value following ``flag`` in ``argv``."""
    return [argv[i + 1] for i, token in enumerate(argv[:-1]) if token == flag]


class TestBuildArguments:
    """Test cases for build_arguments."""

    def test_server_only_embedded(self):
        """Test the minimal command line of an embedded session."""
        profile = ConnectionProfile({"server": "rdp.example.com"})

        argv = build_arguments(profile, socket_id=77)

        assert argv == ["rdesktop", "-g", "1024x768", "-X", "77", "rdp.example.com"]

    def test_server_only_detached(self):
        """Test that no -X is emitted without a socket id."""
        profile = ConnectionProfile({"server": "rdp.example.com"})

        argv = build_arguments(profile)

        assert argv == ["rdesktop", "-g", "1024x768", "rdp.example.com"]
        assert "-X" not in argv

    def test_client_first_server_last(self):
        """Test ordering with many options set."""
        profile = ConnectionProfile({
            "server": "10.0.0.5:3390",
            "username": "alice",
            "domain": "CORP",
            "title": "Build box",
            "keymap": "de",
            "compression": True,
            "rdp5": True,
        })

        argv = build_arguments(profile, socket_id=5, client="/usr/local/bin/rdesktop")

        assert argv[0] == "/usr/local/bin/rdesktop"
        assert argv[-1] == "10.0.0.5:3390"
        assert argv.index("-X") == len(argv) - 3

    def test_value_options(self):
        """Test options that carry the profile value."""
        profile = ConnectionProfile({
            "server": "srv",
            "username": "alice",
            "domain": "CORP",
            "clientname": "thinclient",
            "exec": "notepad.exe",
            "execpath": "C:\\Temp",
            "title": "Remote",
            "keymap": "fr-be",
        })

        argv = build_arguments(profile)

        assert _pairs(argv, "-u") == ["alice"]
        assert _pairs(argv, "-d") == ["CORP"]
        assert _pairs(argv, "-n") == ["thinclient"]
        assert _pairs(argv, "-s") == ["notepad.exe"]
        assert _pairs(argv, "-c") == ["C:\\Temp"]
        assert _pairs(argv, "-T") == ["Remote"]
        assert _pairs(argv, "-k") == ["fr-be"]

    def test_password_from_secret_store(self):
        """Test that the password is read through the secret accessor."""
        profile = ConnectionProfile({"server": "srv"}, secrets={"password": "s3cret"})

        argv = build_arguments(profile)

        assert _pairs(argv, "-p") == ["s3cret"]

    def test_empty_strings_are_omitted(self):
        """Test that empty values contribute nothing."""
        profile = ConnectionProfile({
            "server": "srv",
            "username": "",
            "experience": "",
            "sound": "",
            "sharefolder": "",
        })

        argv = build_arguments(profile)

        assert argv == ["rdesktop", "-g", "1024x768", "srv"]

    @pytest.mark.parametrize("key,flag", [
        ("console", "-0"),
        ("compression", "-z"),
        ("bitmapcaching", "-P"),
        ("hidedecorations", "-D"),
        ("nograbkeyboard", "-K"),
        ("noencryption", "-E"),
        ("syncnumlock", "-N"),
        ("rdp4", "-4"),
        ("rdp5", "-5"),
        ("nomousemotion", "-m"),
    ])
    def test_boolean_switches(self, key, flag):
        """Test each boolean toggle maps to its flag."""
        on = build_arguments(ConnectionProfile({"server": "srv", key: True}))
        off = build_arguments(ConnectionProfile({"server": "srv", key: False}))

        assert flag in on
        assert flag not in off

    def test_fullscreen_suppresses_geometry_and_seamless(self):
        """Test that fullscreen wins over seamless and resolution."""
        profile = ConnectionProfile({
            "server": "srv",
            "fullscreen": True,
            "seamlessrdp": True,
            "resolution_width": 1280,
            "resolution_height": 1024,
        })

        argv = build_arguments(profile)

        assert "-f" in argv
        assert "-A" not in argv
        assert "-g" not in argv

    def test_seamless_suppresses_geometry(self):
        """Test that seamless mode wins over resolution."""
        profile = ConnectionProfile({
            "server": "srv",
            "seamlessrdp": True,
            "resolution_width": 1280,
            "resolution_height": 1024,
        })

        argv = build_arguments(profile)

        assert "-A" in argv
        assert "-g" not in argv
        assert "-f" not in argv

    def test_explicit_resolution(self):
        """Test geometry from the profile, including string storage."""
        profile = ConnectionProfile({
            "server": "srv",
            "resolution_width": "1600",
            "resolution_height": 900,
        })

        argv = build_arguments(profile)

        assert _pairs(argv, "-g") == ["1600x900"]

    def test_configured_default_resolution(self):
        """Test the geometry fallback can be overridden."""
        argv = build_arguments(
            ConnectionProfile({"server": "srv"}),
            default_width=800,
            default_height=600
        )

        assert _pairs(argv, "-g") == ["800x600"]

    def test_share_folder_and_sound_both_use_r(self):
        """Test that -r is emitted once for the share and once for sound."""
        profile = ConnectionProfile({
            "server": "srv",
            "sharefolder": "media",
            "sound": "remote",
        })

        argv = build_arguments(profile)

        assert _pairs(argv, "-r") == ["disk:share=media", "sound:remote"]

    def test_colordepth(self):
        """Test color depth is emitted when nonzero."""
        assert _pairs(build_arguments(ConnectionProfile({"server": "srv", "colordepth": "24"})), "-a") == ["24"]
        assert "-a" not in build_arguments(ConnectionProfile({"server": "srv", "colordepth": 0}))
        assert "-a" not in build_arguments(ConnectionProfile({"server": "srv"}))

    def test_experience_passed_verbatim(self):
        """Test experience codes are not interpreted."""
        argv = build_arguments(ConnectionProfile({"server": "srv", "experience": "0x8F"}))

        assert _pairs(argv, "-x") == ["0x8F"]

    def test_missing_server(self):
        """Test that a profile without server ends at the last flag."""
        argv = build_arguments(ConnectionProfile({"username": "alice"}), socket_id=3)

        assert argv[-2:] == ["-X", "3"]


class TestRedactArguments:
    """Test cases for redact_arguments."""

    def test_password_is_masked(self):
        """Test the value after -p is replaced."""
        argv = ["rdesktop", "-u", "alice", "-p", "s3cret", "srv"]

        redacted = redact_arguments(argv)

        assert redacted == ["rdesktop", "-u", "alice", "-p", REDACTED, "srv"]
        assert argv[4] == "s3cret"

    def test_without_password(self):
        """Test vectors without -p are returned unchanged."""
        argv = ["rdesktop", "-g", "1024x768", "srv"]

        assert redact_arguments(argv) == argv

    def test_option_value_that_looks_like_password_flag(self):
        """Test a value of '-p' does not shift the mask off the password."""
        profile = ConnectionProfile(
            {"server": "srv", "username": "-p", "title": "-p"},
            {"password": "hunter2"}
        )

        redacted = redact_arguments(build_arguments(profile))

        assert "hunter2" not in redacted
        assert redacted[:5] == ["rdesktop", "-u", "-p", "-p", REDACTED]
        assert redacted[5:7] == ["-T", "-p"]

    def test_trailing_password_flag_without_value(self):
        """Test a dangling -p at the end is left as is."""
        assert redact_arguments(["rdesktop", "-p"]) == ["rdesktop", "-p"]
