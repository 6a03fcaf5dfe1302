"""
rdesktop command line construction.

Maps a connection profile onto rdesktop's argument grammar. Values are
passed through unchecked; the profile store is trusted.
"""

from typing import List, Optional, Sequence, Tuple

from .profile import ConnectionProfile


DEFAULT_CLIENT = "rdesktop"
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768

# (profile key, flag) for options that take the profile value verbatim
_VALUE_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("username", "-u"),
    ("domain", "-d"),
)

_NAMING_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("clientname", "-n"),
    ("exec", "-s"),
    ("execpath", "-c"),
    ("title", "-T"),
    ("keymap", "-k"),
)

_EARLY_SWITCHES: Tuple[Tuple[str, str], ...] = (
    ("console", "-0"),
    ("compression", "-z"),
    ("bitmapcaching", "-P"),
)

_LATE_SWITCHES: Tuple[Tuple[str, str], ...] = (
    ("hidedecorations", "-D"),
    ("nograbkeyboard", "-K"),
    ("noencryption", "-E"),
    ("syncnumlock", "-N"),
    ("rdp4", "-4"),
    ("rdp5", "-5"),
    ("nomousemotion", "-m"),
)

PASSWORD_FLAG = "-p"
REDACTED = "********"

# Every flag build_arguments emits that consumes the following token
_FLAGS_WITH_VALUE = frozenset(
    [flag for _, flag in _VALUE_OPTIONS + _NAMING_OPTIONS]
    + [PASSWORD_FLAG, "-r", "-g", "-a", "-x", "-X"]
)


def _add_values(argv: List[str], profile: ConnectionProfile, options: Sequence[Tuple[str, str]]) -> None:
    for key, flag in options:
        value = profile.get_string(key)
        if value:
            argv.extend([flag, value])


def _add_switches(argv: List[str], profile: ConnectionProfile, options: Sequence[Tuple[str, str]]) -> None:
    for key, flag in options:
        if profile.get_bool(key):
            argv.append(flag)


def build_arguments(
    profile: ConnectionProfile,
    socket_id: Optional[int] = None,
    client: str = DEFAULT_CLIENT,
    default_width: int = DEFAULT_WIDTH,
    default_height: int = DEFAULT_HEIGHT
) -> List[str]:
    """
    Build the rdesktop argument vector for a profile.

    Args:
        profile: Connection profile to read
        socket_id: Embedding surface id passed as ``-X``; None when the
            client runs detached
        client: Executable name placed first in the vector
        default_width: Width used when the profile has no resolution
        default_height: Height used when the profile has no resolution

    Returns:
        Argument vector starting with ``client`` and ending with the server
    """
    argv: List[str] = [client]

    _add_values(argv, profile, _VALUE_OPTIONS)

    password = profile.get_secret("password")
    if password:
        argv.extend([PASSWORD_FLAG, password])

    _add_values(argv, profile, _NAMING_OPTIONS)
    _add_switches(argv, profile, _EARLY_SWITCHES)

    sharefolder = profile.get_string("sharefolder")
    if sharefolder:
        argv.extend(["-r", f"disk:share={sharefolder}"])

    # Fullscreen, seamless and explicit geometry are mutually exclusive
    if profile.get_bool("fullscreen"):
        argv.append("-f")
    elif profile.get_bool("seamlessrdp"):
        argv.append("-A")
    else:
        width = profile.get_int("resolution_width", default_width)
        height = profile.get_int("resolution_height", default_height)
        argv.extend(["-g", f"{width}x{height}"])

    colordepth = profile.get_int("colordepth", 0)
    if colordepth != 0:
        argv.extend(["-a", str(colordepth)])

    experience = profile.get_string("experience")
    if experience:
        argv.extend(["-x", experience])

    # rdesktop accepts -r more than once; sound is independent of the share
    sound = profile.get_string("sound")
    if sound:
        argv.extend(["-r", f"sound:{sound}"])

    _add_switches(argv, profile, _LATE_SWITCHES)

    if socket_id is not None:
        argv.extend(["-X", str(socket_id)])

    server = profile.get_string("server")
    if server:
        argv.append(server)

    return argv


def redact_arguments(argv: Sequence[str]) -> List[str]:
    """
    Return a copy of ``argv`` with the password value masked, for logging.

    The vector is walked flag by flag so that an option value which happens
    to read ``-p`` is never taken for the password flag itself.
    """
    redacted = list(argv)
    index = 1
    while index < len(redacted):
        token = redacted[index]
        if token in _FLAGS_WITH_VALUE and index + 1 < len(redacted):
            if token == PASSWORD_FLAG:
                redacted[index + 1] = REDACTED
            index += 2
        else:
            index += 1
    return redacted
