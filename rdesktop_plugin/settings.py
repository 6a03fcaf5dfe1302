"""
Settings schema exposed to the host.

The host renders these entries in its connection editor and stores the
resulting values in the connection profile under the same keys.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class SettingType(Enum):
    """Setting widget types understood by the host."""
    SERVER = "server"
    TEXT = "text"
    PASSWORD = "password"
    CHECK = "check"
    SELECT = "select"
    COMBO = "combo"
    FOLDER = "folder"
    RESOLUTION = "resolution"


# (value, label) pairs; value is what ends up in the profile
COLORDEPTH_LIST: List[Tuple[str, str]] = [
    ("8", "256 colors (8 bpp)"),
    ("15", "High color (15 bpp)"),
    ("16", "High color (16 bpp)"),
    ("24", "True color (24 bpp)"),
    ("32", "True color (32 bpp)"),
]

EXPERIENCE_LIST: List[Tuple[str, str]] = [
    ("", "Default"),
    ("m", "Modem (no wallpaper, full window drag, animations, theming)"),
    ("b", "Broadband (remove wallpaper)"),
    ("l", "LAN (show all details)"),
    ("0x8F", "Modem with font smoothing"),
    ("0x81", "Broadband with font smoothing"),
    ("0x80", "LAN with font smoothing"),
    ("0x01", "Disable wallpaper"),
    ("0x02", "Disable full window drag"),
    ("0x03", "Disable wallpaper, full window drag"),
    ("0x04", "Disable animations"),
    ("0x05", "Disable animations, wallpaper"),
    ("0x06", "Disable animations, full window drag"),
    ("0x07", "Disable animations, wallpaper, full window drag"),
    ("0x08", "Disable theming"),
    ("0x09", "Disable theming, wallpaper"),
    ("0x0a", "Disable theming, full window drag"),
    ("0x0b", "Disable theming, wallpaper, full window drag"),
    ("0x0c", "Disable theming, animations"),
    ("0x0d", "Disable theming, animations, wallpaper"),
    ("0x0e", "Disable theming, animations, full window drag"),
    ("0x0f", "Disable everything"),
]

SOUND_LIST: List[Tuple[str, str]] = [
    ("off", "Off"),
    ("local", "Local"),
    ("local,11025,1", "Local - low quality"),
    ("local,22050,2", "Local - medium quality"),
    ("local,44100,2", "Local - high quality"),
    ("remote", "Remote"),
]

KEYMAP_LIST: List[str] = (
    "ar,cs,da,de,de-ch,en-dv,en-gb,en-us,es,et,fi,fo,fr,fr-be,fr-ca,fr-ch,"
    "he,hr,hu,is,it,ja,ko,lt,lv,mk,nl,nl-be,no,pl,pt,pt-br,ru,sl,sv,th,tr"
).split(",")


@dataclass(frozen=True)
class ProtocolSetting:
    """
    One entry of the host's connection editor.

    SERVER, PASSWORD and RESOLUTION entries carry no key of their own; the
    host stores them under ``server``, ``password`` and
    ``resolution_width`` / ``resolution_height``.
    """
    type: SettingType
    key: Optional[str] = None
    label: Optional[str] = None
    default: Union[bool, str, None] = False
    values: Optional[Union[List[Tuple[str, str]], List[str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert setting to dictionary."""
        values: Any = None
        if self.values is not None:
            values = [list(v) if isinstance(v, tuple) else v for v in self.values]
        return {
            "type": self.type.value,
            "key": self.key,
            "label": self.label,
            "default": self.default,
            "values": values,
        }


BASIC_SETTINGS: Tuple[ProtocolSetting, ...] = (
    ProtocolSetting(SettingType.SERVER),
    ProtocolSetting(SettingType.TEXT, "username", "User name"),
    ProtocolSetting(SettingType.PASSWORD),
    ProtocolSetting(SettingType.TEXT, "domain", "Domain"),
    ProtocolSetting(SettingType.RESOLUTION),
    ProtocolSetting(SettingType.SELECT, "colordepth", "Color depth", values=COLORDEPTH_LIST),
    ProtocolSetting(SettingType.SELECT, "experience", "Experience", values=EXPERIENCE_LIST),
    ProtocolSetting(SettingType.SELECT, "sound", "Sound", values=SOUND_LIST),
    ProtocolSetting(SettingType.FOLDER, "sharefolder", "Share folder"),
)

ADVANCED_SETTINGS: Tuple[ProtocolSetting, ...] = (
    ProtocolSetting(SettingType.TEXT, "title", "Window title"),
    ProtocolSetting(SettingType.TEXT, "clientname", "Client name"),
    ProtocolSetting(SettingType.TEXT, "exec", "Startup program"),
    ProtocolSetting(SettingType.TEXT, "execpath", "Startup path"),
    ProtocolSetting(SettingType.COMBO, "keymap", "Keyboard map", values=KEYMAP_LIST),
    ProtocolSetting(SettingType.CHECK, "fullscreen", "Fullscreen", True),
    ProtocolSetting(SettingType.CHECK, "seamlessrdp", "Seamless RDP", False),
    ProtocolSetting(SettingType.CHECK, "console", "Attach to console (Windows 2003 / 2003 R2)", False),
    ProtocolSetting(SettingType.CHECK, "compression", "RDP datastream compression", True),
    ProtocolSetting(SettingType.CHECK, "bitmapcaching", "Bitmap caching", False),
    ProtocolSetting(SettingType.CHECK, "nomousemotion", "Don't send mouse motion events", True),
    ProtocolSetting(SettingType.CHECK, "hidedecorations", "Hide WM decorations", False),
    ProtocolSetting(SettingType.CHECK, "detached", "Detached window", True),
    ProtocolSetting(SettingType.CHECK, "nograbkeyboard", "Don't grab keyboard", False),
    ProtocolSetting(SettingType.CHECK, "rdp4", "Force RDP version 4", True),
    ProtocolSetting(SettingType.CHECK, "rdp5", "Force RDP version 5", False),
    ProtocolSetting(SettingType.CHECK, "syncnumlock", "Numlock synchronization", True),
    ProtocolSetting(SettingType.CHECK, "noencryption", "Disable encryption", False),
)


def default_values() -> Dict[str, Any]:
    """
    Profile defaults implied by the schema.

    Only CHECK entries carry a default; every other key starts unset.
    """
    return {
        setting.key: bool(setting.default)
        for setting in BASIC_SETTINGS + ADVANCED_SETTINGS
        if setting.type is SettingType.CHECK and setting.key
    }


def schema_to_dict() -> Dict[str, List[Dict[str, Any]]]:
    """Serialize both settings lists, e.g. for the command line."""
    return {
        "basic": [s.to_dict() for s in BASIC_SETTINGS],
        "advanced": [s.to_dict() for s in ADVANCED_SETTINGS],
    }
