"""The supported ini dialects and their reading/writing presets."""

from enum import Enum
from .args import Parameters, WriteParameters


class IniFileType(Enum):
    """Ini dialect."""

    STANDARD = "standard"
    PYTHON_STYLE = "python"
    SAMBA_STYLE = "samba"
    MYSQL_STYLE = "mysql"
    WINDOWS_STYLE = "windows"


_READ_PRESETS: dict[IniFileType, dict] = {
    IniFileType.STANDARD: {},
    IniFileType.PYTHON_STYLE: {
        "comment_delimiters": (";", "#"),
        "assign_delimiters": ":",
        "accept_comment_after_key": False,
    },
    IniFileType.SAMBA_STYLE: {
        "comment_delimiters": (";", "#"),
        "accept_comment_after_key": False,
        "line_continuation": True,
    },
    IniFileType.MYSQL_STYLE: {
        "comment_delimiters": "#",
        "assign_delimiters": (":", "="),
        "accept_comment_after_key": False,
        "accept_no_assignment_operator": True,
    },
    IniFileType.WINDOWS_STYLE: {
        "consume_all_key_text": True,
    },
}

_WRITE_PRESETS: dict[IniFileType, dict] = {
    IniFileType.STANDARD: {},
    IniFileType.PYTHON_STYLE: {"assign_delimiter": ":", "comment_delimiter": "#"},
    IniFileType.SAMBA_STYLE: {"assign_delimiter": "=", "comment_delimiter": "#"},
    IniFileType.MYSQL_STYLE: {"assign_delimiter": "=", "comment_delimiter": "#"},
    IniFileType.WINDOWS_STYLE: {"quote_when_needed": False},
}


def reader_parameters(file_type: IniFileType) -> Parameters:
    """Create fresh reading parameters for a dialect.

    Args:
        file_type (IniFileType): The dialect.

    Returns:
        Parameters: New Parameters, safe to modify.
    """
    return Parameters(**_READ_PRESETS[IniFileType(file_type)])


def writer_parameters(file_type: IniFileType) -> WriteParameters:
    """Create fresh writing parameters for a dialect.

    Args:
        file_type (IniFileType): The dialect.

    Returns:
        WriteParameters: New WriteParameters, safe to modify.
    """
    return WriteParameters(**_WRITE_PRESETS[IniFileType(file_type)])
