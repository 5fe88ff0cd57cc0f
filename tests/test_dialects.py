from .base import Base
from syncini import IniFileType
from syncini.exceptions_warnings import ParseError, TypeConversionError
from datetime import date
from decimal import Decimal
import pytest

parse_error = pytest.raises(ParseError)
conversion_error = pytest.raises(TypeConversionError)

ALL_TYPES = tuple(IniFileType)


class TestDialects:

    # ----------
    # set parameters to test
    # ----------

    # -----
    # basic access and type conversion, in every dialect
    # -----
    test_parameters = []
    basic_tests = [
        {"opt_val": "Test", "opt_result": "Test"},
        {"opt_val": "", "opt_result": ""},
        {"opt_val": "two words", "opt_result": "two words"},
        {"opt_val": "1", "opt_result": 1, "value_type": int},
        {"opt_val": "-1.5", "opt_result": -1.5, "value_type": float},
        {"opt_val": "1+5j", "opt_result": 1 + 5j, "value_type": complex},
        {"opt_val": "0.10", "opt_result": Decimal("0.10"), "value_type": Decimal},
        {"opt_val": "yes", "opt_result": True, "value_type": bool},
        {"opt_val": "Off", "opt_result": False, "value_type": bool},
        {"opt_val": "2024-02-29", "opt_result": date(2024, 2, 29), "value_type": date},
        {"opt_val": "[1, 2, 3]", "opt_result": [1, 2, 3], "value_type": list[int]},
        {"opt_val": '{"a": [1, 2]}', "opt_result": {"a": [1, 2]}, "value_type": dict},
        {
            "opt_val": "abc",
            "opt_result": 0,
            "value_type": int,
            "access_context": conversion_error,
        },
        {
            "opt_val": "",
            "opt_result": 0,
            "value_type": int,
            "access_context": conversion_error,
        },
    ]
    test_parameters.extend(
        pars | {"file_type": file_type}
        for pars in basic_tests
        for file_type in ALL_TYPES
    )

    # -----
    # trailing comments
    # -----
    test_parameters.extend(
        [
            {
                "opt_val": "value ; note",
                "opt_result": "value",
                "file_type": IniFileType.STANDARD,
                "further": lambda ini, sec, key, com: "; note" in ini.to_string(),
            },
            {
                "opt_val": "value;note",
                "opt_result": "value",
                "file_type": IniFileType.STANDARD,
            },
            # comments only start a line in these dialects
            {
                "opt_val": "value ; note",
                "opt_result": "value ; note",
                "file_type": IniFileType.PYTHON_STYLE,
            },
            {
                "opt_val": "value # note",
                "opt_result": "value # note",
                "file_type": IniFileType.SAMBA_STYLE,
            },
            {
                "opt_val": "value # note",
                "opt_result": "value # note",
                "file_type": IniFileType.MYSQL_STYLE,
            },
            # everything after the delimiter is the value
            {
                "opt_val": "value ; note",
                "opt_result": "value ; note",
                "file_type": IniFileType.WINDOWS_STYLE,
            },
            {
                "opt_val": "a = b",
                "opt_result": "a = b",
                "file_type": IniFileType.WINDOWS_STYLE,
            },
        ]
    )

    # -----
    # quotes
    # -----
    test_parameters.extend(
        [
            {
                "opt_val": '"  padded  "',
                "opt_result": "  padded  ",
                "file_type": IniFileType.STANDARD,
            },
            {
                "opt_val": '"a ; b" ; comment',
                "opt_result": "a ; b",
                "file_type": IniFileType.STANDARD,
            },
            {
                "opt_val": '"quoted"',
                "opt_result": "quoted",
                "file_type": IniFileType.PYTHON_STYLE,
            },
            {
                "opt_val": '"quoted"',
                "opt_result": '"quoted"',
                "file_type": IniFileType.WINDOWS_STYLE,
            },
            {
                "opt_val": '"open',
                "opt_result": "",
                "file_type": IniFileType.STANDARD,
                "read_context": parse_error,
            },
        ]
    )

    # -----
    # line continuation
    # -----
    test_parameters.extend(
        [
            {
                "opt_val": "first \\\nsecond",
                "opt_result": "first second",
                "file_type": IniFileType.SAMBA_STYLE,
            },
            {
                "opt_val": "first \\   \nsecond",
                "opt_result": "first second",
                "file_type": IniFileType.SAMBA_STYLE,
            },
            {
                "opt_val": "C:\\path\\",
                "opt_result": "C:\\path\\",
                "file_type": IniFileType.STANDARD,
            },
            # "second" becomes a key line without assignment operator
            {
                "opt_val": "first \\\nsecond",
                "opt_result": "first \\",
                "file_type": IniFileType.STANDARD,
                "read_context": parse_error,
            },
        ]
    )

    # ----------
    # Actual test
    # ----------

    @pytest.mark.parametrize(
        *Base.create_parametrization(
            Base.test_read_and_access, parameters=test_parameters
        )
    )
    def test_read_and_access(
        self,
        opt_val,
        opt_result,
        tmp_path,
        file_type,
        value_type,
        read_context,
        access_context,
        further,
    ):
        Base().test_read_and_access(
            opt_val,
            opt_result,
            tmp_path,
            file_type,
            value_type,
            read_context,
            access_context,
            further,
        )
