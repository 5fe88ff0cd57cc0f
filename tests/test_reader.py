from syncini import IniReader, IniReadState, IniFileType, IniType
from syncini.dialects import reader_parameters
from syncini.entities import Comment, Option, SectionHeader
from syncini.exceptions_warnings import ParseError
import io
import pytest


def read_all(text: str, file_type: IniFileType = IniFileType.STANDARD) -> list:
    with IniReader(text, reader_parameters(file_type)) as reader:
        return list(reader)


class TestReader:

    def test_entities(self):
        text = "; head\n\n[Server] ; main\nport = 8080 ; tcp\nhost=localhost\n"
        assert read_all(text) == [
            Comment("head"),
            Comment(),
            SectionHeader("Server", "main"),
            Option("port", "8080", "tcp"),
            Option("host", "localhost"),
        ]

    def test_step_by_step(self):
        reader = IniReader(io.StringIO("[a]\nkey = value ; note\n"))
        assert reader.read_state is IniReadState.INITIAL
        assert reader.read()
        assert reader.type is IniType.SECTION
        assert reader.name == "a"
        assert reader.value is None
        assert reader.read()
        assert reader.read_state is IniReadState.INTERACTIVE
        assert reader.type is IniType.KEY
        assert (reader.name, reader.value, reader.comment) == ("key", "value", "note")
        assert reader.entity_line_number == 2
        assert not reader.read()
        assert reader.read_state is IniReadState.END_OF_FILE
        reader.close()
        assert reader.read_state is IniReadState.CLOSED
        assert not reader.read()

    def test_close_closes_stream(self):
        stream = io.StringIO("[a]\n")
        with IniReader(stream):
            pass
        assert stream.closed

    def test_whitespace(self):
        text = "  \t[ spaced name ]  \r\n\t key \t=\t value \t\r\n   \r\n"
        assert read_all(text) == [
            SectionHeader("spaced name"),
            Option("key", "value"),
            Comment(),
        ]

    def test_no_trailing_newline(self):
        assert read_all("[a]\nkey = value") == [SectionHeader("a"), Option("key", "value")]

    def test_empty_input(self):
        assert read_all("") == []

    def test_comment_text(self):
        # one space after the delimiter is stripped, further indentation is kept
        assert read_all(";   indented  \n;no space\n") == [
            Comment("  indented"),
            Comment("no space"),
        ]

    def test_ignore_comments(self):
        parameters = reader_parameters(IniFileType.STANDARD)
        parameters.update(ignore_comments=True)
        with IniReader("; gone\n[a] ; gone\nk = v ; gone\n", parameters) as reader:
            assert list(reader) == [Comment(), SectionHeader("a"), Option("k", "v")]

    def test_python_style(self):
        text = "# comment\n; other\n[a]\nkey: value ; not a comment\n"
        assert read_all(text, IniFileType.PYTHON_STYLE) == [
            Comment("comment"),
            Comment("other"),
            SectionHeader("a"),
            Option("key", "value ; not a comment"),
        ]

    def test_python_style_rejects_equals(self):
        with pytest.raises(ParseError) as e:
            read_all("[a]\nk = v\n", IniFileType.PYTHON_STYLE)
        assert "Expected assignment operator (:)" in str(e.value)

    def test_standard_colon_is_part_of_key(self):
        with pytest.raises(ParseError):
            read_all("[a]\nk: v\n")
        assert read_all("[a]\nk: v = w\n")[1] == Option("k: v", "w")

    def test_samba_continuation(self):
        text = "[global]\npath = /srv/\\\n  share\nname = x\n"
        entities = read_all(text, IniFileType.SAMBA_STYLE)
        assert entities[1] == Option("path", "/srv/  share")
        assert entities[2] == Option("name", "x")

    def test_samba_backslash_in_value(self):
        entities = read_all("[a]\nk = a\\b\n", IniFileType.SAMBA_STYLE)
        assert entities[1] == Option("k", "a\\b")

    def test_mysql_flags(self):
        text = "[mysqld]\nskip-external-locking\nport: 3306\nuser = mysql\n"
        assert read_all(text, IniFileType.MYSQL_STYLE) == [
            SectionHeader("mysqld"),
            Option("skip-external-locking", ""),
            Option("port", "3306"),
            Option("user", "mysql"),
        ]

    def test_windows_consumes_all(self):
        text = '[a] ; header\nk = "quoted" ; kept\n'
        assert read_all(text, IniFileType.WINDOWS_STYLE) == [
            SectionHeader("a", "header"),
            Option("k", '"quoted" ; kept'),
        ]

    def test_section_comment_only_after_key_dialects(self):
        entities = read_all("[a] # note\n", IniFileType.PYTHON_STYLE)
        assert entities == [SectionHeader("a")]

    @pytest.mark.parametrize(
        "text,message,line,position",
        [
            ("[a]\n[broken\n", "Expected section end (])", 2, 8),
            ("[a]\n  []\n", "Expected section name", 2, 5),
            ("[a]\nkey value\n", "Expected assignment operator (=)", 2, 10),
            ("[a]\n = value\n", "Expected key name", 2, 3),
            ('[a]\nk = "open\n', 'Expected closing quote (")', 2, 10),
        ],
    )
    def test_errors(self, text, message, line, position):
        with pytest.raises(ParseError) as e:
            read_all(text)
        assert e.value.message == message
        assert e.value.line_number == line
        assert e.value.line_position == position
        assert str(e.value) == f"{message} - Line: {line}, Position: {position}."
