from typing import get_args
from .globals import VALID_MARKERS, DEFAULT_EOL


class Parameters:
    """Parameters for reading."""

    def __init__(
        self,
        comment_delimiters: VALID_MARKERS | tuple[VALID_MARKERS, ...] = ";",
        assign_delimiters: VALID_MARKERS | tuple[VALID_MARKERS, ...] = "=",
        accept_comment_after_key: bool = True,
        line_continuation: bool = False,
        accept_no_assignment_operator: bool = False,
        consume_all_key_text: bool = False,
        ignore_comments: bool = False,
    ) -> None:
        """
        Args:
            comment_delimiters (VALID_MARKERS | tuple[VALID_MARKERS, ...], optional):
                Character(s) that start a comment. Defaults to ";".
            assign_delimiters (VALID_MARKERS | tuple[VALID_MARKERS, ...], optional):
                Character(s) that delimit keys from values. The first one found in
                a line is used. Defaults to "=".
            accept_comment_after_key (bool, optional): Whether a comment may follow
                a value (or a section header) on the same line. Defaults to True.
            line_continuation (bool, optional): Whether a value ending with a
                backslash continues on the next line. Defaults to False.
            accept_no_assignment_operator (bool, optional): Whether a key line
                without assignment delimiter is accepted (as a key with an empty
                value). Otherwise such a line is a ParseError. Defaults to False.
            consume_all_key_text (bool, optional): Whether everything after the
                assignment delimiter is the value, verbatim (no quote or comment
                handling). Defaults to False.
            ignore_comments (bool, optional): Whether comment text is dropped while
                reading (comment lines still produce blank entries).
                Defaults to False.
        """
        # because comment_delimiters and assign_delimiters check each other on setting
        self._comment_delimiters: tuple[str, ...] = ()
        self._assign_delimiters: tuple[str, ...] = ()

        self.comment_delimiters = comment_delimiters
        self.assign_delimiters = assign_delimiters
        self.accept_comment_after_key = accept_comment_after_key
        self.line_continuation = line_continuation
        self.accept_no_assignment_operator = accept_no_assignment_operator
        self.consume_all_key_text = consume_all_key_text
        self.ignore_comments = ignore_comments

    @property
    def comment_delimiters(self) -> tuple[str, ...]:
        return self._comment_delimiters

    @comment_delimiters.setter
    def comment_delimiters(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...]
    ) -> None:
        value = _to_markers(value)
        verify_marker(value, "comment delimiter")
        self._comment_delimiters = value
        self.verify_between_markers()

    @property
    def assign_delimiters(self) -> tuple[str, ...]:
        return self._assign_delimiters

    @assign_delimiters.setter
    def assign_delimiters(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...]
    ) -> None:
        value = _to_markers(value)
        if not value:
            raise ValueError("At least one assignment delimiter is required.")
        verify_marker(value, "assignment delimiter")
        self._assign_delimiters = value
        self.verify_between_markers()

    def verify_between_markers(self) -> None:
        if set(self._comment_delimiters).intersection(self._assign_delimiters):
            raise ValueError(
                "Comment delimiters and assignment delimiters have to be distinct"
                " from each other."
            )

    def update(self, **kwargs) -> None:
        """Update parameters with kwargs

        Args:
            **kwargs: Keyword-arguments to update the parameters with.
        """
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"'{k}' is not a reading parameter.")
            setattr(self, k, v)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(comment_delimiters={self.comment_delimiters!r},"
            f" assign_delimiters={self.assign_delimiters!r},"
            f" accept_comment_after_key={self.accept_comment_after_key},"
            f" line_continuation={self.line_continuation},"
            f" accept_no_assignment_operator={self.accept_no_assignment_operator},"
            f" consume_all_key_text={self.consume_all_key_text},"
            f" ignore_comments={self.ignore_comments})"
        )


class WriteParameters:
    """Parameters for writing."""

    def __init__(
        self,
        comment_delimiter: VALID_MARKERS = ";",
        assign_delimiter: VALID_MARKERS = "=",
        indentation: int = 0,
        use_value_quotes: bool = False,
        quote_when_needed: bool = True,
        eol: str = DEFAULT_EOL,
    ) -> None:
        """
        Args:
            comment_delimiter (VALID_MARKERS, optional): Character written in front
                of comments. Defaults to ";".
            assign_delimiter (VALID_MARKERS, optional): Character written between
                key and value. Defaults to "=".
            indentation (int, optional): Number of spaces every key line is
                indented with. Defaults to 0.
            use_value_quotes (bool, optional): Whether every value is written in
                double quotes. Defaults to False.
            quote_when_needed (bool, optional): Whether values that would not be read
                back unchanged (surrounding whitespace, comment markers, trailing
                backslash) are written in double quotes. Defaults to True.
            eol (str, optional): Line terminator. Defaults to "\\n".
        """
        self._comment_delimiter = ";"
        self._assign_delimiter = "="

        self.comment_delimiter = comment_delimiter
        self.assign_delimiter = assign_delimiter
        self.indentation = indentation
        self.use_value_quotes = use_value_quotes
        self.quote_when_needed = quote_when_needed
        self.eol = eol

    @property
    def comment_delimiter(self) -> str:
        return self._comment_delimiter

    @comment_delimiter.setter
    def comment_delimiter(self, value: VALID_MARKERS) -> None:
        verify_marker((value,), "comment delimiter")
        if value == self._assign_delimiter:
            raise ValueError(
                "Comment delimiter and assignment delimiter have to be distinct."
            )
        self._comment_delimiter = value

    @property
    def assign_delimiter(self) -> str:
        return self._assign_delimiter

    @assign_delimiter.setter
    def assign_delimiter(self, value: VALID_MARKERS) -> None:
        verify_marker((value,), "assignment delimiter")
        if value == self._comment_delimiter:
            raise ValueError(
                "Comment delimiter and assignment delimiter have to be distinct."
            )
        self._assign_delimiter = value

    @property
    def indentation(self) -> int:
        return self._indentation

    @indentation.setter
    def indentation(self, value: int) -> None:
        if value < 0:
            raise ValueError("Negative values are illegal for indentation.")
        self._indentation = value

    @property
    def eol(self) -> str:
        return self._eol

    @eol.setter
    def eol(self, value: str) -> None:
        if value not in {"\n", "\r\n"}:
            raise ValueError("eol must be '\\n' or '\\r\\n'.")
        self._eol = value

    def update(self, **kwargs) -> None:
        """Update parameters with kwargs

        Args:
            **kwargs: Keyword-arguments to update the parameters with.
        """
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"'{k}' is not a writing parameter.")
            setattr(self, k, v)


def _to_markers(value: str | tuple[str, ...]) -> tuple[str, ...]:
    # a string is a sequence of single markers, e.g. ";#" for (";", "#")
    return tuple(value)


def verify_marker(marker: tuple[str, ...], name: str) -> None:
    valid = get_args(VALID_MARKERS)
    for val in marker:
        if val == "[":
            raise ValueError(
                f"'[' (section name identifier) is not allowed as a {name}."
            )
        if val not in valid:
            raise ValueError(f"'{val}' is not a valid {name}. Choose one of {valid}.")
