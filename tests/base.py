from syncini import IniFile, IniFileType
from syncini.dialects import writer_parameters
from syncini.utils import OrderedMap
from typing import Any, ContextManager, Callable
from contextlib import nullcontext
from uuid import uuid1
from pathlib import Path
import inspect


class Base:
    """Base for tests. Provides functions for creating ini content in a dialect and
    checking how an IniFile reads it."""

    def __init__(self, file_type: IniFileType = IniFileType.STANDARD) -> None:
        """
        Args:
            file_type (IniFileType, optional): The dialect the content is written in.
                Defaults to IniFileType.STANDARD.
        """
        self.content: str = ""
        self.file_type = file_type
        self.sections: OrderedMap[str, list[str]] = OrderedMap()

    @property
    def assign_delimiter(self) -> str:
        return writer_parameters(self.file_type).assign_delimiter

    @property
    def comment_delimiter(self) -> str:
        return writer_parameters(self.file_type).comment_delimiter

    @classmethod
    def create_parametrization(
        cls, target: Callable, parameters: list[dict[str, Any]]
    ) -> tuple[str, list[tuple]]:
        """Create a pytest mark parametrization for a target function.

        Args:
            target (Callable): The target function to parametrize.
            parameters (list[dict[str, Any]]): Parameters to pass. One dict per
                parametrization with keys matching target arguments.

        Returns:
            tuple[str, list[tuple]]: Tuple of argnames and argvalues to pass to
                pytest.mark.parametrization.
        """

        args_to_pass = {"opt_val": "", "opt_result": ""}

        # get default args from target
        args_to_pass |= {
            k: v.default
            for k, v in inspect.signature(target).parameters.items()
            if v.default is not v.empty
        }

        parametrization: list[tuple] = []
        for pars in parameters:
            if {*pars.keys()}.difference(args_to_pass.keys()):
                raise ValueError("Parameters must be function arguments.")
            parametrization.append(tuple((args_to_pass | pars).values()))

        return ",".join(args_to_pass), parametrization

    def test_read_and_access(
        self,
        opt_val: str,
        opt_result: Any,
        export_path: Path,
        file_type: IniFileType | None = None,
        value_type: Any = str,
        read_context: ContextManager | None = None,
        access_context: ContextManager | None = None,
        further: Callable[[IniFile, str, str, str], bool] | None = None,
    ):
        """Create ini content with one section holding a comment and an option, open
        it and verify the option value and that the comment is kept.

        Args:
            opt_val (str): The value the option should take inside the ini content.
            opt_result (Any): The value the option is expected to return.
            export_path (Path): The directory to export the ini to.
            file_type (IniFileType | None, optional): The dialect. Defaults to
                IniFileType.STANDARD.
            value_type (Any, optional): The type to read the value as.
                Defaults to str.
            read_context (ContextManager | None, optional): The ContextManager for
                opening the ini. If opening fails inside of it, the test ends there.
                Defaults to nullcontext().
            access_context (ContextManager | None, optional): The ContextManager
                for accessing the option. Defaults to nullcontext().
            further (Callable[[IniFile, str, str, str], bool] | None, optional): A
                function that takes the handle, the section name, the key and the
                comment content and returns a boolean. Will be asserted at the end if
                not None. Defaults to None.
        """
        if file_type is not None:
            self.file_type = file_type
        if read_context is None:
            read_context = nullcontext()
        if access_context is None:
            access_context = nullcontext()

        section = self.add_section()
        comment = self.add_comment()
        key = self.add_option(opt_val)

        read_path = self.export(export_path)

        ini = None
        with read_context:
            ini = IniFile(read_path, file_type=self.file_type, watch=False)
        if ini is None:
            return

        with ini:
            with access_context:
                assert ini.get(section, key, value_type=value_type) == opt_result
            assert f"{self.comment_delimiter} {comment}" in ini.to_string()
            if further:
                assert further(ini, section, key, comment)

    @classmethod
    def random_id(cls):
        """Create a random UUID1 with underscores instead of hyphens.

        Returns:
            str: The generated UUID1.
        """
        return str(uuid1()).replace("-", "_")

    def add_section(self, name: str | None = None) -> str:
        """Add a section header.

        Args:
            name (str | None, optional): The section name. If None, a random one is
                generated. Defaults to None.

        Returns:
            str: The section name.
        """
        if name is None:
            name = self.random_id()
        self.content += f"[{name}]\n"
        self.sections[name] = []
        return name

    def add_option(self, value: str | None = None, key: str | None = None) -> str:
        """Add an option to the last section.

        Args:
            value (str | None, optional): The value the option should take. If None
                a random one is generated. Defaults to None.
            key (str | None, optional): The key. If None a random one is generated.
                Defaults to None.

        Returns:
            str: The key.
        """
        if value is None:
            value = self.random_id()
        if key is None:
            key = self.random_id()
        self.sections.iloc[-1] = [*self.sections.iloc[-1][1], key]
        self.content += f"{key} {self.assign_delimiter} {value}\n"
        return key

    def add_comment(self, comment: str | None = None) -> str:
        """Add a comment line."""
        if comment is None:
            comment = self.random_id()
        self.content += f"{self.comment_delimiter} {comment}\n"
        return comment

    def add_blank(self) -> None:
        self.content += "\n"

    def export(self, path: Path, encoding: str = "utf-8") -> Path:
        """Export the generated ini content.

        Args:
            path (Path): The directory to export to.
            encoding (str, optional): The file encoding. Defaults to "utf-8".

        Returns:
            Path: The path of the exported file.
        """
        dest = path / f"{self.random_id()}.ini"
        with open(dest, "w", encoding=encoding, newline="") as f:
            f.write(self.content)
        return dest
