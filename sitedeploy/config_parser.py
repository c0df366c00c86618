from collections.abc import Callable, Collection
from dataclasses import dataclass, fields
import difflib
from typing import Any, NoReturn, cast

import yaml
from yaml import MappingNode, Node, ScalarNode, SequenceNode, YAMLError

from .config import RawDeployConfig
from .typed_path import AbsFile


@dataclass(frozen=True, slots=True)
class Context:
    filename: AbsFile
    node: Node | None


@dataclass
class ParserError(YAMLError):
    msg: str
    context: Context

    @property
    def position(self) -> str:
        position = str(self.context.filename.path)
        if self.context.node is not None and self.context.node.start_mark is not None:
            position = f"{position}:{self.context.node.start_mark.line + 1}:{self.context.node.start_mark.column + 1}"
        return position

    def __str__(self) -> str:
        return f"An unexpected error occurred during parsing @ {self.position}: {self.msg}"


@dataclass
class Parser:
    filepath: AbsFile

    def fail(self, message: str, *, node: Node | None) -> NoReturn:
        raise ParserError(message, Context(self.filepath, node))

    def type_of(self, node: Node | None) -> str:
        match node:
            case None:
                return "empty document"
            case ScalarNode():
                match self.value_of(node):
                    case "":
                        return "empty string"
                    case None:
                        return "null"
                    case bool():
                        return "boolean"
                    case int():
                        return "integer"
                    case float():
                        return "float"
                    case str():
                        return "string"
                    case value:
                        return type(value).__name__
            case SequenceNode():
                return "sequence"
            case MappingNode():
                return "mapping"
            case _:
                return "unknown"

    def value_of(self, node: ScalarNode) -> Any:
        return yaml.SafeLoader("").construct_object(node)

    def parse_string_key[T: str](self, node: Node, options: Collection[T]) -> T:
        match node:
            case ScalarNode() if isinstance(key := self.value_of(node), str):
                if key in options:
                    return cast(T, key)
                suggestions = difflib.get_close_matches(key, possibilities=options, n=1)
                if suggestions:
                    [suggestion] = suggestions
                    message = f"invalid key {key!r}, did you mean {suggestion!r}?"
                else:
                    message = f"mapping key should be one of {list(options)!r}, got {key!r}."
                self.fail(message, node=node)
        return self.fail(f"expected a string as the key, got {self.type_of(node)}.", node=node)

    def parse_mapping[T](
        self,
        node: Node | None,
        subparsers: dict[str, Callable[[Node], Any]],
        combine: Callable[..., T],
        *,
        name: str,
    ) -> T:
        results = {}
        match node:
            case MappingNode():
                key_node: Node
                value_node: Node
                for key_node, value_node in node.value:
                    key = self.parse_string_key(key_node, options=subparsers.keys())
                    if key in results:
                        self.fail(f"duplicate key {key!r} in mapping.", node=key_node)
                    results[key] = subparsers[key](value_node)
            case _:
                self.fail(f"expected {name} mapping, got {self.type_of(node)}.", node=node)
        return combine(**results)

    def _parse_scalar[T](self, node: Node, type_: type[T], *, name: str) -> T | None:
        if isinstance(node, ScalarNode):
            value = self.value_of(node)
            if value is None:
                return None
            # bool is a subclass of int.
            if isinstance(value, type_) and (type_ is bool or not isinstance(value, bool)):
                return value
        return self.fail(f"expected {name}, got {self.type_of(node)}.", node=node)

    def parse_string(self, node: Node) -> str | None:
        value = self._parse_scalar(node, str, name="string")
        if value == "":
            self.fail("expected non-empty string, got empty string.", node=node)
        return value

    def parse_port(self, node: Node) -> int | None:
        port = self._parse_scalar(node, int, name="port number")
        if port is not None and not 0 < port < 2**16:
            self.fail(f"port must be between 1 and 65535, got {port}.", node=node)
        return port

    def parse_flag(self, node: Node) -> bool | None:
        return self._parse_scalar(node, bool, name="boolean")

    def parse_deploy_config(self, node: Node | None) -> RawDeployConfig:
        subparsers: dict[str, Callable[[Node], Any]] = {
            field.name: self.parse_string for field in fields(RawDeployConfig)
        }
        subparsers.update(port=self.parse_port, clean=self.parse_flag)
        return self.parse_mapping(node, subparsers, combine=RawDeployConfig, name="deploy")

    def parse(self) -> RawDeployConfig:
        with open(self.filepath) as f:
            tree = yaml.compose(f, Loader=yaml.SafeLoader)
        return self.parse_deploy_config(tree)

    @classmethod
    def parse_file(cls, filepath: AbsFile) -> RawDeployConfig:
        parser = cls(filepath)
        return parser.parse()
