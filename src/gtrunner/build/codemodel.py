#
# src/gtrunner/build/codemodel.py
#
"""
Validated, versioned contract for the build service's code model.

The build service hands over a loosely structured mapping
(``configurations[0].projects[].targets[]``). It is validated once here, at
the boundary; anything absent or malformed becomes ``CodeModelUnavailable``
instead of silently falling through further down.
"""
from collections.abc import Iterator, Mapping
from typing import Any, TypeAlias

from attrs import define, field

SCHEMA_VERSION = 1
EXECUTABLE = "EXECUTABLE"


@define(frozen=True, slots=True)
class CodeModelTarget:
    name: str
    type: str
    sources: tuple[str, ...] = field(factory=tuple, converter=tuple)
    artifacts: tuple[str, ...] = field(factory=tuple, converter=tuple)

    @property
    def is_executable(self) -> bool:
        return self.type == EXECUTABLE


@define(frozen=True, slots=True)
class CodeModelProject:
    name: str
    source_directory: str | None = None
    targets: tuple[CodeModelTarget, ...] = field(factory=tuple, converter=tuple)


@define(frozen=True, slots=True)
class Configuration:
    name: str
    projects: tuple[CodeModelProject, ...] = field(factory=tuple, converter=tuple)


@define(frozen=True, slots=True)
class CodeModel:
    """A code model that passed validation."""

    configurations: tuple[Configuration, ...] = field(converter=tuple)
    schema_version: int = SCHEMA_VERSION

    def targets(self) -> Iterator[CodeModelTarget]:
        """Targets of the first configuration, the only one gtrunner reads."""
        for project in self.configurations[0].projects:
            yield from project.targets


@define(frozen=True, slots=True)
class CodeModelUnavailable:
    """The build service had no usable code model; reason says why."""

    reason: str


CodeModelResult: TypeAlias = CodeModel | CodeModelUnavailable


class _Malformed(ValueError):
    pass


def _require(mapping: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    value = mapping.get(key)
    if not isinstance(value, kind):
        raise _Malformed(f"{where}.{key} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _optional_list(mapping: Mapping[str, Any], key: str, where: str) -> list[Any]:
    value = mapping.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise _Malformed(f"{where}.{key} must be a list, got {type(value).__name__}")
    return value


def _strings(values: list[Any], where: str) -> tuple[str, ...]:
    if not all(isinstance(v, str) for v in values):
        raise _Malformed(f"{where} must contain only strings")
    return tuple(values)


def _parse_target(raw: Any, where: str) -> CodeModelTarget:
    if not isinstance(raw, Mapping):
        raise _Malformed(f"{where} must be an object")
    sources: list[str] = []
    for g_index, group in enumerate(_optional_list(raw, "fileGroups", where)):
        group_where = f"{where}.fileGroups[{g_index}]"
        if not isinstance(group, Mapping):
            raise _Malformed(f"{group_where} must be an object")
        sources.extend(_strings(_optional_list(group, "sources", group_where), f"{group_where}.sources"))
    return CodeModelTarget(
        name=_require(raw, "name", str, where),
        type=_require(raw, "type", str, where),
        sources=sources,
        artifacts=_strings(_optional_list(raw, "artifacts", where), f"{where}.artifacts"),
    )


def _parse_project(raw: Any, where: str) -> CodeModelProject:
    if not isinstance(raw, Mapping):
        raise _Malformed(f"{where} must be an object")
    source_directory = raw.get("sourceDirectory")
    return CodeModelProject(
        name=str(raw.get("name", "")),
        source_directory=source_directory if isinstance(source_directory, str) else None,
        targets=[
            _parse_target(t, f"{where}.targets[{i}]") for i, t in enumerate(_optional_list(raw, "targets", where))
        ],
    )


def parse_code_model(raw: Any) -> CodeModelResult:
    """
    Validates a raw code model mapping.

    Args:
        raw: The structure returned by ``Project.code_model``, possibly None.

    Returns:
        A CodeModel, or CodeModelUnavailable when raw is absent, has no
        configurations, or does not match the expected shape.
    """
    if raw is None:
        return CodeModelUnavailable("build service returned no code model")
    if not isinstance(raw, Mapping):
        return CodeModelUnavailable(f"code model must be an object, got {type(raw).__name__}")
    try:
        configurations = _optional_list(raw, "configurations", "codeModel")
        if not configurations:
            return CodeModelUnavailable("code model has no configurations")
        parsed = []
        for c_index, config in enumerate(configurations):
            where = f"codeModel.configurations[{c_index}]"
            if not isinstance(config, Mapping):
                raise _Malformed(f"{where} must be an object")
            parsed.append(
                Configuration(
                    name=str(config.get("name", "")),
                    projects=[
                        _parse_project(p, f"{where}.projects[{i}]")
                        for i, p in enumerate(_optional_list(config, "projects", where))
                    ],
                )
            )
    except _Malformed as e:
        return CodeModelUnavailable(f"malformed code model: {e}")
    return CodeModel(configurations=parsed)


# 🔼⚙️
