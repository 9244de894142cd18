#
# src/gtrunner/build/mapper.py
#
"""
Maps source files onto the executable targets that compile them.
"""
from gtrunner.build.codemodel import CodeModelResult, CodeModelUnavailable

# Extensions whose modification invalidates a test binary.
CXX_EXTENSIONS = (".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".hxx")


def normalize_path(path: str) -> str:
    """Unifies separators; the code model and the editor may disagree on them."""
    return path.replace("\\", "/")


def executable_to_sources(model: CodeModelResult) -> dict[str, frozenset[str]]:
    """Executable target name -> normalized source paths. Targets without sources are left out."""
    if isinstance(model, CodeModelUnavailable):
        return {}
    mapping: dict[str, frozenset[str]] = {}
    for target in model.targets():
        if not target.is_executable:
            continue
        sources = frozenset(normalize_path(s) for s in target.sources)
        if sources:
            mapping[target.name] = mapping.get(target.name, frozenset()) | sources
    return mapping


def source_to_executable(model: CodeModelResult) -> dict[str, str]:
    """Normalized source path -> executable target name; the first target to claim a file wins."""
    if isinstance(model, CodeModelUnavailable):
        return {}
    mapping: dict[str, str] = {}
    for target in model.targets():
        if not target.is_executable:
            continue
        for source in target.sources:
            mapping.setdefault(normalize_path(source), target.name)
    return mapping


def get_executable_for_file(model: CodeModelResult, source_file: str) -> str | None:
    """Exact normalized-path lookup; files no target claims return None."""
    return source_to_executable(model).get(normalize_path(source_file))


def get_artifact_path(model: CodeModelResult, target_name: str) -> str | None:
    """First built artifact of the named target, if the code model lists one."""
    if isinstance(model, CodeModelUnavailable):
        return None
    for target in model.targets():
        if target.name == target_name and target.artifacts:
            return target.artifacts[0]
    return None


def get_source_paths_for_executables(model: CodeModelResult, names: list[str]) -> list[str]:
    """C/C++ sources and headers of the named executables, as listed by the code model."""
    if isinstance(model, CodeModelUnavailable):
        return []
    wanted = set(names)
    seen: dict[str, None] = {}
    for target in model.targets():
        if not target.is_executable or target.name not in wanted:
            continue
        for source in target.sources:
            if source.lower().endswith(CXX_EXTENSIONS):
                seen.setdefault(source, None)
    return list(seen)


# 🔼⚙️
