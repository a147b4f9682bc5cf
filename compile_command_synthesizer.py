import dataclasses
import typing # MIN_PY=3.9: Switch e.g. typing.List[str] -> list[str]

import flag_syntax
from host_platform import HostPlatform, normalize_path


@dataclasses.dataclass(frozen=True)
class CompileUnitInputs:
    """One module's already-resolved compile environment, as handed over by the host build system.

    Every sequence keeps the host's order verbatim; include search order matters to the compiler.
    """
    name: str
    target_platform: str
    host_platform: HostPlatform
    cpp_standard: typing.Union[flag_syntax.CppStandard, str, None] = flag_syntax.CppStandard.DEFAULT
    force_include_files: typing.Sequence[str] = ()
    definitions: typing.Sequence[str] = ()
    user_include_paths: typing.Sequence[str] = ()
    system_include_paths: typing.Sequence[str] = ()
    cpp_files: typing.Sequence[str] = ()
    cc_files: typing.Sequence[str] = ()

    @property
    def source_files(self):
        """Both physical-language groups, compiled as one group."""
        return list(self.cpp_files) + list(self.cc_files)


@dataclasses.dataclass(frozen=True)
class CompileCommandEntry:
    """A compile_commands.json entry. Docs: https://clang.llvm.org/docs/JSONCompilationDatabase.html#format

    directory stays None until the database stamps the run's working directory on it.
    """
    file: str
    command: str
    directory: typing.Optional[str] = None


class CommandSynthesizer:
    """Predicts the compiler invocation for every source file of a module.

    Flag syntax is resolved once, for the host, when the synthesizer is built.
    """
    def __init__(self, host_platform: HostPlatform):
        self.host_platform = host_platform
        self.templates = flag_syntax.format_for(host_platform)
        self.system_compile_flags = flag_syntax.system_compile_flags(host_platform)


    def command_prefix(self, unit: CompileUnitInputs, compiler: str):
        """Everything in the command but the source file: compiler, standard, extra host flags, then force includes, user includes, system includes and definitions."""
        parts = [
            f'"{compiler}" ',
            ' ' + flag_syntax.standard_flag(self.host_platform, unit.cpp_standard),
            ' ' + self.system_compile_flags,
        ]
        parts.extend(self.templates.force_include.format(path) for path in unit.force_include_files)
        parts.extend(self.templates.user_include.format(path) for path in unit.user_include_paths)
        parts.extend(self.templates.system_include.format(path) for path in unit.system_include_paths)
        parts.extend(self.templates.definition.format(definition) for definition in unit.definitions)
        return ''.join(parts)


    def synthesize(self, unit: CompileUnitInputs, compiler: str):
        """Get one CompileCommandEntry per source file in the unit, in source order.

        The flag expansion is shared by all of the unit's files, so it's built once.
        """
        source_files = unit.source_files
        if not source_files:
            return []

        prefix = self.command_prefix(unit, compiler)
        entries = []
        for source_file in source_files:
            file = normalize_path(self.host_platform, source_file)
            entries.append(CompileCommandEntry(file=file, command=f'{prefix} "{file}"'))
        return entries
