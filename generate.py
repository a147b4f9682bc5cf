"""Generate Unreal Emacs project files from what the host build system resolved.

Interface:
- Input: a host manifest (JSON), either as a file path argument or on stdin. It lists the project, the engine root and every target the host tried to resolve, down to each C++ module's compile environment.
    - The host owns target, binary and module resolution. We never discover any of those ourselves.
- Output, next to the project file:
    - .uemacs/project.json, which tells the editor what targets exist and how to build and run them.
    - compile_commands.json, which clangd (or any other clang tooling) reads to learn how each file is compiled.
- Nothing gets compiled or built. We only predict the command line the build would use.
"""

import argparse
import json
import os
import shutil
import sys
import types
import typing

from compilation_database import CompilationDatabase
from compile_command_synthesizer import CommandSynthesizer, CompileUnitInputs
from console_log import log_error, log_info, log_success, log_verbose, log_warning, log_warning_once, set_verbose
from flag_syntax import CppStandard
from host_platform import (HostPlatform, UnsupportedHostPlatformError, detect_host_platform, directory_of,
                           find_clang_compiler, join_path, normalize_path, parse_host_platform, script_locator_for)
from project_descriptor import TargetDescription, project_descriptor, write_project_descriptor


PROJECT_DIRECTORY_NAME = '.uemacs'
PROJECT_FILE_NAME = 'project.json'
COMPILATION_DATABASE_FILE_NAME = 'compile_commands.json'

CPP_MODULE_TYPE = 'CPlusPlus'
EXECUTABLE_BINARY_TYPE = 'Executable'


def load_manifest(text: typing.Union[str, bytes]):
    """Parse the host manifest. Raises json.JSONDecodeError on malformed input."""
    # object_hook -> SimpleNamespace allows object.member syntax, while keeping the manifest schema-free on our side
    return json.loads(text, object_hook=lambda d: types.SimpleNamespace(**d))


def _target_label(target):
    return f"{getattr(target, 'name', '?')} ({getattr(target, 'platform', '?')} {getattr(target, 'configuration', '?')})"


def compile_unit_from_module(module, target, host_platform: HostPlatform):
    """Adapt a manifest module to CompileUnitInputs. Missing or null lists are empty; a missing standard is the default one."""
    return CompileUnitInputs(
        name=module.name,
        target_platform=target.platform,
        host_platform=host_platform,
        cpp_standard=getattr(module, 'cpp_standard', None) or CppStandard.DEFAULT,
        force_include_files=tuple(getattr(module, 'force_include_files', None) or ()),
        definitions=tuple(getattr(module, 'definitions', None) or ()),
        user_include_paths=tuple(getattr(module, 'user_include_paths', None) or ()),
        system_include_paths=tuple(getattr(module, 'system_include_paths', None) or ()),
        cpp_files=tuple(getattr(module, 'cpp_files', None) or ()),
        cc_files=tuple(getattr(module, 'cc_files', None) or ()),
    )


def _compiler_for(target, host_platform: HostPlatform, warned_keys: set):
    compiler = getattr(target, 'compiler', None)
    if compiler:
        return compiler
    compiler = find_clang_compiler(host_platform)
    log_warning_once(warned_keys, 'compiler-fallback', f">>> The build system didn't say which compiler it uses. Recording {compiler} in compile commands instead.")
    return compiler


def add_target_for_intellisense(database: CompilationDatabase, synthesizer: CommandSynthesizer, target, compiler: str):
    """Register compile commands for every C++ module in every binary of target. Returns how many were registered."""
    registered = 0
    for binary in getattr(target, 'binaries', None) or ():
        for module in getattr(binary, 'modules', None) or ():
            if getattr(module, 'type', CPP_MODULE_TYPE) != CPP_MODULE_TYPE: # External and other non-compiled modules have nothing to index
                continue
            entries = synthesizer.synthesize(compile_unit_from_module(module, target, synthesizer.host_platform), compiler)
            database.register_all(entries)
            registered += len(entries)
    return registered


def describe_target(target, project_file: str, host_platform: HostPlatform):
    """Reduce a manifest target to a TargetDescription. None if it has no executable to run."""
    executable = next((binary for binary in getattr(target, 'binaries', None) or ()
                       if getattr(binary, 'type', None) == EXECUTABLE_BINARY_TYPE and getattr(binary, 'output_files', None)),
                      None)
    if executable is None:
        return None

    return TargetDescription(
        name=target.name,
        type=target.type,
        platform=target.platform,
        configuration=target.configuration,
        receipt_name=getattr(target, 'receipt_name', None) or f"{target.name}-{target.platform}-{target.configuration}",
        project_file=project_file,
        binary=normalize_path(host_platform, executable.output_files[0]),
    )


def _resolve_host_platform(manifest, host_platform):
    if host_platform is not None:
        return parse_host_platform(host_platform)
    manifest_host = getattr(manifest, 'host_platform', None)
    if manifest_host:
        return parse_host_platform(manifest_host)
    return detect_host_platform()


def generate_project_files(manifest, host_platform: typing.Union[HostPlatform, str, None] = None, compact: bool = False):
    """Write .uemacs/project.json and compile_commands.json for the manifest's project.

    host_platform overrides both the manifest's host_platform and detection.
    Returns True on success. Targets the host couldn't resolve are skipped with a warning; unsupported hosts and write failures fail the whole run.
    """
    project = getattr(manifest, 'project', None)
    if project is None or not getattr(project, 'file', None):
        log_warning(">>> Unreal Emacs can build game projects only at the moment. Skipping project generation.")
        return False

    try:
        host_platform = _resolve_host_platform(manifest, host_platform)
    except UnsupportedHostPlatformError as e:
        log_error(f">>> {e}. No compiler flag syntax or build script can be derived for it.")
        return False

    if not getattr(manifest, 'engine_root', None):
        log_error(">>> The manifest doesn't say where the engine root is. Aborting.")
        return False
    engine_root = normalize_path(host_platform, manifest.engine_root)
    scripts = script_locator_for(host_platform, engine_root)

    project_file = normalize_path(host_platform, project.file)
    project_directory = directory_of(host_platform, project_file)

    synthesizer = CommandSynthesizer(host_platform)
    database = CompilationDatabase() # Per run. Never shared between runs.
    warned_keys = set() # Same for log_warning_once keys
    target_descriptions = []
    for target in getattr(manifest, 'targets', None) or ():
        label = _target_label(target)
        error = getattr(target, 'error', None)
        if error:
            log_warning(f">>> Skipping {label}; the build system couldn't create it:", f"\n    {error}")
            continue

        target_project_file = normalize_path(host_platform, getattr(target, 'project_file', None) or project_file)

        description = describe_target(target, target_project_file, host_platform)
        if description is None:
            log_warning(f">>> Skipping {label} in {PROJECT_FILE_NAME}; it has no executable binary to build or run.")
        else:
            target_descriptions.append(description)

        # Compile commands only come from the game project's own targets
        if target_project_file == project_file and getattr(target, 'intellisense', True):
            registered = add_target_for_intellisense(database, synthesizer, target, _compiler_for(target, host_platform, warned_keys))
            log_verbose(f">>> Collected {registered} compile commands for {label}")

    project_file_path = join_path(host_platform, project_directory, PROJECT_DIRECTORY_NAME, PROJECT_FILE_NAME)
    compilation_database_path = join_path(host_platform, project_directory, COMPILATION_DATABASE_FILE_NAME)
    try:
        write_project_descriptor(
            project_file_path,
            project_descriptor(project_file, getattr(project, 'engine_association', ''), engine_root, scripts, target_descriptions),
            compact=compact)
        database.flush(compilation_database_path, engine_root)
    except OSError as e:
        log_error(f">>> Failed writing project files for {project_file}:", f"\n    {e}")
        return False

    if not len(database):
        log_warning(f""">>> {COMPILATION_DATABASE_FILE_NAME} is empty; no C++ source files were found for {project_file}.
    Code intelligence in the editor won't work until the build system reports modules with sources.""")
    log_success(f">>> Wrote {len(target_descriptions)} targets to {project_file_path} and {len(database)} compile commands to {compilation_database_path}")
    return True


def clean_project_files(project_directory: str):
    """Delete the generated .uemacs directory. compile_commands.json stays, since clangd may be using it."""
    emacs_project_directory = os.path.join(project_directory, PROJECT_DIRECTORY_NAME)
    if not os.path.isdir(emacs_project_directory):
        log_info(f">>> Nothing to clean in {project_directory}")
        return
    shutil.rmtree(emacs_project_directory)
    log_success(f">>> Removed {emacs_project_directory}")


def main(argv: typing.Optional[typing.List[str]] = None):
    parser = argparse.ArgumentParser(description="Generate Unreal Emacs project files and compile_commands.json from a host build manifest.")
    parser.add_argument('manifest', nargs='?', help="Path to the host manifest JSON. Read from stdin when omitted.")
    parser.add_argument('--host-platform', choices=[platform.value for platform in HostPlatform],
                        help="Generate for this host instead of the one in the manifest or the one we're running on.")
    parser.add_argument('--compact', action='store_true', help="Write project.json without indentation.")
    parser.add_argument('--clean', action='store_true', help="Delete the generated .uemacs directory instead of generating.")
    parser.add_argument('--verbose', action='store_true', help="Report progress per target.")
    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    try:
        if args.manifest:
            with open(args.manifest, 'rb') as manifest_file:
                manifest = load_manifest(manifest_file.read())
        else:
            manifest = load_manifest(sys.stdin.buffer.read())
    except OSError as e:
        log_error(">>> Couldn't read the host manifest:", f"\n    {e}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        log_error(">>> The host manifest isn't valid JSON:", f"\n    {e}")
        sys.exit(1)

    if args.clean:
        project = getattr(manifest, 'project', None)
        if project is None or not getattr(project, 'file', None):
            log_error(">>> The manifest has no project to clean.")
            sys.exit(1)
        clean_project_files(os.path.dirname(os.path.abspath(project.file)))
        return

    if not generate_project_files(manifest, host_platform=args.host_platform, compact=args.compact):
        sys.exit(1)


if __name__ == '__main__':
    main()
