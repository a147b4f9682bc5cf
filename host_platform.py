"""Host platform identity and everything that hangs off it.

The host platform is the OS the generator itself runs on. It decides flag syntax, how paths are spelled, and which engine script builds a target. It is deliberately distinct from the platform a target is built *for*.
"""

import dataclasses
import enum
import functools
import ntpath
import posixpath
import shutil
import subprocess
import sys
import typing


class UnsupportedHostPlatformError(ValueError):
    """No flag syntax, build script or compiler can be derived for this host."""


@enum.unique
class HostPlatform(str, enum.Enum):
    """Hosts the generator knows how to serve. Values are the host build tool's platform names."""
    WIN64 = 'Win64'
    WIN32 = 'Win32'
    MAC = 'Mac'
    LINUX = 'Linux'

    @property
    def is_windows(self):
        return self in (HostPlatform.WIN64, HostPlatform.WIN32)


def parse_host_platform(name: str):
    """Look up a host platform by the name the host build tool uses for it, e.g. "Linux"."""
    try:
        return HostPlatform(name)
    except ValueError:
        raise UnsupportedHostPlatformError(f"Unsupported host platform {name}") from None


def detect_host_platform():
    """Figure out which HostPlatform this process is running on."""
    if sys.platform == 'win32':
        # sys.platform is 'win32' for 64-bit Pythons too, so we ask the pointer size instead.
        return HostPlatform.WIN64 if sys.maxsize > 2**32 else HostPlatform.WIN32
    if sys.platform == 'darwin':
        return HostPlatform.MAC
    if sys.platform.startswith('linux'):
        return HostPlatform.LINUX
    raise UnsupportedHostPlatformError(f"Unsupported host platform {sys.platform}")


def _path_module(host_platform: HostPlatform):
    return ntpath if host_platform.is_windows else posixpath


def normalize_path(host_platform: HostPlatform, path: str):
    """Spell a path the way the host does: collapse `..` and duplicate separators, and use the host's separator."""
    return _path_module(host_platform).normpath(path)


def join_path(host_platform: HostPlatform, *parts: str):
    return normalize_path(host_platform, _path_module(host_platform).join(*parts))


def directory_of(host_platform: HostPlatform, path: str):
    return _path_module(host_platform).dirname(normalize_path(host_platform, path))


@dataclasses.dataclass(frozen=True)
class ScriptLocator:
    """Where the engine's build script lives for a host, and what shell runs it."""
    build_script: str
    shell: str


# Relative to <engine root>/Engine/Build/BatchFiles
_BUILD_SCRIPTS: typing.Dict[HostPlatform, typing.Tuple[typing.Tuple[str, ...], str]] = {
    HostPlatform.LINUX: (('Linux', 'Build.sh'), 'bash'),
    HostPlatform.MAC: (('Mac', 'Build.sh'), 'bash'),
    HostPlatform.WIN64: (('Build.bat',), 'call'),
    HostPlatform.WIN32: (('Build.bat',), 'call'),
}


def script_locator_for(host_platform: HostPlatform, engine_root: str):
    """Resolve the build script and its shell for a host, once per run."""
    host_platform = parse_host_platform(host_platform) # Raises for anything outside the closed set
    script_parts, shell = _BUILD_SCRIPTS[host_platform]
    build_script = join_path(host_platform, engine_root, 'Engine', 'Build', 'BatchFiles', *script_parts)
    return ScriptLocator(build_script=build_script, shell=shell)


@functools.lru_cache(maxsize=None)
def find_clang_compiler(host_platform: HostPlatform):
    """Best-effort path to a Clang driver on this host.

    Only a fallback for manifests that don't say which compiler the host resolved for a target.
    """
    if host_platform.is_windows:
        return shutil.which('clang-cl.exe') or shutil.which('clang-cl') or 'clang-cl.exe'
    if host_platform == HostPlatform.MAC:
        try:
            # Unless xcode-select has been invoked (like for a beta) we'd expect '/Applications/Xcode.app/Contents/Developer/Toolchains/XcodeDefault.xctoolchain/usr/bin/clang++'
            return subprocess.check_output(('xcrun', '--find', 'clang++'), encoding='utf-8').rstrip()
        except (OSError, subprocess.CalledProcessError):
            return shutil.which('clang++') or 'clang++'
    return shutil.which('clang++') or 'clang++'
