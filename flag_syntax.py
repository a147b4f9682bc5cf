"""Translate logical compiler options into command-line tokens.

Two syntaxes are supported: POSIX-style (clang/gcc) and MSVC-style (cl.exe and clang-cl).
Which one applies is decided by the host platform the generator runs on, not by the platform being built for.
Flags reference: https://clang.llvm.org/docs/ClangCommandLineReference.html and https://docs.microsoft.com/en-us/cpp/build/reference/compiler-options
"""

import dataclasses
import enum
import typing

from host_platform import HostPlatform


@enum.unique
class FlagStyle(enum.Enum):
    POSIX = 'posix'
    MSVC = 'msvc'


@enum.unique
class CppStandard(str, enum.Enum):
    """C++ standard versions a module may ask for. Values are the host build tool's names, e.g. "Cpp17"."""
    CPP14 = 'Cpp14'
    CPP17 = 'Cpp17'
    DEFAULT = 'Default'
    LATEST = 'Latest'


@dataclasses.dataclass(frozen=True)
class FlagTemplates:
    """str.format templates, one argument each, producing a fully-quoted token with its leading separator space."""
    force_include: str
    user_include: str
    system_include: str
    definition: str


_POSIX_TEMPLATES = FlagTemplates(
    force_include=' -include "{0}"',
    user_include=' -I"{0}"',
    system_include=' -I"{0}"',
    definition=' -D"{0}"',
)

_MSVC_TEMPLATES = FlagTemplates(
    force_include=' /FI"{0}"',
    user_include=' /I"{0}"',
    system_include=' /I"{0}"',
    definition=' /D"{0}"',
)

_TEMPLATES = {
    FlagStyle.POSIX: _POSIX_TEMPLATES,
    FlagStyle.MSVC: _MSVC_TEMPLATES,
}

_STANDARD_FLAGS: typing.Dict[FlagStyle, typing.Dict[CppStandard, str]] = {
    FlagStyle.POSIX: {
        CppStandard.CPP14: '-std=c++14',
        CppStandard.CPP17: '-std=c++17',
        CppStandard.DEFAULT: '-std=c++17',
        CppStandard.LATEST: '-std=c++20',
    },
    FlagStyle.MSVC: {
        CppStandard.CPP14: '/std:c++14',
        CppStandard.CPP17: '/std:c++17',
        CppStandard.DEFAULT: '/std:c++17',
        CppStandard.LATEST: '/std:c++latest',
    },
}

# Hosts that need a dialect switch on top of the standard. Mac engine headers are Objective-C++ and link against libc++.
_SYSTEM_COMPILE_FLAGS: typing.Dict[HostPlatform, str] = {
    HostPlatform.MAC: '-x objective-c++ -stdlib=libc++',
}


def flag_style_for(host_platform: HostPlatform):
    return FlagStyle.MSVC if host_platform.is_windows else FlagStyle.POSIX


def format_for(host_platform: HostPlatform):
    """Get the token templates for the host's flag syntax."""
    return _TEMPLATES[flag_style_for(host_platform)]


def standard_flag(host_platform: HostPlatform, standard: typing.Union[CppStandard, str, None]):
    """Get the language-standard switch, e.g. -std=c++17.

    Unknown standards, including non-string junk like a list, yield '' so the caller simply leaves the switch out; a missing flag only degrades editor intelligence.
    """
    # CppStandard is a str enum, so the plain names the host writes ("Cpp17") hash and compare equal to the members.
    try:
        return _STANDARD_FLAGS[flag_style_for(host_platform)].get(standard, '')
    except TypeError: # Unhashable, e.g. a JSON array or object from the manifest
        return ''


def system_compile_flags(host_platform: HostPlatform):
    """Get extra host-specific switches that go right after the standard; usually ''."""
    return _SYSTEM_COMPILE_FLAGS.get(host_platform, '')
