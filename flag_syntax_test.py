import unittest

import flag_syntax
from flag_syntax import CppStandard, FlagStyle
from host_platform import HostPlatform


class TestStandardFlag(unittest.TestCase):
    def test_posix_table(self):
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, CppStandard.CPP14), '-std=c++14')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, CppStandard.CPP17), '-std=c++17')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, CppStandard.DEFAULT), '-std=c++17')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.MAC, CppStandard.LATEST), '-std=c++20')

    def test_windows_table(self):
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, CppStandard.CPP14), '/std:c++14')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, CppStandard.DEFAULT), '/std:c++17')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, CppStandard.LATEST), '/std:c++latest')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN32, CppStandard.CPP17), '/std:c++17')

    def test_host_build_tool_names(self):
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, 'Cpp17'), '-std=c++17')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, 'Latest'), '/std:c++latest')

    def test_unknown_standard_is_empty(self):
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, 'Cpp20'), '')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, 'Cpp20'), '')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, None), '')

    def test_unhashable_standard_is_empty(self):
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.LINUX, ['Cpp17']), '')
        self.assertEqual(flag_syntax.standard_flag(HostPlatform.WIN64, {'standard': 'Cpp17'}), '')


class TestFormatFor(unittest.TestCase):
    def test_style_follows_host(self):
        self.assertEqual(flag_syntax.flag_style_for(HostPlatform.LINUX), FlagStyle.POSIX)
        self.assertEqual(flag_syntax.flag_style_for(HostPlatform.MAC), FlagStyle.POSIX)
        self.assertEqual(flag_syntax.flag_style_for(HostPlatform.WIN64), FlagStyle.MSVC)
        self.assertEqual(flag_syntax.flag_style_for(HostPlatform.WIN32), FlagStyle.MSVC)

    def test_posix_templates(self):
        templates = flag_syntax.format_for(HostPlatform.LINUX)
        self.assertEqual(templates.force_include.format('/e/Defs.h'), ' -include "/e/Defs.h"')
        self.assertEqual(templates.user_include.format('/a/inc'), ' -I"/a/inc"')
        self.assertEqual(templates.system_include.format('/usr/include'), ' -I"/usr/include"')
        self.assertEqual(templates.definition.format('FOO=1'), ' -D"FOO=1"')

    def test_msvc_templates(self):
        templates = flag_syntax.format_for(HostPlatform.WIN64)
        self.assertEqual(templates.force_include.format('C:\\e\\Defs.h'), ' /FI"C:\\e\\Defs.h"')
        self.assertEqual(templates.user_include.format('C:\\a\\inc'), ' /I"C:\\a\\inc"')
        self.assertEqual(templates.system_include.format('C:\\sdk'), ' /I"C:\\sdk"')
        self.assertEqual(templates.definition.format('FOO=1'), ' /D"FOO=1"')

    def test_braces_in_arguments_pass_through(self):
        templates = flag_syntax.format_for(HostPlatform.LINUX)
        self.assertEqual(templates.definition.format('INIT={0}'), ' -D"INIT={0}"')


class TestSystemCompileFlags(unittest.TestCase):
    def test_mac_needs_objective_cpp(self):
        self.assertEqual(flag_syntax.system_compile_flags(HostPlatform.MAC), '-x objective-c++ -stdlib=libc++')

    def test_other_hosts_need_nothing(self):
        for host_platform in (HostPlatform.LINUX, HostPlatform.WIN64, HostPlatform.WIN32):
            self.assertEqual(flag_syntax.system_compile_flags(host_platform), '')


if __name__ == '__main__':
    unittest.main()
