"""The editor-facing project description, written to <project dir>/.uemacs/project.json.

It tells the editor which targets exist, how to build and run each of them, and where the engine lives.
Shape:
    {
        "Version": "1.0",
        "Project": {"Name": ..., "File": ..., "Targets": {<receipt name>: {..., "Tasks": {"Build": ..., "Run": ...}}}},
        "Engine": {"Version": ..., "Root": ..., "Scripts": {"Build": ...}}
    }
"""

import dataclasses
import typing

from compilation_database import write_json_atomically
from host_platform import ScriptLocator


PROJECT_FILE_FORMAT_VERSION = '1.0'

EDITOR_TARGET_TYPE = 'Editor'


@dataclasses.dataclass(frozen=True)
class TargetDescription:
    """A resolved target, reduced to what the editor needs to build and launch it."""
    name: str
    type: str
    platform: str
    configuration: str
    receipt_name: str
    project_file: str
    binary: str


def file_name_without_any_extensions(path: str):
    """e.g. /work/Shooter/Shooter.uproject -> Shooter. Everything after the first dot goes."""
    file_name = path.replace('\\', '/').rsplit('/', 1)[-1]
    return file_name.split('.', 1)[0]


def build_command(scripts: ScriptLocator, target: TargetDescription):
    """The shell command the editor runs to build a target, via the engine's build script."""
    return f'{scripts.shell} "{scripts.build_script}" {target.name} {target.platform} {target.configuration} -project="{target.project_file}"'


def run_command(target: TargetDescription):
    """The shell command the editor runs to launch a target. Editors need to be told which project to open."""
    if target.type == EDITOR_TARGET_TYPE:
        return f'"{target.binary}" "{target.project_file}"'
    return f'"{target.binary}"'


def target_entry(scripts: ScriptLocator, target: TargetDescription):
    return {
        'Name': target.name,
        'Configuration': target.configuration,
        'Platform': target.platform,
        'Type': target.type,
        'Binary': target.binary,
        'Tasks': {
            'Build': build_command(scripts, target),
            'Run': run_command(target),
        },
    }


def project_descriptor(project_file: str,
                       engine_association: str,
                       engine_root: str,
                       scripts: ScriptLocator,
                       targets: typing.Iterable[TargetDescription]):
    """Assemble the whole project.json document.

    Targets are keyed by receipt name in the order given; a repeated receipt name keeps its first position but takes the later target's contents.
    """
    return {
        'Version': PROJECT_FILE_FORMAT_VERSION,
        'Project': {
            'Name': file_name_without_any_extensions(project_file),
            'File': project_file,
            'Targets': {target.receipt_name: target_entry(scripts, target) for target in targets},
        },
        'Engine': {
            'Version': engine_association,
            'Root': engine_root,
            'Scripts': {
                'Build': scripts.build_script,
            },
        },
    }


def write_project_descriptor(path: str, descriptor: dict, compact: bool = False):
    """Raises OSError if path can't be written; leaves any previous file untouched in that case."""
    write_json_atomically(path, descriptor, indent=None if compact else 2)
