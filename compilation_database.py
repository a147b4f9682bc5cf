"""Accumulates compile commands over a whole generation run and writes them out as compile_commands.json.

One CompilationDatabase per run; nothing here is module-global, so back-to-back runs in one process don't share entries.
"""

import dataclasses
import json
import os
import stat
import tempfile
import typing

from compile_command_synthesizer import CompileCommandEntry


def _output_file_mode(path: str):
    """The mode a plain open(path, 'w') would leave path with: its current mode if it exists, else 0o666 filtered through the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0) # Reading the umask means setting it; put it straight back.
    os.umask(umask)
    return 0o666 & ~umask


def write_json_atomically(path: str, value, indent: typing.Optional[int] = 2):
    """Write value as JSON so that readers see either the old file or the complete new one, never a partial array.

    Raises OSError if the destination can't be created or written. No retries.
    """
    if indent is None:
        text = json.dumps(value, separators=(',', ':'), check_circular=False)
    else:
        text = json.dumps(value, indent=indent, check_circular=False) # Yay, human readability!
    text += '\n'

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    # The temp file has to share the destination's file system for os.replace to be atomic.
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.' + os.path.basename(path) + '.', suffix='.tmp', text=True)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as temp_file:
            temp_file.write(text)
        os.chmod(temp_path, _output_file_mode(path)) # mkstemp creates 0600
        os.replace(temp_path, path)
    except BaseException:
        # Safe cleanup even in the event of an error
        if os.path.lexists(temp_path):
            os.remove(temp_path)
        raise


class CompilationDatabase:
    """Source file -> compile command, for every file visited this run.

    Registering a file that's already present replaces its command: last writer wins, silently. That happens legitimately when binaries share modules.
    """
    def __init__(self):
        self._file_to_command: typing.Dict[str, str] = {}

    def __len__(self):
        return len(self._file_to_command)

    def __contains__(self, file):
        return file in self._file_to_command

    def command_for(self, file: str):
        return self._file_to_command.get(file)

    def register(self, entry: CompileCommandEntry):
        self._file_to_command[entry.file] = entry.command

    def register_all(self, entries: typing.Iterable[CompileCommandEntry]):
        for entry in entries:
            self.register(entry)

    def entries(self, directory: str):
        """All entries, sorted by file (ordinal comparison), each stamped with the shared working directory."""
        return [CompileCommandEntry(file=file, command=self._file_to_command[file], directory=directory)
                for file in sorted(self._file_to_command)]

    def flush(self, path: str, directory: str):
        """Write compile_commands.json to path. Every entry gets the same directory, the root the commands run from."""
        write_json_atomically(path, [dataclasses.asdict(entry) for entry in self.entries(directory)])
