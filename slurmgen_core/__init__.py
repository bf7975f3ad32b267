from .directory_walker import DirectoryWalker
from .job_list_builder import JobListBuilder, JobRecord
from .script_composer import ScriptComposer, ScriptConfig
from .file_transactor import FileTransactor
from .script_generator import SlurmScriptGenerator
from . import errors

__all__ = [
    "DirectoryWalker",
    "JobListBuilder",
    "JobRecord",
    "ScriptComposer",
    "ScriptConfig",
    "FileTransactor",
    "SlurmScriptGenerator",
    "errors",
]
