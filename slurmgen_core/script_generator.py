import logging
from pathlib import Path

from .directory_walker import DirectoryWalker
from .errors import ConfigurationError, FileCreationError
from .file_transactor import FileTransactor
from .job_list_builder import JobListBuilder
from .script_composer import ScriptComposer, ScriptConfig

SCRIPT_FILE_NAME = "Giani_Slurm_Script.sh"
JOB_LIST_FILE_NAME = "Giani_Job_List.txt"


class SlurmScriptGenerator:
    """
    Builds a job list and a matching SLURM array-job script for a
    directory tree of images.

    The job list has one line per (file, series) pair found in the
    subdirectories of `input_location`. The script launches one array
    task per line, each task receiving its job id through
    $SLURM_ARRAY_TASK_ID.

    Parameters
    ----------
    input_location : str or os.PathLike
        Root of the image tree. Must be a directory.
    output_location : str
        Directory that array tasks write their logs to.
    worker_location : str
        The worker executable launched by each task.
    properties_location : str
        Properties file passed to the worker.
    collaborator : slurmgen_utils.ImageCollaborator
        The image reader used to list files and count series.
    script_dir : str or os.PathLike, optional
        Where the job list and script are written. Defaults to
        `input_location`.
    logger : logging.Logger, optional
        Destination for progress and diagnostic messages.
    show_progress : bool, optional
        Show a progress bar while the job list is written.
    **script_options
        Extra ScriptConfig fields (job_name, time_limit, cpus_per_task,
        module_load, launcher).

    """

    def __init__(
        self,
        input_location,
        output_location,
        worker_location,
        properties_location,
        collaborator,
        script_dir=None,
        logger=None,
        show_progress=False,
        **script_options,
    ):
        self.input_location = Path(input_location)
        self.output_location = output_location
        self.worker_location = worker_location
        self.properties_location = properties_location
        self.collaborator = collaborator
        self.script_dir = Path(script_dir) if script_dir else self.input_location
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress
        self.script_options = script_options

    @property
    def script_file(self):
        return self.script_dir / SCRIPT_FILE_NAME

    @property
    def job_list_file(self):
        return self.script_dir / JOB_LIST_FILE_NAME

    def run(self):
        """
        Generate both files and report the outcome.

        Failures are logged rather than raised: the caller sees either a
        final "Done." message or a diagnostic naming the offending
        path. Files written before a failure are left in place.
        """
        try:
            self.generate()
        except (ConfigurationError, FileCreationError) as e:
            self.logger.error(str(e))
            return
        except (OSError, UnicodeError) as e:
            self.logger.error(
                f"Encountered a problem generating "
                f"{self.input_location.absolute()} - aborting. ({e})"
            )
            return
        except Exception as e:
            self.logger.error(
                f"An unexpected error occurred generating "
                f"{self.input_location.absolute()} - aborting. ({e})"
            )
            return
        self.logger.info("Done.")

    def generate(self):
        """
        Write the job list, then the script.

        Returns
        -------
        int
            The number of jobs written.

        Raises
        ------
        ConfigurationError
            If the input location is not a directory.
        FileCreationError
            If an output file cannot be replaced.
        OSError
            If writing fails part way.
        """
        walker = DirectoryWalker(
            self.input_location, self.collaborator, logger=self.logger
        )
        # Checked up front so a bad input leaves no output behind.
        walker.check_root()

        self.logger.info(f"Building job list from {walker.root}")
        builder = JobListBuilder(
            logger=self.logger, show_progress=self.show_progress
        )
        with FileTransactor(self.job_list_file, logger=self.logger) as f:
            job_count = builder.write(walker, f)

        config = ScriptConfig(
            output_location=self.output_location,
            worker_executable_location=self.worker_location,
            job_list_file_location=str(self.job_list_file.absolute()),
            properties_file_location=self.properties_location,
            job_count=job_count,
            **self.script_options,
        )
        composer = ScriptComposer(logger=self.logger)
        with FileTransactor(self.script_file, logger=self.logger) as f:
            composer.write(config, f)

        self.logger.info(f"Job list: {self.job_list_file.absolute()}")
        self.logger.info(f"Batch script: {self.script_file.absolute()}")
        return job_count
