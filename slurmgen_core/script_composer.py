import logging
from dataclasses import dataclass
from typing import Optional

# The scheduler expands this in each array task; it is never substituted here.
ARRAY_TASK_ID = "$SLURM_ARRAY_TASK_ID"

DEFAULT_JOB_NAME = "fiji-giani"
DEFAULT_TIME_LIMIT = "1:00:00"
DEFAULT_CPUS_PER_TASK = 16
DEFAULT_MODULE_LOAD = "ml Java/1.9.0.4"
DEFAULT_LAUNCHER = "java -jar"
LOG_FILE_PATTERN = "giani_log_ID_{task_id}.txt"


@dataclass
class ScriptConfig:
    """
    Settings for one batch script.

    `job_count` must equal the number of records in the job list, so a
    ScriptConfig is only built once the job list has been written.
    """

    output_location: str
    worker_executable_location: str
    job_list_file_location: str
    properties_file_location: str
    job_count: int
    job_name: str = DEFAULT_JOB_NAME
    time_limit: str = DEFAULT_TIME_LIMIT
    cpus_per_task: int = DEFAULT_CPUS_PER_TASK
    module_load: Optional[str] = DEFAULT_MODULE_LOAD
    launcher: str = DEFAULT_LAUNCHER

    @property
    def array_range(self):
        # A zero job count gives the legacy "0--1" literal.
        return f"0-{self.job_count - 1}"


class ScriptComposer:
    """
    Renders the SLURM array-job script for a finished job list.

    Parameters
    ----------
    logger : logging.Logger, optional
        Destination for diagnostic messages.

    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def render(self, config):
        """
        Build the batch script text.

        Parameters
        ----------
        config : ScriptConfig
            The run settings, including the final job count.

        Returns
        -------
        str
            The complete script, ending with a newline.

        Raises
        ------
        ValueError
            If `config.job_count` is negative.
        """
        if config.job_count < 0:
            raise ValueError(
                f"Job count must be non-negative, got {config.job_count}"
            )
        if config.job_count == 0:
            self.logger.warning(
                f"No jobs found; writing array range '{config.array_range}'."
            )

        log_path = f"{config.output_location}/" + LOG_FILE_PATTERN.format(
            task_id=ARRAY_TASK_ID
        )
        launch = " ".join(
            [
                "srun",
                f"--output={log_path}",
                config.launcher,
                str(config.worker_executable_location),
                str(config.job_list_file_location),
                str(config.properties_file_location),
                ARRAY_TASK_ID,
            ]
        )

        lines = [
            "#!/bin/bash",
            "",
            f"#SBATCH --job-name={config.job_name}",
            f"#SBATCH --time={config.time_limit}",
            f"#SBATCH --cpus-per-task={config.cpus_per_task}",
            f"#SBATCH --array={config.array_range}",
            "",
        ]
        if config.module_load:
            lines.append(config.module_load)
        lines.append(launch)
        return "\n".join(lines) + "\n"

    def write(self, config, handle):
        """Render the script for `config` into an open text handle."""
        handle.write(self.render(config))
        self.logger.info(
            f"Wrote batch script with array range {config.array_range}."
        )
