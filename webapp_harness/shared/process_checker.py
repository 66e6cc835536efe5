import subprocess
from typing import Optional

from webapp_harness.shared.logger import Logger

logger = Logger.get(__name__)


class ProcessChecker:
    """
    Utility class for inspecting and tearing down child processes.
    Consolidates the liveness and kill patterns used by the supervisor.
    """

    @staticmethod
    def check_process_running(process: Optional[subprocess.Popen]) -> bool:
        """
        Check if a subprocess is still running.

        Args:
            process: The subprocess to check

        Returns:
            True if the process is running, False otherwise
        """
        if process is None:
            return False

        return_code = process.poll()
        if return_code is not None:
            logger.debug(f"Process has terminated with return code {return_code}")
            return False

        return True

    @staticmethod
    def kill_process(process: Optional[subprocess.Popen]) -> Optional[int]:
        """
        Forcefully kill a subprocess and reap it.

        Args:
            process: The subprocess to kill

        Returns:
            The process return code, or None if there was no process
        """
        if process is None:
            return None

        if ProcessChecker.check_process_running(process):
            logger.warning(f"Killing process {process.pid}")
            try:
                process.kill()
            except ProcessLookupError:
                # Exited between poll() and kill().
                pass
        return process.wait()
