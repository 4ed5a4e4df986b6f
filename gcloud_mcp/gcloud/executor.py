import asyncio
import shutil
from typing import List, Optional, Sequence

from gcloud_mcp.exceptions import GcloudNotFoundError, GcloudTimeoutError
from gcloud_mcp.logger import logger
from gcloud_mcp.schema import GcloudInvocationResult

GCLOUD_BINARY = "gcloud"


def find_gcloud_path() -> Optional[str]:
    """Return the resolved path of the gcloud binary on PATH, if any."""
    return shutil.which(GCLOUD_BINARY)


def is_available() -> bool:
    return find_gcloud_path() is not None


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").replace("\r", "")


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


class GcloudExecutor:
    """Runs the gcloud binary and captures its output.

    Every call spawns a fresh process with stdin closed. Non-zero exit codes
    are returned, not raised; only a process that can not be started (or that
    overruns ``timeout``) raises. A cancelled call kills its process.
    """

    def __init__(self, gcloud_path: str, timeout: Optional[float] = None):
        self.gcloud_path = gcloud_path
        self.timeout = timeout

    async def execute(self, args: Sequence[str]) -> GcloudInvocationResult:
        command: List[str] = [self.gcloud_path, *args]
        logger.debug(f"Spawning: {command}")

        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"gcloud timed out after {self.timeout}s, killing process {process.pid}")
            raise GcloudTimeoutError(
                f"gcloud command timed out after {self.timeout} seconds: {' '.join(args)}"
            )
        except asyncio.CancelledError:
            logger.info(f"gcloud call cancelled, killing process {process.pid}")
            raise
        finally:
            # Timeout or cancellation leaves the child running.
            if process.returncode is None:
                await _kill(process)

        return GcloudInvocationResult(
            code=process.returncode,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
        )


def find_executable(timeout: Optional[float] = None) -> GcloudExecutor:
    """Locate gcloud on PATH and return an executor for it.

    Raises:
        GcloudNotFoundError: If no gcloud binary is available
    """
    gcloud_path = find_gcloud_path()
    if gcloud_path is None:
        raise GcloudNotFoundError("gcloud executable not found")
    logger.debug(f"Using gcloud at {gcloud_path}")
    return GcloudExecutor(gcloud_path, timeout=timeout)
