"""
gnuplot renderer.

Runs the gnuplot executable on a generated script file as a child process.
The script itself decides the output file; this class only reports whether
gnuplot succeeded.
"""

import subprocess
from pathlib import Path

from ..domain.errors import PlotRenderError
from ..utils.logging import get_module_logger
from ..utils.tracing import current_trace_id


logger = get_module_logger()


class GnuplotRenderer:
    """
    Runs `gnuplot <script>` and raises PlotRenderError on any failure.

    Usage:
        renderer = GnuplotRenderer("/opt/homebrew/bin/gnuplot", timeout_seconds=60)
        renderer.render(Path("/tmp/moquery-abc/plot.gp"))
    """

    def __init__(self, executable: str, timeout_seconds: int = 60):
        self.executable = executable
        self.timeout_seconds = timeout_seconds

    def render(self, script_path: Path) -> None:
        trace_id = current_trace_id()
        logger.info("Running gnuplot", executable=self.executable, script=str(script_path), trace_id=trace_id)

        try:
            result = subprocess.run(
                [self.executable, str(script_path)],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise PlotRenderError(
                f"gnuplot executable not found: {self.executable}",
                details={"executable": self.executable},
            ) from e
        except subprocess.TimeoutExpired as e:
            raise PlotRenderError(
                f"gnuplot timed out after {self.timeout_seconds}s",
                details={"executable": self.executable},
            ) from e
        except OSError as e:
            raise PlotRenderError(f"Failed to run gnuplot: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            logger.error(
                "gnuplot failed",
                returncode=result.returncode,
                stderr=stderr,
                trace_id=trace_id
            )
            raise PlotRenderError(
                f"gnuplot exited with status {result.returncode}: {stderr}",
                details={"returncode": result.returncode, "stderr": stderr},
            )
