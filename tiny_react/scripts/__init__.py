"""tiny-react scripts and their dispatcher.

``cli`` maps ``tiny-react-scripts <script>`` onto the script files in this
directory (``start.py``, ``test.py``), which are executed as standalone
programs rather than imported.
"""

from .cli import (
    DispatchOutcome,
    ScriptInvocation,
    ScriptNotFoundError,
    parse_invocation,
    resolve_script_path,
    run_script,
)

__all__ = [
    "DispatchOutcome",
    "ScriptInvocation",
    "ScriptNotFoundError",
    "parse_invocation",
    "resolve_script_path",
    "run_script",
]
