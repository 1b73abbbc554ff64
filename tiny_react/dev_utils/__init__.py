"""Helpers shared by the tiny-react scripts.

Key functions:
    choose_port          - Pick a free port, asking before moving off the default
    get_process_for_port - Describe whatever is listening on a port
    open_browser         - Open a URL, honouring the BROWSER variable
    check_browsers       - Ensure the app declares its target browsers
"""

from .browser import BrowserslistError, check_browsers, open_browser
from .ports import PortError, choose_port, detect_port, get_process_for_port, is_root

__all__ = [
    "BrowserslistError",
    "PortError",
    "check_browsers",
    "choose_port",
    "detect_port",
    "get_process_for_port",
    "is_root",
    "open_browser",
]
