"""
Change Desk CLI

A terminal interface for the change request approval workflow.
Built on Textual for a rich TUI experience.
"""

__version__ = "0.1.0"

from change_desk_cli.config import Config, get_config, init_project

__all__ = [
    "__version__",
    "Config",
    "get_config",
    "init_project",
]
