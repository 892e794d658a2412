"""Version information for lexdesk package."""

__version__ = "0.3.0"
__author__ = "Lexdesk Team"
__email__ = "team@lexdesk.dev"
