"""Feature packages for lexdesk."""
