"""Core building blocks shared by every lexdesk feature."""
