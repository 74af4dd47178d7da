"""Startup errors. Each one aborts the launcher before anything is spawned."""


class LauncherError(Exception):
    """Base class for fatal launcher errors."""


class ConfigNotFound(LauncherError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Config file not found at: {path}")


class ConfigParseError(LauncherError):
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


class NoServersSelected(LauncherError):
    def __init__(self):
        super().__init__("No servers match the given filter.")
