"""Configuration management for fsh"""

import os

DEFAULT_HISTORY_FILE = "~/.fsh_history"
DEFAULT_LOG_LEVEL = "WARNING"
CAPTURE_SENTINEL = "EOF"


class Config:
    """Configuration for the fsh shell"""

    def __init__(self):
        # Session starts where the process was launched
        self.start_dir = os.path.abspath(os.getcwd())
        self.history_file = os.path.expanduser(DEFAULT_HISTORY_FILE)
        self.log_level = DEFAULT_LOG_LEVEL
        self.sentinel = CAPTURE_SENTINEL

    @classmethod
    def from_args(cls, start_dir: str = None, history_file: str = None, log_level: str = None):
        """Create configuration from command line arguments"""
        config = cls()
        if start_dir:
            config.start_dir = os.path.normpath(os.path.abspath(start_dir))
        if history_file:
            config.history_file = os.path.expanduser(history_file)
        if log_level:
            config.log_level = log_level.upper()
        return config

    def __repr__(self):
        return (
            f"Config(start_dir={self.start_dir}, history_file={self.history_file}, "
            f"log_level={self.log_level})"
        )
