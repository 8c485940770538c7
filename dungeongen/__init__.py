"""dungeongen — assemble dungeons from connector-based building modules."""

__version__ = "0.1.0"
