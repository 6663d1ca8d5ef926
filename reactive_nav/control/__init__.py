from .pursuit import DriveCommand, compute_drive_command, follow_path, select_lookahead

__all__ = ["DriveCommand", "compute_drive_command", "follow_path", "select_lookahead"]
