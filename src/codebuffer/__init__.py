"""Line-indexed code windows for srclens."""

from codebuffer.buffer import CodeBuffer, Formatting, LineEntry
from codebuffer.kinds import comment_leader_for, kind_from_filename
from codebuffer.render import RenderOptions

__all__ = [
    "CodeBuffer",
    "Formatting",
    "LineEntry",
    "RenderOptions",
    "comment_leader_for",
    "kind_from_filename",
]
