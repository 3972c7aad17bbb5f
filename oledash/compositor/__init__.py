"""
Frame composition: z-ordered layout, transitions and the frame loop.
"""

from .compositor import Compositor
from .deduplicator import FrameDeduplicator
from .layout_manager import LayoutManager, foreground_mask
