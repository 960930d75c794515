"""Launch profile and command line handling."""

from .args import parse_args, unescape
from .profile import LaunchDescriptor, extract_launch_profile

__all__ = [
    "parse_args",
    "unescape",
    "LaunchDescriptor",
    "extract_launch_profile",
]
