"""
This module contains classes and other code for representing the world the
planner deals with: its stations, the links between them, the vehicles that
serve those links, and the line-oriented turn format they arrive in.
"""

from .network import *
