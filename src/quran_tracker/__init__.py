"""
Quran Tracker

A single-user recitation progress tracker: scores recitation sessions against
a fixed weighted rubric, keeps a running average per student and stores the
class roster locally.
"""

__version__ = "0.1.0"
