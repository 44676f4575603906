__all__ = [
    "__title__", "__summary__", "__version__", "__author__", "__license__", "__copyright__"
]

__title__ = "threshold-pre"

__summary__ = 'Threshold proxy re-encryption over elliptic curves'

__version__ = "0.1.0"

__author__ = "threshold-pre developers"

__license__ = "GNU General Public License, Version 3"

__copyright__ = 'Copyright (C) 2026 threshold-pre developers'
