"""
argot: validate command definitions, parse argument vectors, suggest fixes.

    >>> from argot import CommandDefinition, OptionDefinition, parse
    >>> build = CommandDefinition("build", options=[OptionDefinition("output", short="o")])
    >>> parse(["-o", "dist"], build).options["output"]
    'dist'
"""
__title__ = 'argot'
__author__ = 'Argot Contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from . import definitions, faults, parser, suggestions, validation
from .definitions import *
from .faults import *
from .parser import *
from .suggestions import *
from .validation import *

VersionInfo = __import__("collections").namedtuple(
    "VersionInfo",
    ("major", "minor", "micro", "releaselevel", "serial", "metadata"),
)

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    *definitions.__all__,
    *faults.__all__,
    *parser.__all__,
    *suggestions.__all__,
    *validation.__all__,
)
