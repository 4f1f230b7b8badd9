__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argosy'
__author__ = 'Seralix Source'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .dispatch import *
from .faults import *
from .filesystem import *
from .schema import *
from .types import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the schema model
__all__ += schema.__all__  # type: ignore[attr-defined]
# Load the exposed API of the argument types
__all__ += types.__all__  # type: ignore[attr-defined]
# Load the exposed API of the filesystem roots
__all__ += filesystem.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += dispatch.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
