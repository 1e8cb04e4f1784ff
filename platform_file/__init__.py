"""Cross-platform file handle for picked and uploaded files."""

from .errors import *
from .file import *
from .sources import *
