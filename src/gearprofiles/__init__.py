from importlib.metadata import version, PackageNotFoundError
from gearprofiles.defs import *
from gearprofiles.coordinates import *
from gearprofiles.function_generators import *
from gearprofiles.curve import *
from gearprofiles.gearprofiles_base_classes import *
from gearprofiles.cutter import *
from gearprofiles.involute import *
from gearprofiles.cycloid import *
from gearprofiles.escapement import *
from gearprofiles.ratchet import *
from gearprofiles.sprockets import *
from gearprofiles.cutouts import *
from gearprofiles.gearmath import *
from gearprofiles.synthesis import *


try:
    __version__ = version("gearprofiles")
except PackageNotFoundError:
    __version__ = "unknown version"
