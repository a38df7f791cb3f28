from .libs.crypto.rc4 import DEFAULT_DROP as DEFAULT_DROP
from .libs.crypto.rc4 import RC4 as RC4
from .libs.crypto.rc4 import new as new
from .version import __version__ as __version__

__title__ = "rc4kit"
__description__ = "RC4 (ARCFOUR) stream cipher with keystream prefix discard."
__url__ = "https://github.com/rc4kit/rc4kit"
__license__ = "Apache-2.0"
