"""
Dependency initialization for the scanner package.

Handles PIL, imagehash, JPEG XL support, and tqdm imports with proper
error handling and configuration.
"""

from __future__ import annotations

import warnings
import logging
from typing import Optional, Any

# Module-level logger
_logger = logging.getLogger(__name__)

# Check for required dependencies
try:
    from PIL import Image, ImageFilter, UnidentifiedImageError
    import imagehash
except ImportError:
    raise ImportError(
        "Required packages not found!\n"
        "Install with: pip install Pillow imagehash"
    )

# Register JPEG XL support via pillow-jxl-plugin
# Importing the plugin registers the opener with Pillow
HAS_JXL_SUPPORT = False
try:
    import pillow_jxl  # noqa: F401
    HAS_JXL_SUPPORT = True
    _logger.debug("JPEG XL support enabled via pillow-jxl-plugin")
except ImportError:
    _logger.debug(
        "pillow-jxl-plugin not installed - .jxl files will fail to decode. "
        "Install with: pip install pillow-jxl-plugin"
    )

# Increase PIL's decompression bomb limit for large images
# Default is ~89MP (178 million pixels), we increase to 500MP for photo collections
Image.MAX_IMAGE_PIXELS = 500_000_000  # 500 megapixels

# Images are downsampled right after decoding, so the warning is noise
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

# Optional: tqdm for progress bars
# Store as Optional[Any] to satisfy type checkers when tqdm is not installed
HAS_TQDM = False
_tqdm_class: Optional[Any] = None

try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


__all__ = [
    'Image',
    'ImageFilter',
    'UnidentifiedImageError',
    'imagehash',
    'HAS_JXL_SUPPORT',
    'HAS_TQDM',
    '_tqdm_class',
    '_logger',
]
