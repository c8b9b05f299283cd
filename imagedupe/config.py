"""
Configuration constants for imagedupe.

This module contains all configurable settings including:
- Supported image extensions
- Fingerprint engine parameters
- Defaults for the CLI (threshold, workers, database location)
"""

import os

# Supported image extensions, matched case-sensitively and without the dot.
# Extend this set to scan more formats; the classifier only does membership.
SUPPORTED_EXTENSIONS = frozenset({
    'bmp', 'gif', 'jpg', 'jpeg', 'jxl', 'png', 'webp',
})

# Fingerprint engine parameters
# Images are downsampled to WORKING_SIZE with a nearest-neighbour filter,
# blurred with BLUR_RADIUS, then hashed with a HASH_SIZE x HASH_SIZE
# gradient hash (dhash).
WORKING_SIZE = (256, 256)
BLUR_RADIUS = 3.0
HASH_SIZE = 8

# Bit and byte length of a serialized fingerprint
FINGERPRINT_BITS = HASH_SIZE * HASH_SIZE
FINGERPRINT_BYTES = FINGERPRINT_BITS // 8

# Default similarity threshold for duplicate discovery
# Pairs with Hamming distance strictly below this are reported (0-64 range)
DEFAULT_THRESHOLD = 10

# Default number of parallel workers for fingerprinting
DEFAULT_WORKERS = os.cpu_count() or 4

# Name of the hash database file created inside the scanned directory
DB_FILENAME = '.image_hash.db'

# Trash directory (inside the user config dir) discarded images are moved to
# Kept outside the scanned tree so recursive scans never pick it up
TRASH_DIRNAME = 'trash'

# Report comparison progress every N pairs
PROGRESS_INTERVAL = 10_000
