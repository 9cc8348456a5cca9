from linkdupes.core.models import Action, Algorithm, KeepPolicy

KEEP_CHOICES = [policy.value for policy in KeepPolicy]

KEEP_HELP_TEXT = (
    "Which file of each duplicate group survives (required):\n"
    "  latest   : newest modification time\n"
    "  oldest   : oldest modification time\n"
    "  highest  : shortest path (closest to root)\n"
    "  deepest  : longest path\n"
    "  first    : first in enumeration order\n"
    "  last     : last in enumeration order\n"
)

MODE_CHOICES = [action.value for action in Action]

MODE_HELP_TEXT = (
    "Action applied to every other file of a group (default: symlink):\n"
    "  symlink  : replace with a symbolic link to the kept file\n"
    "  hardlink : replace with a hardlink to the kept file\n"
    "  lnk      : replace with a Windows shortcut (.lnk) to the kept file\n"
    "  delete   : remove the file\n"
    "  trash    : move the file to the system trash\n"
)

ALGORITHM_CHOICES = [algorithm.value for algorithm in Algorithm]

ALGORITHM_HELP_TEXT = (
    "Equality criterion (default: md5):\n"
    "  name     : same file name (no content check)\n"
    "  size     : same size (no content check)\n"
    "  crc32    : CRC-32 of the content\n"
    "  md5      : MD5 of the content\n"
    "  sha256   : SHA-256 of the content\n"
    "  sha512   : SHA-512 of the content\n"
    "  xxh64    : xxHash64 of the content (fast, non-cryptographic)\n"
)

EPILOG_TEXT = """
Examples:
  Preview what would happen in the current folder, keeping the oldest copy
  %(prog)s -k oldest --dry-run

  Replace duplicates under ~/Photos (recursively) with hardlinks to the newest copy
  %(prog)s -p ~/Photos -r -k latest -m hardlink

  Delete duplicates larger than 1MB found by SHA-256 with 8 hashing threads
  %(prog)s -p /data -r -k highest -m delete -a sha256 -t 8 --min-size 1MB

Hashes are cached in duplicates.hashes.csv and every run is appended to
duplicates.log, both inside the scanned folder.
"""
