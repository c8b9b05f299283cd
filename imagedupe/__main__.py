"""
Allow running the package with: python -m imagedupe

Examples:
    python -m imagedupe ~/Pictures              # Sync, save, review pairs
    python -m imagedupe ~/Pictures -R --list    # Recursive, print pairs only
"""

import sys


def main():
    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
