"""CLI entry point: python -m retrospect"""

from retrospect.cli import main

if __name__ == "__main__":
    main()
