"""Allow ``python -m modmanifest`` to run the CLI."""

import sys

from .cli import main

if __name__ == "__main__":
    main(sys.argv[1:])
