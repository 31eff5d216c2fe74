"""Module entrypoint for `python -m studyposts`."""

import sys

from studyposts.launcher import main

if __name__ == "__main__":
    sys.exit(main())
