"""Allow ``python -m fedcompose``."""

from .cli import main

if __name__ == "__main__":
    main()
