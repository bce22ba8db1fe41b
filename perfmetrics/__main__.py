"""Allow ``python -m perfmetrics``."""

from .cli import main

if __name__ == "__main__":
    main()
