"""Allow ``python -m plan_wolf``."""

from .cli import main

if __name__ == "__main__":
    main()
