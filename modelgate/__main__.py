"""Entry point for ``python -m modelgate``."""

from modelgate.cli.cli import main

if __name__ == "__main__":
    main()
