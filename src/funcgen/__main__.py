"""Allow running as ``python -m funcgen``."""

from funcgen.cli import main

if __name__ == "__main__":
    main()
