"""Allow running as ``python -m uploadmissing``."""

from uploadmissing.cli import main

if __name__ == "__main__":
    main()
