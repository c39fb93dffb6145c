"""Allow running chartdeck with python -m chartdeck."""

from chartdeck.cli import main

if __name__ == "__main__":
    main()
