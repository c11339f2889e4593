"""Entry point for the staticdomains CLI.

Running ``python -m staticdomains`` calls the main function from the cli module.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
