"""Module entrypoint for ``python -m zint``.

Argument parsing and dispatch happen in ``zint.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
