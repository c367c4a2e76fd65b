"""``python -m fzfopen`` runs the same command line as the ``fzfopen`` script."""

from .cli import main


if __name__ == "__main__":
    main()
