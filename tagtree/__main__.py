"""``python -m tagtree DOCUMENTS.json`` prints the tag tree of a document dump."""

from .cli import main


if __name__ == "__main__":
    main()
