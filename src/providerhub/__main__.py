"""Entry point for 'python -m providerhub'."""

from providerhub.cli import main

if __name__ == "__main__":
    main()
