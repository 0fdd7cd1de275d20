"""Entry point for running as a module: python -m configstore"""

from .cli import main

if __name__ == "__main__":
    main()
