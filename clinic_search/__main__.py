# clinic_search/__main__.py

"""Entry point for executing clinic_search as a module.

Allows running the clinic search CLI with `python -m clinic_search`.
"""

from .main import main

if __name__ == "__main__":
    main()
