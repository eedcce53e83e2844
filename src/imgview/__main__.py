"""Allow ``python -m imgview``."""

from imgview.api.main import main

if __name__ == "__main__":
    main()
