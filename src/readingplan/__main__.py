"""
Enable running the package with: python -m readingplan

- __init__.py  -> runs when someone does `import readingplan`
- __main__.py  -> runs when someone does `python -m readingplan`
- main.py      -> contains the actual main() function and CLI logic
"""

from .main import main

# raise SystemExit is equivalent to sys.exit() but doesn't require importing sys
raise SystemExit(main())
