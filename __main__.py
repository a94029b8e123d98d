"""
Entry point for running sapprep as a module.

Usage:
    python -m sapprep apply
"""

import sys
from pathlib import Path

# Add parent directory to path if running directly
if __package__ is None or __package__ == '':
    sys.path.insert(0, str(Path(__file__).parent.parent))
    from sapprep.cli import main
else:
    from .cli import main

if __name__ == "__main__":
    main()
