"""Section library processing script.

Strips vendor copyright comments from imported sections, rewrites the
``ss-`` prefix to ``sg-`` and prefixes schema names with ``SG-``.

Usage:
    python -m scripts.process_sections [SECTIONS_DIR]
    or
    python scripts/process_sections.py [SECTIONS_DIR] (after pip install -e .)

SECTIONS_DIR defaults to the configured sections directory.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sectionforge.core.config import get_settings
from sectionforge.core.logging_config import setup_logging
from sectionforge.strategies.catalog.maintenance import process_directory


def main() -> int:
    """Process every section file of the catalog directory."""
    settings = get_settings()
    setup_logging(settings)

    sections_dir = Path(sys.argv[1]).resolve() if len(sys.argv) > 1 else settings.sections_dir

    try:
        counts = process_directory(sections_dir)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1

    print("Processing complete!")
    print(f"   - Processed: {counts['processed']} files")
    print(f"   - Renamed: {counts['renamed']} files")
    print(f"   - Failed: {counts['failed']} files")
    print(f"Preview images belong in {sections_dir / 'images'} as sg-<section-name>.png")
    return 0 if counts["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
