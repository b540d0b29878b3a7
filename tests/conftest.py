import sys
from pathlib import Path

# Ensure the `localhero` package is importable when running pytest from a plain checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
