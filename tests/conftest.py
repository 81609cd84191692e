"""Make the tests import cruddy from this checkout's src/ directory."""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent.parent / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Drop any cruddy modules imported before the path change (an installed copy)
for name in [m for m in sys.modules if m == "cruddy" or m.startswith("cruddy.")]:
    sys.modules.pop(name)
