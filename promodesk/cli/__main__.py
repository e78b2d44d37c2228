"""Allow ``python -m promodesk.cli`` to run the backup tool."""

import sys

from promodesk.cli.backup import main

sys.exit(main())
