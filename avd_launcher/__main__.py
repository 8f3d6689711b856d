"""Allow ``python -m avd_launcher``."""

import sys

from avd_launcher.cli import main

sys.exit(main())
