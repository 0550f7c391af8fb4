import sys

from server_health.cli import main

sys.exit(main())
