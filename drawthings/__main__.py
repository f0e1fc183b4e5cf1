import sys

from drawthings.api.cli import main

sys.exit(main())
