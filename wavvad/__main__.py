import sys

from wavvad.cli import main

sys.exit(main())
