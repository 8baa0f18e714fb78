import sys

from copykit.cli import main

sys.exit(main())
