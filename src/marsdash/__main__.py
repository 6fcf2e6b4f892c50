import sys

from marsdash.cli import main

sys.exit(main())
