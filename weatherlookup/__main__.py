import sys

from weatherlookup.cli import main

sys.exit(main())
