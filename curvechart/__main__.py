import sys

from curvechart.cli import main

sys.exit(main())
