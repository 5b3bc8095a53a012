import sys

from catan_lite.sim.cli import main

sys.exit(main())
