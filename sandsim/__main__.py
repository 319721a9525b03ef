import sys

from sandsim.app import main

sys.exit(main())
