import sys

from aifirst.cli import main

sys.exit(main())
