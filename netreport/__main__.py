import sys

from netreport.cli import main

sys.exit(main())
