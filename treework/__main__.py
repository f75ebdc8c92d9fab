import sys

from treework.cli.main import main

sys.exit(main())
