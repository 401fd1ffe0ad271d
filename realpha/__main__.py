import sys

from .cli.recover import main

sys.exit(main())
