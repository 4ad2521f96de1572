import sys

from swiftkotlin.main import main

sys.exit(main())
