import sys

from mongo_slow.main import main

sys.exit(main())
