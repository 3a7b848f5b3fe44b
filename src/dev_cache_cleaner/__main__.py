import sys

from dev_cache_cleaner.cli import main

sys.exit(main())
