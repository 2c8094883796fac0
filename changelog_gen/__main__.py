import sys

from changelog_gen.cli.main import main

sys.exit(main())
