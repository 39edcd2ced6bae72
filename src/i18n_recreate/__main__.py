import sys

from i18n_recreate.cli import main

sys.exit(main())
